from __future__ import annotations

import pickle

import pytest

from errors import InvalidWord, InvalidWordBank
from lexicon import LetterCounter, WordBank, load_word_bank


def test_word_bank_dedupes_and_lowercases():
    bank = WordBank(["Could", "match", "could", " coast ", "", "MATCH"])
    assert bank.words == ("could", "match", "coast")
    assert bank.word_length == 5
    assert len(bank) == 3
    assert bank[1] == "match"
    assert list(bank) == ["could", "match", "coast"]
    assert bank.index_of("coast") == 2
    assert "match" in bank
    assert "cover" not in bank


def test_word_bank_index_of_unknown():
    bank = WordBank(["abc"])
    with pytest.raises(InvalidWord):
        bank.index_of("xyz")


@pytest.mark.parametrize(
    "words",
    [
        [],
        ["", "  "],
        ["abc", "abcd"],
        ["ab1"],
        ["año"],
    ],
)
def test_word_bank_rejects(words):
    with pytest.raises(InvalidWordBank):
        WordBank(words)


def test_invalid_word_bank_is_value_error():
    with pytest.raises(ValueError):
        WordBank([])


def test_word_bank_equality_and_pickle():
    a = WordBank(["abc", "def"])
    b = WordBank(["abc", "def", "abc"])
    assert a == b
    assert hash(a) == hash(b)
    assert a != WordBank(["def", "abc"])
    restored = pickle.loads(pickle.dumps(a))
    assert restored == a
    assert restored.index_of("def") == 1
    assert restored.word_length == 3


def test_letter_counter():
    counter = LetterCounter(["could", "match", "coast"])
    assert counter.num_words == 3
    assert counter.num_words_with_letter("c") == 3
    assert counter.num_words_with_letter("o") == 2
    assert counter.num_words_with_letter("z") == 0
    assert counter.num_words_with_located_letter("c", 0) == 2
    assert counter.num_words_with_located_letter("c", 3) == 1
    assert counter.num_words_with_located_letter("t", 4) == 1


def test_letter_counter_counts_words_not_letters():
    counter = LetterCounter(["abba", "abcd"])
    assert counter.num_words_with_letter("b") == 2
    assert counter.num_words_with_letter("a") == 2


# ------------------------------------------------------------------
# Loading
# ------------------------------------------------------------------

def test_load_txt(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("Could\n\nmatch\ncoast\ncould\n", encoding="utf-8")
    bank = load_word_bank(path)
    assert bank.words == ("could", "match", "coast")


def test_load_txt_strips_accents(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("árbol\nbarco\n", encoding="utf-8")
    assert load_word_bank(path).words == ("arbol", "barco")


def test_load_csv(tmp_path):
    path = tmp_path / "words.csv"
    path.write_text("word,count\ncould,10\nmatch,3\n", encoding="utf-8")
    assert load_word_bank(path).words == ("could", "match")


def test_load_csv_without_word_column(tmp_path):
    path = tmp_path / "words.csv"
    path.write_text("term\ncould\n", encoding="utf-8")
    with pytest.raises(InvalidWordBank):
        load_word_bank(path)


def test_load_filters_length(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("abc\nabcd\nxyz\n", encoding="utf-8")
    assert load_word_bank(path, word_length=3).words == ("abc", "xyz")
    with pytest.raises(InvalidWordBank):
        load_word_bank(path)
    with pytest.raises(InvalidWordBank):
        load_word_bank(path, word_length=7)


def test_load_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_word_bank(tmp_path / "nope.txt")
