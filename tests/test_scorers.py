from __future__ import annotations

import itertools
from collections import Counter

import numpy as np
import pytest

from errors import InvalidConfiguration
from fanout import rank_candidates
from lexicon import LetterCounter, WordBank
from restrictions import Restrictions, filter_possible, fold
from scorers.approximate_eliminations import (
    MaxApproximateEliminationsScorer,
    expected_eliminations_for_letter,
)
from scorers.combo_eliminations import MaxComboEliminationsScorer
from scorers.located_letters import LocatedLettersScorer
from scorers.max_eliminations import (
    MaxEliminationsScorer,
    expected_eliminations,
    expected_eliminations_rows,
)
from scorers.random_guess import RandomScorer
from scorers.unique_letter_frequency import MaxUniqueLetterFrequencyScorer
from scorers.unique_unguessed_letter_frequency import MaxUniqueUnguessedLetterFrequencyScorer
from strategy import GuessFrom
from wordle_env import GuessRecord, LetterState, clue

A = LetterState.ABSENT
P = LetterState.PRESENT_ELSEWHERE
C = LetterState.CORRECT

LOCATED_BANK = WordBank(["alpha", "allot", "begot", "below", "endow", "ingot"])


def brute_force_eliminations(guess, possible):
    counts = Counter(clue(guess, w) for w in possible)
    n = len(possible)
    return sum(c * (n - c) for c in counts.values()) / n


# ------------------------------------------------------------------
# Unique letter frequency
# ------------------------------------------------------------------

def test_unique_letter_frequency():
    possible = ("could", "match", "coast", "cover")
    scorer = MaxUniqueLetterFrequencyScorer()
    r = Restrictions.empty(5)
    assert [scorer.score(w, possible, r) for w in possible] == [10, 10, 12, 10]
    # Repeated letters count once.
    assert scorer.score("ccccc", possible, r) == 4


def test_unique_unguessed_letter_frequency():
    possible = ("could", "match", "coast", "cover")
    scorer = MaxUniqueUnguessedLetterFrequencyScorer()
    empty = Restrictions.empty(5)
    plain = MaxUniqueLetterFrequencyScorer()
    # Nothing guessed yet: same as the plain frequency scorer.
    assert [scorer.score(w, possible, empty) for w in possible] == [
        plain.score(w, possible, empty) for w in possible
    ]

    r = fold([GuessRecord("coast", (C, C, A, A, A))])
    possible = filter_possible(possible, r)
    assert possible == ("could", "cover")
    assert r.letters == frozenset("coast")
    # c and o are in both answers but were guessed already.
    assert scorer.score("could", possible, r) == 3
    assert scorer.score("cover", possible, r) == 3
    assert scorer.score("match", possible, r) == 0
    assert plain.score("could", possible, r) == 7


# ------------------------------------------------------------------
# Random baseline
# ------------------------------------------------------------------

def test_random_scores_only_possible_answers():
    bank = WordBank(["".join(p) for p in itertools.product("abcd", repeat=3)])
    possible = bank.words[:20]
    r = Restrictions.empty(3)
    scorer = RandomScorer(seed=3)
    scores = {w: scorer.score(w, possible, r) for w in bank}
    assert all(0.0 <= scores[w] < 1.0 for w in possible)
    assert all(scores[w] == 0.0 for w in bank.words[20:])
    # Same seed, same scores, in any order.
    again = RandomScorer(seed=3)
    assert {w: again.score(w, possible, r) for w in reversed(bank.words)} == scores
    other = RandomScorer(seed=4)
    assert {w: other.score(w, possible, r) for w in bank} != scores


def test_random_ranking_independent_of_workers():
    bank = WordBank(["".join(p) for p in itertools.product("abcd", repeat=3)])
    r = Restrictions.empty(3)
    serial = rank_candidates(RandomScorer(), bank.words, bank.words[:30], r, workers=1)
    parallel = rank_candidates(
        RandomScorer(), bank.words, bank.words[:30], r, workers=2, chunk_size=7,
    )
    assert serial == parallel
    assert all(e.is_possible for e in serial[:30])


# ------------------------------------------------------------------
# Located letters
# ------------------------------------------------------------------

@pytest.mark.parametrize(
    "word, expected",
    [
        ("alpha", 4 + 5 + 2 + 2 + 1),
        ("allot", 4 + 5 + 2 + 10 + 6),
        ("begot", 4 + 5 + 4 + 10 + 6),
        ("below", 4 + 5 + 5 + 10 + 4),
        ("endow", 4 + 4 + 2 + 10 + 4),
        ("ingot", 2 + 4 + 4 + 10 + 6),
        ("other", 5 + 3 + 1 + 3 + 0),
    ],
)
def test_located_letters_no_restrictions(word, expected):
    scorer = LocatedLettersScorer()
    r = Restrictions.empty(5)
    assert scorer.score(word, LOCATED_BANK.words, r) == expected


@pytest.mark.parametrize(
    "word, expected",
    [
        ("alpha", 0),
        ("below", 0 + 0 + 0 + 1 + 2),
        ("endow", 1 + 2 + 2 + 1 + 2),
        ("other", 0),
    ],
)
def test_located_letters_after_clue(word, expected):
    r = fold([GuessRecord("begot", (A, P, A, C, A))])
    possible = filter_possible(LOCATED_BANK, r)
    assert possible == ("endow",)
    assert LocatedLettersScorer().score(word, possible, r) == expected


@pytest.mark.parametrize(
    "word, expected",
    [
        ("alpha", 0 + 1 + 0 + 0 + 0),
        ("below", 2 + 1 + 2 + 2 + 4),
        ("endow", 1 + 2 + 2 + 2 + 4),
        ("other", 0),
    ],
)
def test_located_letters_present_maybe_here(word, expected):
    r = fold([GuessRecord("other", (P, A, A, P, A))])
    possible = filter_possible(LOCATED_BANK, r)
    assert possible == ("below", "endow")
    assert LocatedLettersScorer().score(word, possible, r) == expected


# ------------------------------------------------------------------
# Approximate eliminations
# ------------------------------------------------------------------

def test_approximate_letter_worked_example():
    counter = LetterCounter(["could", "match", "coast"])
    got = expected_eliminations_for_letter(counter, "c", 0, True)
    assert got == pytest.approx(1 * (2 / 3) + 2 * (1 / 3) + 3 * (0 / 3))


def test_approximate_repeated_letter_skips_absent_term():
    counter = LetterCounter(["could", "match", "coast"])
    new = expected_eliminations_for_letter(counter, "o", 3, True)
    repeated = expected_eliminations_for_letter(counter, "o", 3, False)
    # 'o' is in 2 of 3 words: the absent outcome adds 2 * 1 / 3.
    assert new - repeated == pytest.approx(2 / 3)


def test_approximate_score_is_sum_of_letters():
    possible = ("could", "match", "coast")
    counter = LetterCounter(possible)
    expected = sum(
        expected_eliminations_for_letter(counter, letter, i, letter not in "could"[:i])
        for i, letter in enumerate("could")
    )
    scorer = MaxApproximateEliminationsScorer()
    assert scorer.score("could", possible, Restrictions.empty(5)) == pytest.approx(expected)


def test_approximate_resolved_positions_add_nothing():
    r = fold([GuessRecord("other", (P, A, A, P, A))])
    possible = filter_possible(LOCATED_BANK, r)
    counter = LetterCounter(possible)
    scorer = MaxApproximateEliminationsScorer()
    for word in LOCATED_BANK:
        full = sum(
            expected_eliminations_for_letter(counter, letter, i, letter not in word[:i])
            for i, letter in enumerate(word)
        )
        assert scorer.score(word, possible, r) == pytest.approx(full)


# ------------------------------------------------------------------
# Max eliminations
# ------------------------------------------------------------------

def test_expected_eliminations_helpers():
    assert expected_eliminations([]) == 0.0
    assert expected_eliminations([3, 3, 3]) == 0.0
    assert expected_eliminations([0, 1, 2]) == pytest.approx(2.0)
    block = [[0, 1, 2], [5, 5, 5], [4, 4, 7]]
    rows = expected_eliminations_rows(np.array(block))
    assert list(rows) == pytest.approx([2.0, 0.0, 4 / 3])


def test_max_eliminations_small():
    bank = WordBank(["cod", "wod", "mod", "zzz"])
    scorer = MaxEliminationsScorer(bank)
    possible = ("cod", "wod", "mod")
    r = Restrictions.empty(3)
    assert scorer.score("cod", possible, r) == pytest.approx(4 / 3)
    # Not in the bank: computed directly.
    assert scorer.score("mwc", possible, r) == pytest.approx(2.0)
    assert scorer.score("zzz", possible, r) == 0.0


def test_max_eliminations_after_clue():
    bank = WordBank(["abb", "abc", "bad", "zza", "zzz"])
    r = fold([GuessRecord("zza", (A, A, P))])
    possible = filter_possible(bank, r)
    assert possible == ("abb", "abc", "bad")
    scorer = MaxEliminationsScorer(bank)
    assert scorer.score("abb", possible, r) == pytest.approx(2.0)
    assert scorer.score("abc", possible, r) == pytest.approx(2.0)
    assert scorer.score("bad", possible, r) == pytest.approx(4 / 3)
    assert scorer.score("zzz", possible, r) == 0.0


def test_max_eliminations_matches_brute_force():
    words = ["".join(p) for p in itertools.product("abce", repeat=3)]
    bank = WordBank(words)
    scorer = MaxEliminationsScorer(bank)
    possible = tuple(w for w in words if w[0] != "e")
    r = Restrictions.empty(3)
    for guess in words[::5] + ["xyz", "eee"]:
        assert scorer.score(guess, possible, r) == pytest.approx(
            brute_force_eliminations(guess, possible)
        )


def test_max_eliminations_long_words():
    bank = WordBank(["abcdefghijklmnopqrst", "bcdefghijklmnopqrstu", "abcdefghijklmnopqrsz"])
    r = Restrictions.empty(20)
    for scorer in (MaxEliminationsScorer(bank), MaxComboEliminationsScorer(bank)):
        for guess in bank:
            score = scorer.score(guess, bank.words, r)
            assert score == pytest.approx(brute_force_eliminations(guess, bank.words))
        assert scorer.score(bank[0], bank.words, r) == pytest.approx(2.0)


def test_first_guess_scores_computed_once():
    bank = WordBank(["cod", "wod", "mod", "zzz", "mwc"])
    scorer = MaxEliminationsScorer(bank)
    scores = scorer.first_guess_scores()
    assert scorer.first_guess_scores() is scores
    r = Restrictions.empty(3)
    for w in bank:
        assert scores[w] == pytest.approx(scorer.score(w, bank.words, r))


def test_seed_first_guess_scores():
    bank = WordBank(["cod", "wod", "mod"])
    scorer = MaxEliminationsScorer(bank)
    with pytest.raises(InvalidConfiguration):
        scorer.seed_first_guess_scores({"cod": 1.0})
    scorer.seed_first_guess_scores({"cod": 1.0, "wod": 2.0, "mod": 3.0})
    assert scorer.first_guess_scores() == {"cod": 1.0, "wod": 2.0, "mod": 3.0}
    with pytest.raises(InvalidConfiguration):
        scorer.seed_first_guess_scores({"cod": 1.0, "wod": 2.0, "mod": 3.0})


def test_simple_scorers_have_no_first_guess_table():
    assert MaxUniqueLetterFrequencyScorer().first_guess_scores() is None
    with pytest.raises(InvalidConfiguration):
        LocatedLettersScorer().seed_first_guess_scores({})


# ------------------------------------------------------------------
# Combo eliminations
# ------------------------------------------------------------------

COMBO_BANK = WordBank(["cod", "mod", "wod", "mwc", "zzz"])
COMBO_POSSIBLE = ("cod", "mod", "wod", "zzz")


@pytest.mark.parametrize("guess_from", list(GuessFrom))
def test_combo_falls_back_to_max_eliminations(guess_from):
    r = Restrictions.empty(3)
    combo = MaxComboEliminationsScorer(COMBO_BANK, guess_from, combo_limit=len(COMBO_POSSIBLE))
    exact = MaxEliminationsScorer(COMBO_BANK)
    for w in list(COMBO_BANK) + ["abc"]:
        assert combo.score(w, COMBO_POSSIBLE, r) == exact.score(w, COMBO_POSSIBLE, r)


@pytest.mark.parametrize(
    "guess_from, word, expected",
    [
        # Buckets {cod}, {mod, wod}, {zzz}.
        (GuessFrom.POSSIBLE_ANSWERS_ONLY, "cod", (3.1 + 2 * (2 + 1) + 3.1) / 4),
        (GuessFrom.ANY_UNGUESSED_WORD, "cod", (3.1 + 2 * (2 + 1) + 3.1) / 4),
        # Buckets {cod, mod, wod}, {zzz}; "mwc" splits the first one fully.
        (GuessFrom.POSSIBLE_ANSWERS_ONLY, "zzz", (3 * (1 + 4 / 3) + 3.1) / 4),
        (GuessFrom.ANY_UNGUESSED_WORD, "zzz", (3 * (1 + 2) + 3.1) / 4),
    ],
)
def test_combo_two_guess_lookahead(guess_from, word, expected):
    scorer = MaxComboEliminationsScorer(COMBO_BANK, guess_from, combo_limit=1)
    assert scorer.score(word, COMBO_POSSIBLE, Restrictions.empty(3)) == pytest.approx(expected)


def test_combo_rejects_bad_limit():
    with pytest.raises(InvalidConfiguration):
        MaxComboEliminationsScorer(COMBO_BANK, GuessFrom.ANY_UNGUESSED_WORD, combo_limit=0)


def test_combo_table_signature():
    scorer = MaxComboEliminationsScorer(COMBO_BANK, "any", combo_limit=7)
    assert scorer.table_signature() == {
        "scorer": "combo-eliminations",
        "guess_from": "any",
        "combo_limit": 7,
    }
