from __future__ import annotations

import pickle

import pytest

from errors import InvalidConfiguration
from lexicon import WordBank
from precompute import load_first_guess_table, load_table, precompute_first_guess, save_table
from scorers.combo_eliminations import MaxComboEliminationsScorer
from scorers.max_eliminations import MaxEliminationsScorer
from scorers.unique_letter_frequency import MaxUniqueLetterFrequencyScorer
from strategy import GuessFrom

BANK = WordBank(["cod", "mod", "wod", "zzz", "mwc", "cow", "mow"])


def test_save_and_load_table(tmp_path):
    path = tmp_path / "sub" / "table.pkl"
    save_table({"a": 1}, path)
    assert load_table(path) == {"a": 1}
    assert not list(path.parent.glob("*.tmp"))


def test_load_missing_table(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_table(tmp_path / "missing.pkl")


def test_precompute_and_load(tmp_path):
    path = tmp_path / "first.pkl"
    scores = precompute_first_guess(MaxEliminationsScorer(BANK), BANK, path, workers=1)
    with open(path, "rb") as f:
        data = pickle.load(f)
    assert data["scorer"] == "max-eliminations"
    assert data["words"] == list(BANK)
    assert data["scores"] == scores

    fresh = MaxEliminationsScorer(BANK)
    load_first_guess_table(path, fresh, BANK)
    assert fresh.first_guess_scores() == scores


def test_load_rejects_other_bank(tmp_path):
    path = tmp_path / "first.pkl"
    precompute_first_guess(MaxEliminationsScorer(BANK), BANK, path, workers=1)
    other = WordBank(["cod", "mod"])
    with pytest.raises(InvalidConfiguration):
        load_first_guess_table(path, MaxEliminationsScorer(other), other)


def test_load_rejects_other_settings(tmp_path):
    path = tmp_path / "first.pkl"
    scorer = MaxComboEliminationsScorer(BANK, GuessFrom.ANY_UNGUESSED_WORD, combo_limit=2)
    precompute_first_guess(scorer, BANK, path, workers=1)
    for other in (
        MaxComboEliminationsScorer(BANK, GuessFrom.POSSIBLE_ANSWERS_ONLY, combo_limit=2),
        MaxComboEliminationsScorer(BANK, GuessFrom.ANY_UNGUESSED_WORD, combo_limit=3),
        MaxEliminationsScorer(BANK),
    ):
        with pytest.raises(InvalidConfiguration):
            load_first_guess_table(path, other, BANK)


def test_precompute_requires_table_scorer(tmp_path):
    with pytest.raises(InvalidConfiguration):
        precompute_first_guess(MaxUniqueLetterFrequencyScorer(), BANK, tmp_path / "x.pkl")
    assert not (tmp_path / "x.pkl").exists()
