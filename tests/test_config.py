from __future__ import annotations

import pytest

from errors import InvalidConfiguration
from lexicon import WordBank
from scorers import create_scorer, discover_scorers, find_scorer, scorer_names
from scorers.combo_eliminations import MaxComboEliminationsScorer
from scorers.max_eliminations import MaxEliminationsScorer
from strategy import DEFAULT_COMBO_LIMIT, DEFAULT_WORKERS, GuessFrom, SolverConfig


def test_defaults():
    config = SolverConfig()
    assert config.guess_from is GuessFrom.POSSIBLE_ANSWERS_ONLY
    assert config.workers == DEFAULT_WORKERS
    assert config.combo_limit == DEFAULT_COMBO_LIMIT
    assert config.chunk_size is None


def test_guess_from_string():
    assert SolverConfig(guess_from="any").guess_from is GuessFrom.ANY_UNGUESSED_WORD


@pytest.mark.parametrize(
    "kwargs",
    [
        {"workers": 0},
        {"workers": -2},
        {"workers": 1.5},
        {"workers": True},
        {"combo_limit": 0},
        {"chunk_size": 0},
        {"guess_from": "everything"},
    ],
)
def test_invalid_config(kwargs):
    with pytest.raises(InvalidConfiguration):
        SolverConfig(**kwargs)


def test_discover_scorers():
    assert set(scorer_names()) == {
        "unique-letter-frequency",
        "located-letters",
        "approximate-eliminations",
        "max-eliminations",
        "combo-eliminations",
        "unique-unguessed-letter-frequency",
        "random",
    }
    assert len(discover_scorers()) == 7


def test_find_scorer_case_insensitive():
    assert find_scorer("Max-Eliminations") is MaxEliminationsScorer
    with pytest.raises(InvalidConfiguration):
        find_scorer("nope")


def test_create_scorer_uses_config():
    bank = WordBank(["cod", "mod"])
    config = SolverConfig(guess_from="any", combo_limit=3)
    scorer = create_scorer("combo-eliminations", bank, config)
    assert isinstance(scorer, MaxComboEliminationsScorer)
    assert scorer.guess_from is GuessFrom.ANY_UNGUESSED_WORD
    assert scorer.combo_limit == 3
    assert scorer.bank == bank
