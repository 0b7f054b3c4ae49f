"""Unique-letter frequency that ignores letters already guessed."""

from __future__ import annotations

from typing import NamedTuple

from lexicon import LetterCounter
from strategy import Scorer


class _UnguessedState(NamedTuple):
    counter: LetterCounter
    guessed: frozenset[str]


class MaxUniqueUnguessedLetterFrequencyScorer(Scorer):
    """Like ``unique-letter-frequency``, but a letter from an earlier guess
    scores nothing: its clue already told us what it can."""

    name = "unique-unguessed-letter-frequency"

    def build_round_state(self, possible_answers, restrictions):
        return _UnguessedState(LetterCounter(possible_answers), restrictions.letters)

    def score_with_state(self, candidate: str, state: _UnguessedState) -> float:
        return sum(
            state.counter.num_words_with_letter(letter)
            for letter in set(candidate) - state.guessed
        )
