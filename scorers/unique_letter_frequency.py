"""Unique-letter frequency: reward letters that many possible answers share."""

from __future__ import annotations

from lexicon import LetterCounter
from strategy import Scorer


class MaxUniqueLetterFrequencyScorer(Scorer):
    """Sum, over the distinct letters of a guess, of the number of possible
    answers containing that letter. Repeated letters count once."""

    name = "unique-letter-frequency"

    def build_round_state(self, possible_answers, restrictions):
        return LetterCounter(possible_answers)

    def score_with_state(self, candidate: str, state: LetterCounter) -> float:
        return sum(state.num_words_with_letter(letter) for letter in set(candidate))
