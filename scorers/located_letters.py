"""Located letters: reward letters by where the possible answers have them."""

from __future__ import annotations

from typing import NamedTuple

from lexicon import LetterCounter
from restrictions import LetterRestriction, Restrictions
from strategy import Scorer


class _LocatedState(NamedTuple):
    counter: LetterCounter
    restrictions: Restrictions


class LocatedLettersScorer(Scorer):
    """Score each position of a guess by what is known about its letter.

    * known correct here: 1
    * present, possibly here: possible answers with the letter here
    * known not here / not present: 0
    * nothing known: possible answers with the letter here, plus (first
      occurrence in the guess only) possible answers with the letter
      anywhere
    """

    name = "located-letters"

    def build_round_state(self, possible_answers, restrictions):
        return _LocatedState(LetterCounter(possible_answers), restrictions)

    def score_with_state(self, candidate: str, state: _LocatedState) -> float:
        counter, restrictions = state
        total = 0
        for index, letter in enumerate(candidate):
            known = restrictions.state(letter, index)
            if known is LetterRestriction.HERE:
                total += 1
            elif known is LetterRestriction.PRESENT_MAYBE_HERE:
                total += counter.num_words_with_located_letter(letter, index)
            elif known is None:
                if letter not in candidate[:index]:
                    total += counter.num_words_with_letter(letter)
                total += counter.num_words_with_located_letter(letter, index)
        return total
