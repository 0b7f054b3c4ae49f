"""Approximate expected eliminations, treating letters as independent."""

from __future__ import annotations

from typing import NamedTuple

from lexicon import LetterCounter
from restrictions import Restrictions
from strategy import Scorer


def expected_eliminations_for_letter(
    counter: LetterCounter,
    letter: str,
    index: int,
    is_new_letter: bool,
) -> float:
    """Expected number of possible answers eliminated by one guessed letter.

    Parameters
    ----------
    counter : LetterCounter
        Counts over the current possible answers.
    letter, index : str, int
        The guessed letter and its position.
    is_new_letter : bool
        True for the first occurrence of *letter* in the guess; only then
        is the "not present at all" outcome counted.

    Returns
    -------
    float
        ``Σ eliminated(outcome) · P(outcome)`` over the outcomes
        correct / present elsewhere / (new letters only) absent.
    """
    total = counter.num_words
    if total == 0:
        return 0.0
    num_if_correct = counter.num_words_with_located_letter(letter, index)
    num_if_present = counter.num_words_with_letter(letter)
    num_if_present_not_here = num_if_present - num_if_correct

    expected = (
        (total - num_if_correct) * num_if_correct / total
        + (total - num_if_present_not_here) * num_if_present_not_here / total
    )
    if is_new_letter:
        # Absent eliminates every word holding the letter.
        expected += num_if_present * (total - num_if_present) / total
    return expected


class _ApproxState(NamedTuple):
    counter: LetterCounter
    restrictions: Restrictions


class MaxApproximateEliminationsScorer(Scorer):
    """Sum of per-letter expected eliminations; cheap, O(L) per guess once
    the letter counts are built."""

    name = "approximate-eliminations"

    def build_round_state(self, possible_answers, restrictions):
        return _ApproxState(LetterCounter(possible_answers), restrictions)

    def score_with_state(self, candidate: str, state: _ApproxState) -> float:
        counter, restrictions = state
        total = 0.0
        for index, letter in enumerate(candidate):
            # Resolved positions eliminate nothing.
            if restrictions.is_state_known(letter, index):
                continue
            total += expected_eliminations_for_letter(
                counter, letter, index, letter not in candidate[:index],
            )
        return total
