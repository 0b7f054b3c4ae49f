"""Random baseline: any possible answer, picked at random."""

from __future__ import annotations

import random
from typing import NamedTuple

from strategy import Scorer


class _RandomState(NamedTuple):
    possible: frozenset[str]
    round_tag: str


class RandomScorer(Scorer):
    """Gives every possible answer a random score and everything else 0.

    The score of a word depends only on the seed, the word and the
    snapshot, so rankings come out the same whichever worker scores it.
    Useful as the reference point for the other scorers.
    """

    name = "random"

    def __init__(self, seed: int = 0) -> None:
        super().__init__()
        self.seed = seed

    def build_round_state(self, possible_answers, restrictions):
        first = possible_answers[0] if possible_answers else ""
        return _RandomState(
            frozenset(possible_answers),
            f"{self.seed}:{len(possible_answers)}:{first}",
        )

    def score_with_state(self, candidate: str, state: _RandomState) -> float:
        if candidate not in state.possible:
            return 0.0
        return random.Random(f"{state.round_tag}:{candidate}").random()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(seed={self.seed})"
