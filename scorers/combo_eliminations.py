"""Two-guess lookahead on top of exact expected eliminations."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from scorers.max_eliminations import (
    MaxEliminationsScorer,
    _EliminationState,
    expected_eliminations,
    expected_eliminations_rows,
)
from strategy import DEFAULT_COMBO_LIMIT, GuessFrom, check_positive

if TYPE_CHECKING:
    from lexicon import WordBank
    from strategy import SolverConfig

# Added to a bucket that pins down the answer, in place of a second guess.
SOLVED_BONUS = 0.1


class MaxComboEliminationsScorer(MaxEliminationsScorer):
    """Expected eliminations of a guess followed by the best second guess.

    While more than ``combo_limit`` answers are possible, each clue bucket
    ``B`` of the guess is worth ``(N - |B|)`` plus the best single-guess
    expected eliminations within ``B``; a bucket holding one word is worth
    ``N - 1 + 0.1`` instead. The score is the bucket-size-weighted mean.
    At or below ``combo_limit`` the score is exactly that of
    :class:`MaxEliminationsScorer`.

    Second guesses come from the whole bank minus the first guess
    (``ANY_UNGUESSED_WORD``) or from the bucket itself
    (``POSSIBLE_ANSWERS_ONLY``). Costs O(N³) per round; keep the bank or
    ``combo_limit`` small.
    """

    name = "combo-eliminations"

    def __init__(
        self,
        bank: WordBank,
        guess_from: GuessFrom = GuessFrom.POSSIBLE_ANSWERS_ONLY,
        combo_limit: int = DEFAULT_COMBO_LIMIT,
    ) -> None:
        super().__init__(bank)
        check_positive("combo_limit", combo_limit)
        self.guess_from = GuessFrom(guess_from)
        self.combo_limit = combo_limit

    @classmethod
    def from_config(cls, bank: WordBank, config: SolverConfig) -> MaxComboEliminationsScorer:
        return cls(bank, config.guess_from, config.combo_limit)

    def table_signature(self) -> dict:
        return {
            "scorer": self.name,
            "guess_from": self.guess_from.value,
            "combo_limit": self.combo_limit,
        }

    def score_with_state(self, candidate: str, state: _EliminationState) -> float:
        table, answers = state
        codes = table.codes(candidate, answers)
        n = len(answers)
        if n <= self.combo_limit:
            return expected_eliminations(codes)

        if self.guess_from is GuessFrom.ANY_UNGUESSED_WORD:
            second_pool = np.arange(len(table), dtype=np.int64)
            if candidate in table:
                second_pool = np.delete(second_pool, table.index_of(candidate))
        else:
            second_pool = None

        _, bucket_ids, sizes = np.unique(codes, return_inverse=True, return_counts=True)
        bucket_ids = bucket_ids.reshape(-1)
        total = 0.0
        for b, size in enumerate(sizes):
            size = int(size)
            value = float(n - size)
            if size == 1:
                value += SOLVED_BONUS
            else:
                bucket = answers[bucket_ids == b]
                rows = bucket if second_pool is None else second_pool
                if len(rows):
                    block = table.table[np.ix_(rows, bucket)]
                    value += float(expected_eliminations_rows(block).max())
            total += size * value
        return total / n

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(bank={self.bank!r}, "
            f"guess_from={self.guess_from.value!r}, combo_limit={self.combo_limit})"
        )
