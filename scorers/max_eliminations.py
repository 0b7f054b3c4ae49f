"""Exact expected eliminations, with a cached first-guess table."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping, NamedTuple

import numpy as np

from errors import InvalidConfiguration
from patterns import PatternTable
from restrictions import Restrictions
from strategy import OnceCell, Scorer

if TYPE_CHECKING:
    from lexicon import WordBank
    from strategy import SolverConfig

# Upper bound on cells of the per-block count matrix in
# expected_eliminations_rows.
_BLOCK_CELLS = 1 << 22


def expected_eliminations(codes: np.ndarray) -> float:
    """Expected eliminations of one guess given its clue codes.

    With the answers grouped into buckets of equal clue, this is
    ``Σ count · (N - count) / N``, i.e. ``(N² - Σ count²) / N``.
    """
    n = len(codes)
    if n == 0:
        return 0.0
    # One count per bucket; codes range up to 3**L.
    _, counts = np.unique(codes, return_counts=True)
    counts = counts.astype(np.int64)
    return float(n * n - int((counts * counts).sum())) / n


def expected_eliminations_rows(block: np.ndarray) -> np.ndarray:
    """:func:`expected_eliminations` for every row of a 2-D code block."""
    rows, m = block.shape
    if rows == 0 or m == 0:
        return np.zeros(rows)
    uniq, inverse = np.unique(block, return_inverse=True)
    inverse = inverse.reshape(rows, m).astype(np.int64)
    k = len(uniq)
    step = max(1, _BLOCK_CELLS // k)
    out = np.empty(rows)
    for start in range(0, rows, step):
        part = inverse[start:start + step]
        offsets = (np.arange(len(part), dtype=np.int64) * k)[:, None]
        counts = np.bincount(
            (part + offsets).ravel(), minlength=len(part) * k,
        ).reshape(len(part), k).astype(np.int64)
        out[start:start + len(part)] = (m * m - (counts * counts).sum(axis=1)) / m
    return out


class _EliminationState(NamedTuple):
    table: PatternTable
    answers: np.ndarray


class MaxEliminationsScorer(Scorer):
    """Exact expected number of possible answers a guess eliminates.

    Needs the clue of every (guess, answer) pair, so a bank-wide
    :class:`~patterns.PatternTable` is built once on first use. Scores of
    the opening guess are the same for every game on the bank, so they
    are also computed once (see :meth:`first_guess_scores`) or seeded
    from a precomputed file.
    """

    name = "max-eliminations"

    def __init__(self, bank: WordBank) -> None:
        super().__init__()
        self.bank = bank
        self._patterns: OnceCell[PatternTable] = OnceCell()
        self._first_guess: OnceCell[dict[str, float]] = OnceCell()

    @classmethod
    def from_config(cls, bank: WordBank, config: SolverConfig) -> MaxEliminationsScorer:
        return cls(bank)

    # ------------------------------------------------------------------
    # Lazy tables
    # ------------------------------------------------------------------

    def pattern_table(self, workers: int = 1, verbose: bool = False) -> PatternTable:
        return self._patterns.get_or_compute(
            lambda: PatternTable.build(self.bank.words, workers=workers, verbose=verbose)
        )

    def prepare(self, possible_answers, restrictions, workers=1):
        self.pattern_table(workers)
        super().prepare(possible_answers, restrictions, workers)

    def first_guess_scores(self, workers=1, verbose=False):
        """Scores of every bank word before any feedback (computed once)."""
        return self._first_guess.get_or_compute(
            lambda: self._compute_first_guess_scores(workers, verbose)
        )

    def _compute_first_guess_scores(self, workers: int, verbose: bool) -> dict[str, float]:
        from fanout import rank_candidates

        words = self.bank.words
        if verbose:
            print(f"  Computing first-guess scores for {len(words)} words ...")
        self.pattern_table(workers, verbose=verbose)
        ranking = rank_candidates(
            self, words, words, Restrictions.empty(self.bank.word_length),
            workers=workers, verbose=verbose,
        )
        return {entry.word: entry.score for entry in ranking}

    def seed_first_guess_scores(self, scores: Mapping[str, float]) -> None:
        """Use precomputed first-guess scores instead of computing them."""
        missing = [w for w in self.bank if w not in scores]
        if missing:
            raise InvalidConfiguration(
                f"first-guess table is missing {len(missing)} bank word(s), e.g. {missing[:3]}"
            )
        try:
            self._first_guess.set({w: float(scores[w]) for w in self.bank})
        except RuntimeError as exc:
            raise InvalidConfiguration(str(exc)) from None

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def build_round_state(self, possible_answers, restrictions):
        table = self.pattern_table()
        return _EliminationState(table, table.indices(possible_answers))

    def score_with_state(self, candidate: str, state: _EliminationState) -> float:
        return expected_eliminations(state.table.codes(candidate, state.answers))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(bank={self.bank!r})"
