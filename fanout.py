"""Bounded parallel scoring of candidate guesses.

Candidates are split into chunks and scored across a process pool. Each
chunk comes back as a partial ranking sorted by :func:`rank_key`; the
partial rankings are merged with ``heapq.merge``. Because the key is a
total order, the merged ranking does not depend on the number of workers,
the chunk size, or the order in which chunks finish.
"""

from __future__ import annotations

import heapq
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import TYPE_CHECKING, Mapping, NamedTuple, Sequence

from strategy import check_positive

if TYPE_CHECKING:
    from restrictions import Restrictions
    from strategy import Scorer


class ScoredWord(NamedTuple):
    word: str
    score: float
    is_possible: bool
    order: int


def rank_key(entry: ScoredWord) -> tuple[float, bool, int]:
    """Higher score first, then possible answers, then canonical order."""
    return (-entry.score, not entry.is_possible, entry.order)


# ------------------------------------------------------------------
# Worker functions (module-level for pickling)
# ------------------------------------------------------------------

_WORKER_STATE: tuple | None = None


def _init_worker(scorer: Scorer, possible: tuple[str, ...], restrictions: Restrictions) -> None:
    global _WORKER_STATE
    _WORKER_STATE = (scorer, possible, frozenset(possible), restrictions)


def _score_chunk(chunk: Sequence[tuple[int, str]]) -> list[ScoredWord]:
    """Worker: score a chunk of ``(order, word)`` pairs, best first."""
    scorer, possible, possible_set, restrictions = _WORKER_STATE
    state = scorer.round_state(possible, restrictions)
    ranked = [
        ScoredWord(word, float(scorer.score_with_state(word, state)), word in possible_set, order)
        for order, word in chunk
    ]
    ranked.sort(key=rank_key)
    return ranked


# ------------------------------------------------------------------
# Public API
# ------------------------------------------------------------------

def rank_candidates(
    scorer: Scorer,
    candidates: Sequence[str],
    possible_answers: Sequence[str],
    restrictions: Restrictions,
    workers: int = 1,
    order: Mapping[str, int] | None = None,
    chunk_size: int | None = None,
    verbose: bool = False,
) -> list[ScoredWord]:
    """Score every candidate and return them best first.

    Parameters
    ----------
    scorer : Scorer
        Read-only during the pass; its lazy tables are built by
        ``scorer.prepare`` before any work is shipped to workers.
    candidates : sequence of str
        Words to score.
    possible_answers : sequence of str
        Current possible answers (also used for the tie-break).
    restrictions : Restrictions
        Restrictions the possible answers were filtered with.
    workers : int
        Maximum number of worker processes; 1 scores in-process.
    order : mapping or None
        Canonical position of each candidate (e.g. its bank index) used as
        the last tie-break. Defaults to the position in *candidates*.
    chunk_size : int or None
        Candidates per work unit; defaults to ``max(50, n // (workers * 4))``.
    verbose : bool
        Print progress while chunks complete.

    Returns
    -------
    list of ScoredWord
        Sorted by :func:`rank_key`.
    """
    check_positive("workers", workers)
    if chunk_size is not None:
        check_positive("chunk_size", chunk_size)

    possible = tuple(possible_answers)
    scorer.prepare(possible, restrictions, workers=workers)

    if order is None:
        items = list(enumerate(candidates))
    else:
        items = [(order[w], w) for w in candidates]
    if not items:
        return []

    n = len(items)
    if chunk_size is None:
        chunk_size = max(50, n // (workers * 4))
    chunks = [items[i:i + chunk_size] for i in range(0, n, chunk_size)]

    if workers == 1 or len(chunks) == 1:
        state = scorer.round_state(possible, restrictions)
        possible_set = frozenset(possible)
        ranked = [
            ScoredWord(word, float(scorer.score_with_state(word, state)), word in possible_set, idx)
            for idx, word in items
        ]
        ranked.sort(key=rank_key)
        return ranked

    if verbose:
        print(f"  Scoring {n} candidates x {len(possible)} possible answers "
              f"in {len(chunks)} chunks ...")

    t0 = time.time()
    partials: list[list[ScoredWord]] = []
    with ProcessPoolExecutor(
        max_workers=min(workers, len(chunks)),
        initializer=_init_worker,
        initargs=(scorer, possible, restrictions),
    ) as executor:
        futs = [executor.submit(_score_chunk, chunk) for chunk in chunks]
        for done, fut in enumerate(as_completed(futs), 1):
            partials.append(fut.result())
            if verbose:
                elapsed = time.time() - t0
                eta = elapsed / done * (len(chunks) - done)
                print(f"\r  [{done}/{len(chunks)}] "
                      f"{elapsed:.0f}s elapsed  ETA {eta:.0f}s   ",
                      end="", flush=True)
    if verbose:
        print()

    return list(heapq.merge(*partials, key=rank_key))
