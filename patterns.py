"""Clue-code tables: the clue of every guess against every answer.

A clue is stored as its base-3 code (see :func:`wordle_env.clue_code`), so
grouping answers by the clue a guess would produce is a ``np.unique``
over one row of the table.
"""

from __future__ import annotations

import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Sequence

import numpy as np

from errors import InvalidWordBank
from wordle_env import validate_word

# Longest word whose clue codes (up to 3**L - 1) fit in an int64.
MAX_WORD_LENGTH = 39


def _check_word_length(word_length: int) -> None:
    if word_length > MAX_WORD_LENGTH:
        raise InvalidWordBank(
            f"words of length {word_length} are too long for clue codes "
            f"(at most {MAX_WORD_LENGTH} letters)"
        )


def pattern_dtype(word_length: int) -> np.dtype:
    """Smallest dtype that holds every clue code of this length."""
    _check_word_length(word_length)
    num_patterns = 3 ** word_length
    for dtype in (np.uint8, np.uint16, np.uint32):
        if num_patterns <= np.iinfo(dtype).max + 1:
            return np.dtype(dtype)
    return np.dtype(np.int64)


def encode_words(words: Sequence[str]) -> np.ndarray:
    """Return an ``(n, L)`` array of letter indices (``a`` = 0)."""
    if not words:
        return np.zeros((0, 0), dtype=np.uint8)
    raw = "".join(words).encode("ascii")
    arr = np.frombuffer(raw, dtype=np.uint8).reshape(len(words), -1)
    return arr - ord("a")


def clue_codes(guess: str, answers: np.ndarray) -> np.ndarray:
    """Clue codes of *guess* against every row of *answers* (vectorized).

    *answers* is an ``(n, L)`` array from :func:`encode_words`. The result
    equals ``clue_code(clue(guess, answer))`` for every answer.
    """
    g = encode_words([guess])[0]
    n, word_length = answers.shape
    if len(g) != word_length:
        raise ValueError(f"guess length {len(g)} != answer length {word_length}")
    _check_word_length(word_length)

    green = answers == g
    states = np.where(green, 2, 0).astype(np.int64)
    for i in range(word_length):
        letter = g[i]
        # Unmatched copies of this letter in each answer.
        available = ((answers == letter) & ~green).sum(axis=1)
        # Earlier non-green copies in the guess consumed the budget first.
        earlier = np.zeros(n, dtype=np.int64)
        for j in range(i):
            if g[j] == letter:
                earlier += ~green[:, j]
        present = ~green[:, i] & (available > earlier)
        states[present, i] = 1

    weights = 3 ** np.arange(word_length - 1, -1, -1, dtype=np.int64)
    return states @ weights


# ------------------------------------------------------------------
# Worker functions (module-level for pickling)
# ------------------------------------------------------------------

_WORKER_ANSWERS: np.ndarray | None = None


def _init_pattern_worker(answers: np.ndarray) -> None:
    global _WORKER_ANSWERS
    _WORKER_ANSWERS = answers


def _pattern_rows(args):
    """Worker: clue-code rows for a chunk of guesses."""
    start, guesses, dtype = args
    rows = np.stack([clue_codes(g, _WORKER_ANSWERS) for g in guesses])
    return start, rows.astype(dtype)


# ------------------------------------------------------------------
# Pattern table
# ------------------------------------------------------------------

class PatternTable:
    """Clue codes for every (guess, answer) pair of a word list.

    ``table[g, a]`` is the code of the clue produced by guessing
    ``words[g]`` when the answer is ``words[a]``.
    """

    def __init__(self, words: Sequence[str], table: np.ndarray) -> None:
        self.words = tuple(words)
        self.word_length = len(self.words[0])
        self.num_patterns = 3 ** self.word_length
        self.letters = encode_words(self.words)
        self.table = table
        self._index = {w: i for i, w in enumerate(self.words)}
        if table.shape != (len(self.words), len(self.words)):
            raise ValueError(
                f"table shape {table.shape} does not match {len(self.words)} words"
            )

    @classmethod
    def build(
        cls,
        words: Sequence[str],
        workers: int = 1,
        chunk_size: int | None = None,
        verbose: bool = False,
    ) -> PatternTable:
        """Compute the table, splitting guess rows across *workers* processes."""
        words = tuple(words)
        n = len(words)
        dtype = pattern_dtype(len(words[0]))
        letters = encode_words(words)
        table = np.empty((n, n), dtype=dtype)

        if chunk_size is None:
            chunk_size = max(50, n // (workers * 4))
        chunks = [(i, words[i:i + chunk_size], dtype) for i in range(0, n, chunk_size)]

        t0 = time.time()
        if workers == 1 or len(chunks) == 1:
            _init_pattern_worker(letters)
            try:
                for chunk in chunks:
                    start, rows = _pattern_rows(chunk)
                    table[start:start + len(rows)] = rows
            finally:
                _init_pattern_worker(None)
        else:
            with ProcessPoolExecutor(
                max_workers=workers,
                initializer=_init_pattern_worker,
                initargs=(letters,),
            ) as executor:
                futs = [executor.submit(_pattern_rows, chunk) for chunk in chunks]
                for done, fut in enumerate(as_completed(futs), 1):
                    start, rows = fut.result()
                    table[start:start + len(rows)] = rows
                    if verbose:
                        elapsed = time.time() - t0
                        print(f"\r  pattern table [{done}/{len(chunks)}] "
                              f"{elapsed:.0f}s elapsed",
                              end="", flush=True)
        if verbose:
            print(f"\r  pattern table: {n}x{n} in {time.time() - t0:.1f}s" + " " * 20)
        return cls(words, table)

    def __len__(self) -> int:
        return len(self.words)

    def __contains__(self, word: object) -> bool:
        return word in self._index

    def index_of(self, word: str) -> int:
        return self._index[word]

    def indices(self, words: Sequence[str]) -> np.ndarray:
        """Row/column indices of *words*; every word must be in the table."""
        try:
            return np.fromiter((self._index[w] for w in words), dtype=np.int64, count=len(words))
        except KeyError as exc:
            raise ValueError(f"{exc.args[0]!r} is not in the pattern table") from None

    def codes(self, guess: str, answer_indices: np.ndarray) -> np.ndarray:
        """Clue codes of *guess* against the answers at *answer_indices*."""
        row = self._index.get(guess)
        if row is not None:
            return self.table[row, answer_indices]
        guess = validate_word(guess, self.word_length)
        return clue_codes(guess, self.letters[answer_indices])
