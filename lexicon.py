"""Word banks and word-list loading.

Supports two file formats:
  - Plain text: one word per line
  - CSV with a ``word`` column (any other columns are ignored)

Every answer in a bank is treated as equally likely.
"""

from __future__ import annotations

import csv
import unicodedata
from collections import Counter
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from errors import InvalidWord, InvalidWordBank
from wordle_env import ALPHABET


def _strip_accents(text: str) -> str:
    nfkd = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in nfkd if unicodedata.category(ch) != "Mn")


# ------------------------------------------------------------------
# WordBank
# ------------------------------------------------------------------

class WordBank(Sequence[str]):
    """An immutable, ordered, duplicate-free list of same-length words.

    Words are lower-cased; the first occurrence of a duplicate keeps its
    position. The position of a word in the bank is its canonical order,
    used for tie-breaking.

    Raises
    ------
    InvalidWordBank
        If no words are given, lengths differ, or a word has characters
        outside ``a-z``.
    """

    __slots__ = ("_words", "_index", "_word_length")

    def __init__(self, words: Iterable[str]) -> None:
        seen: dict[str, int] = {}
        for raw in words:
            if not isinstance(raw, str):
                raise InvalidWordBank(f"expected strings, got {type(raw).__name__}")
            w = raw.strip().lower()
            if not w or w in seen:
                continue
            bad = sorted(set(w) - ALPHABET)
            if bad:
                raise InvalidWordBank(f"{raw!r} contains letters outside a-z: {bad}")
            seen[w] = len(seen)
        if not seen:
            raise InvalidWordBank("word bank is empty")

        lengths = Counter(len(w) for w in seen)
        if len(lengths) > 1:
            examples = {n: next(w for w in seen if len(w) == n) for n in lengths}
            raise InvalidWordBank(
                f"words have mixed lengths: {dict(sorted(lengths.items()))} "
                f"(e.g. {examples})"
            )

        self._words = tuple(seen)
        self._index = seen
        self._word_length = next(iter(lengths))

    @property
    def words(self) -> tuple[str, ...]:
        return self._words

    @property
    def word_length(self) -> int:
        return self._word_length

    def index_of(self, word: str) -> int:
        """Canonical position of *word*; raises :class:`InvalidWord` if absent."""
        try:
            return self._index[word]
        except KeyError:
            raise InvalidWord(f"{word!r} is not in the word bank") from None

    def __contains__(self, word: object) -> bool:
        return word in self._index

    def __len__(self) -> int:
        return len(self._words)

    def __getitem__(self, item):
        return self._words[item]

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, WordBank):
            return self._words == other._words
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._words)

    def __getstate__(self):
        return self._words

    def __setstate__(self, words):
        self._words = words
        self._index = {w: i for i, w in enumerate(words)}
        self._word_length = len(words[0])

    def __repr__(self) -> str:
        preview = ", ".join(self._words[:3])
        more = ", ..." if len(self._words) > 3 else ""
        return f"WordBank([{preview}{more}], n={len(self)}, length={self._word_length})"


# ------------------------------------------------------------------
# Letter counts
# ------------------------------------------------------------------

class LetterCounter:
    """Counts how many words contain each letter, and each located letter."""

    __slots__ = ("num_words", "_by_letter", "_by_located_letter")

    def __init__(self, words: Iterable[str]) -> None:
        by_letter: Counter[str] = Counter()
        by_located: Counter[tuple[str, int]] = Counter()
        n = 0
        for word in words:
            n += 1
            by_letter.update(set(word))
            by_located.update((letter, i) for i, letter in enumerate(word))
        self.num_words = n
        self._by_letter = by_letter
        self._by_located_letter = by_located

    def num_words_with_letter(self, letter: str) -> int:
        return self._by_letter[letter]

    def num_words_with_located_letter(self, letter: str, index: int) -> int:
        return self._by_located_letter[(letter, index)]


# ------------------------------------------------------------------
# Loading
# ------------------------------------------------------------------

def _read_txt(path: Path) -> list[str]:
    return [
        _strip_accents(raw.strip().lower())
        for raw in path.read_text(encoding="utf-8").splitlines()
    ]


def _read_csv(path: Path) -> list[str]:
    with path.open("r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        if reader.fieldnames is None or "word" not in reader.fieldnames:
            raise InvalidWordBank(f"{path} has no 'word' column")
        return [_strip_accents(row["word"].strip().lower()) for row in reader]


def load_word_bank(
    path: str | Path,
    word_length: int | None = None,
) -> WordBank:
    """Load a word bank from a ``.txt`` or ``.csv`` file.

    Parameters
    ----------
    path : str or Path
        One word per line, or a CSV with a ``word`` column. Blank lines
        are skipped and words are lower-cased, keeping file order.
    word_length : int or None
        If given, only words of this exact length are kept. Otherwise all
        words are kept and a file with mixed lengths is rejected.

    Returns
    -------
    WordBank
    """
    src = Path(path)
    if not src.exists():
        raise FileNotFoundError(f"Word list not found: {src}")

    words = _read_csv(src) if src.suffix == ".csv" else _read_txt(src)
    words = [w for w in words if w]
    if word_length is not None:
        words = [w for w in words if len(w) == word_length]
    if not words:
        suffix = f" of length {word_length}" if word_length else ""
        raise InvalidWordBank(f"No words{suffix} found in {src}")
    return WordBank(words)
