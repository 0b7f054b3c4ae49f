"""Constraint accumulator: folds a guess history into word restrictions."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable

from errors import InvalidWord, NoPossibleAnswers
from lexicon import WordBank
from wordle_env import GuessRecord, LetterState, validate_word


class LetterRestriction(Enum):
    """What is known about a letter at one position."""

    HERE = "here"
    PRESENT_MAYBE_HERE = "present_maybe_here"
    PRESENT_NOT_HERE = "present_not_here"
    NOT_PRESENT = "not_present"


@dataclass(frozen=True)
class Restrictions:
    """Restrictions derived from a history of guesses and clues.

    Attributes
    ----------
    word_length : int
        Length of every word these restrictions apply to.
    fixed : tuple[str | None, ...]
        Known-correct letter at each position, or None.
    excluded : tuple[frozenset[str], ...]
        Letters known not to be at each position.
    min_counts : tuple[tuple[str, int], ...]
        Sorted ``(letter, n)``: the word holds at least *n* of *letter*.
    max_counts : tuple[tuple[str, int], ...]
        Sorted ``(letter, n)``: the word holds at most *n* of *letter*.
        Only present once an absent clue has been seen for the letter.

    Instances are immutable; build them with :func:`fold`,
    :meth:`empty`, :meth:`update` or :meth:`merge`.
    """

    word_length: int
    fixed: tuple[str | None, ...]
    excluded: tuple[frozenset[str], ...]
    min_counts: tuple[tuple[str, int], ...] = ()
    max_counts: tuple[tuple[str, int], ...] = ()
    _min: dict[str, int] = field(init=False, repr=False, compare=False, hash=False)
    _max: dict[str, int] = field(init=False, repr=False, compare=False, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_min", dict(self.min_counts))
        object.__setattr__(self, "_max", dict(self.max_counts))

    @classmethod
    def empty(cls, word_length: int) -> Restrictions:
        return cls(
            word_length=word_length,
            fixed=(None,) * word_length,
            excluded=(frozenset(),) * word_length,
        )

    # ------------------------------------------------------------------
    # Folding
    # ------------------------------------------------------------------

    def update(self, record: GuessRecord) -> Restrictions:
        """Return new restrictions that also account for *record*."""
        guess, pattern = record
        guess = validate_word(guess, self.word_length)
        if len(pattern) != self.word_length:
            raise InvalidWord(
                f"clue for {guess!r} has length {len(pattern)}, "
                f"expected {self.word_length}"
            )

        fixed = list(self.fixed)
        excluded = [set(s) for s in self.excluded]
        present: Counter[str] = Counter()
        absent: set[str] = set()

        for i, (letter, raw_state) in enumerate(zip(guess, pattern)):
            state = LetterState(raw_state)
            if state is LetterState.CORRECT:
                if fixed[i] is not None and fixed[i] != letter:
                    raise NoPossibleAnswers(
                        f"position {i} cannot be both {fixed[i]!r} and {letter!r}"
                    )
                fixed[i] = letter
            else:
                excluded[i].add(letter)
            if state is LetterState.ABSENT:
                absent.add(letter)
            else:
                present[letter] += 1

        mins = dict(self._min)
        maxs = dict(self._max)
        for letter in set(guess):
            n = present[letter]
            if n > mins.get(letter, 0):
                mins[letter] = n
            if letter in absent:
                maxs[letter] = min(maxs.get(letter, n), n)

        return Restrictions._build(self.word_length, fixed, excluded, mins, maxs)

    def merge(self, other: Restrictions) -> Restrictions:
        """Combine two sets of restrictions (the result satisfies both)."""
        if other.word_length != self.word_length:
            raise InvalidWord(
                f"cannot merge restrictions for lengths "
                f"{self.word_length} and {other.word_length}"
            )
        fixed = list(self.fixed)
        for i, letter in enumerate(other.fixed):
            if letter is None:
                continue
            if fixed[i] is not None and fixed[i] != letter:
                raise NoPossibleAnswers(
                    f"position {i} cannot be both {fixed[i]!r} and {letter!r}"
                )
            fixed[i] = letter
        excluded = [a | b for a, b in zip(self.excluded, other.excluded)]
        mins = dict(self._min)
        for letter, n in other.min_counts:
            mins[letter] = max(mins.get(letter, 0), n)
        maxs = dict(self._max)
        for letter, n in other.max_counts:
            maxs[letter] = min(maxs.get(letter, n), n)
        return Restrictions._build(self.word_length, fixed, excluded, mins, maxs)

    @classmethod
    def _build(cls, word_length, fixed, excluded, mins, maxs) -> Restrictions:
        for letter, lo in mins.items():
            hi = maxs.get(letter)
            if hi is not None and lo > hi:
                raise NoPossibleAnswers(
                    f"{letter!r} must appear at least {lo} and at most {hi} times"
                )
            allowed = sum(
                1 for i in range(word_length)
                if fixed[i] == letter or (fixed[i] is None and letter not in excluded[i])
            )
            if allowed < lo:
                raise NoPossibleAnswers(
                    f"{letter!r} must appear {lo} times but fits only {allowed} position(s)"
                )
        for i, letter in enumerate(fixed):
            if letter is not None and letter in excluded[i]:
                raise NoPossibleAnswers(
                    f"{letter!r} is both required and excluded at position {i}"
                )
        for letter in set(fixed) - {None}:
            hi = maxs.get(letter)
            if hi is not None and fixed.count(letter) > hi:
                raise NoPossibleAnswers(
                    f"{letter!r} is fixed {fixed.count(letter)} times but allowed {hi}"
                )
        if sum(mins.values()) > word_length:
            raise NoPossibleAnswers(
                f"required letters {dict(sorted(mins.items()))} do not fit "
                f"in {word_length} positions"
            )
        return cls(
            word_length=word_length,
            fixed=tuple(fixed),
            excluded=tuple(frozenset(s) for s in excluded),
            min_counts=tuple(sorted((k, v) for k, v in mins.items() if v > 0)),
            max_counts=tuple(sorted(maxs.items())),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        """True if nothing is known yet."""
        return (
            not self.min_counts
            and not self.max_counts
            and all(f is None for f in self.fixed)
            and not any(self.excluded)
        )

    @property
    def letters(self) -> frozenset[str]:
        """Every letter a clue has said something about.

        Each guessed letter is fixed, counted as present, or capped as
        absent, so this is the set of letters guessed so far.
        """
        fixed = {f for f in self.fixed if f is not None}
        return frozenset(fixed | self._min.keys() | self._max.keys())

    def min_count(self, letter: str) -> int:
        return self._min.get(letter, 0)

    def max_count(self, letter: str) -> int | None:
        return self._max.get(letter)

    def is_satisfied_by(self, word: str) -> bool:
        """Return True iff *word* is consistent with every restriction."""
        if len(word) != self.word_length:
            return False
        for i, letter in enumerate(word):
            required = self.fixed[i]
            if required is not None and letter != required:
                return False
            if letter in self.excluded[i]:
                return False
        counts = Counter(word)
        for letter, lo in self.min_counts:
            if counts[letter] < lo:
                return False
        for letter, hi in self.max_counts:
            if counts[letter] > hi:
                return False
        return True

    def state(self, letter: str, index: int) -> LetterRestriction | None:
        """Return what is known about *letter* at *index*, or None."""
        if self.fixed[index] == letter:
            return LetterRestriction.HERE
        hi = self._max.get(letter)
        if hi == 0:
            return LetterRestriction.NOT_PRESENT
        if self._min.get(letter, 0) == 0:
            return None
        if self.fixed[index] is not None or letter in self.excluded[index]:
            return LetterRestriction.PRESENT_NOT_HERE
        if hi is not None and self.fixed.count(letter) >= hi:
            # Every occurrence is already located.
            return LetterRestriction.PRESENT_NOT_HERE
        return LetterRestriction.PRESENT_MAYBE_HERE

    def is_state_known(self, letter: str, index: int) -> bool:
        """True iff it is known whether *letter* is at *index* or not."""
        return self.state(letter, index) not in (
            None, LetterRestriction.PRESENT_MAYBE_HERE,
        )


# ------------------------------------------------------------------
# Public operations
# ------------------------------------------------------------------

def fold(
    history: Iterable[GuessRecord],
    word_length: int | None = None,
    start: Restrictions | None = None,
) -> Restrictions:
    """Fold *history* (oldest first) into restrictions.

    Parameters
    ----------
    history : iterable of GuessRecord
        ``(guess, clue)`` pairs in the order they were played.
    word_length : int or None
        Required when *history* is empty and *start* is None; otherwise
        taken from *start* or the first guess.
    start : Restrictions or None
        Restrictions to continue folding from (incremental use).

    Raises
    ------
    NoPossibleAnswers
        If the history contradicts itself.
    """
    records = list(history)
    if start is None:
        if word_length is None:
            if not records:
                raise InvalidWord("word_length is required to fold an empty history")
            word_length = len(records[0][0])
        start = Restrictions.empty(word_length)
    elif word_length is not None and word_length != start.word_length:
        raise InvalidWord(
            f"word_length {word_length} does not match restrictions "
            f"for length {start.word_length}"
        )
    restrictions = start
    for record in records:
        restrictions = restrictions.update(GuessRecord(*record))
    return restrictions


def filter_possible(
    words: WordBank | Iterable[str],
    restrictions: Restrictions,
) -> tuple[str, ...]:
    """Return the words (in order) that satisfy *restrictions*.

    Raises
    ------
    NoPossibleAnswers
        If no word satisfies them.
    """
    possible = tuple(w for w in words if restrictions.is_satisfied_by(w))
    if not possible:
        raise NoPossibleAnswers("no word in the bank is consistent with the history")
    return possible
