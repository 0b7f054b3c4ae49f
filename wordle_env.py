"""Wordle environment: clue model and game logic for any word length."""

from __future__ import annotations

import random
import string
from collections import Counter
from enum import IntEnum
from typing import TYPE_CHECKING, Iterable, NamedTuple

from errors import InvalidWord

if TYPE_CHECKING:
    from lexicon import WordBank

ALPHABET = frozenset(string.ascii_lowercase)


class LetterState(IntEnum):
    """Feedback for one letter of a guess.

    The integer values are the base-3 digits of a clue code.
    """

    ABSENT = 0
    PRESENT_ELSEWHERE = 1
    CORRECT = 2


Clue = tuple[LetterState, ...]


class GuessRecord(NamedTuple):
    guess: str
    clue: Clue


_CLUE_CHARS = {
    ".": LetterState.ABSENT,
    "0": LetterState.ABSENT,
    "x": LetterState.ABSENT,
    "y": LetterState.PRESENT_ELSEWHERE,
    "1": LetterState.PRESENT_ELSEWHERE,
    "g": LetterState.CORRECT,
    "2": LetterState.CORRECT,
}
_CLUE_SYMBOLS = {
    LetterState.ABSENT: ".",
    LetterState.PRESENT_ELSEWHERE: "y",
    LetterState.CORRECT: "g",
}


def validate_word(word: str, word_length: int | None = None) -> str:
    """Return *word* lower-cased, or raise :class:`InvalidWord`."""
    if not isinstance(word, str):
        raise InvalidWord(f"expected a string, got {type(word).__name__}")
    w = word.strip().lower()
    if not w:
        raise InvalidWord("word is empty")
    bad = sorted(set(w) - ALPHABET)
    if bad:
        raise InvalidWord(f"{word!r} contains letters outside a-z: {bad}")
    if word_length is not None and len(w) != word_length:
        raise InvalidWord(
            f"{word!r} has length {len(w)}, expected {word_length}"
        )
    return w


def clue(guess: str, target: str) -> Clue:
    """Return the clue for *guess* against *target* (any word length)."""
    guess = validate_word(guess)
    target = validate_word(target, len(guess))

    n = len(target)
    pat = [LetterState.ABSENT] * n
    remaining = Counter(target)

    # Pass 1 – correct letters consume the budget first
    for i, (t, g) in enumerate(zip(target, guess)):
        if g == t:
            pat[i] = LetterState.CORRECT
            remaining[g] -= 1

    # Pass 2 – present elsewhere, left to right
    for i, g in enumerate(guess):
        if pat[i] is LetterState.CORRECT:
            continue
        if remaining[g] > 0:
            pat[i] = LetterState.PRESENT_ELSEWHERE
            remaining[g] -= 1

    return tuple(pat)


def clue_code(pattern: Iterable[int]) -> int:
    """Encode a clue as a base-3 integer (first letter most significant)."""
    code = 0
    for state in pattern:
        code = code * 3 + int(state)
    return code


def parse_clue(text: str, word_length: int | None = None) -> Clue:
    """Parse a typed clue such as ``"g.gy."`` or ``"20210"``.

    ``.``/``0``/``x`` = absent, ``y``/``1`` = present elsewhere,
    ``g``/``2`` = correct.
    """
    text = text.strip().lower()
    if word_length is not None and len(text) != word_length:
        raise InvalidWord(
            f"clue {text!r} has length {len(text)}, expected {word_length}"
        )
    try:
        return tuple(_CLUE_CHARS[ch] for ch in text)
    except KeyError as exc:
        raise InvalidWord(
            f"clue {text!r} may only contain '.', 'y' or 'g' (got {exc.args[0]!r})"
        ) from None


def format_clue(pattern: Clue) -> str:
    return "".join(_CLUE_SYMBOLS[s] for s in pattern)


def is_solved(pattern: Clue) -> bool:
    return all(s == LetterState.CORRECT for s in pattern)


class WordleEnv:
    """A single Wordle game against a secret drawn from a word bank.

    Parameters
    ----------
    bank : WordBank
        Valid words; the secret is always one of them.
    max_guesses : int
        Maximum allowed guesses before the game is lost.
    allow_non_words : bool
        If True, any string of the correct length is accepted as a guess.
    """

    def __init__(
        self,
        bank: WordBank,
        max_guesses: int = 6,
        allow_non_words: bool = False,
    ) -> None:
        self._bank = bank
        self._max_guesses = max_guesses
        self._allow_non_words = allow_non_words

        # Game state (set by reset)
        self._secret: str | None = None
        self._history: list[GuessRecord] = []
        self._solved = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def reset(self, secret: str | None = None, rng: random.Random | None = None) -> None:
        """Start a new game. Random secret if *secret* is None."""
        if secret is not None:
            secret = validate_word(secret, self._bank.word_length)
            if secret not in self._bank:
                raise InvalidWord(f"secret {secret!r} is not in the word bank")
        else:
            secret = (rng or random).choice(self._bank.words)
        self._secret = secret
        self._history = []
        self._solved = False

    def guess(self, word: str) -> Clue:
        """Submit a guess and receive its clue.

        Raises
        ------
        RuntimeError
            If the game is over (solved or out of guesses).
        InvalidWord
            If *word* has the wrong length or is not in the bank
            (when ``allow_non_words`` is False).
        """
        if self._secret is None:
            raise RuntimeError("Call reset() before guessing")
        if self.game_over():
            raise RuntimeError("Game is already over")
        word = validate_word(word, self._bank.word_length)
        if not self._allow_non_words and word not in self._bank:
            raise InvalidWord(f"{word!r} is not in the word bank")

        pat = clue(word, self._secret)
        self._history.append(GuessRecord(word, pat))
        if is_solved(pat):
            self._solved = True
        return pat

    def is_solved(self) -> bool:
        return self._solved

    def remaining_guesses(self) -> int:
        return self._max_guesses - len(self._history)

    def game_over(self) -> bool:
        return self._solved or len(self._history) >= self._max_guesses

    @property
    def history(self) -> list[GuessRecord]:
        return list(self._history)

    @property
    def secret(self) -> str:
        """Reveal the secret word (only after game over)."""
        if self._secret is None:
            raise RuntimeError("No game in progress")
        if not self.game_over():
            raise RuntimeError("Game is still in progress")
        return self._secret

    @property
    def word_length(self) -> int:
        return self._bank.word_length

    @property
    def max_guesses(self) -> int:
        return self._max_guesses
