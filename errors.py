"""Exceptions raised by the solver core.

Every error derives from ``ValueError`` so callers that already guard
word-list or guess handling with ``except ValueError`` keep working.
"""

from __future__ import annotations


class WordleError(ValueError):
    """Base class for all solver errors."""


class InvalidWordBank(WordleError):
    """The word bank is empty, mixes word lengths, or has bad characters."""


class InvalidWord(WordleError):
    """A guess or target has the wrong length or out-of-alphabet letters."""


class NoPossibleAnswers(WordleError):
    """No word in the bank is consistent with the history.

    This means the history is contradictory (or the game is already
    over); it is never a normal outcome of a game against a bank word.
    """


class InvalidConfiguration(WordleError):
    """A configuration value is out of range or does not fit the bank."""
