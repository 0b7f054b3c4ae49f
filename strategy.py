"""Abstract base class for guess scorers, plus solver configuration."""

from __future__ import annotations

import enum
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

from errors import InvalidConfiguration

if TYPE_CHECKING:
    from lexicon import WordBank
    from restrictions import Restrictions

T = TypeVar("T")

DEFAULT_WORKERS = 2
DEFAULT_COMBO_LIMIT = 1000


class GuessFrom(enum.Enum):
    """Which words the next guess may be chosen from."""

    POSSIBLE_ANSWERS_ONLY = "possible"
    ANY_UNGUESSED_WORD = "any"


@dataclass(frozen=True)
class SolverConfig:
    """Configuration shared by the guesser and the scorers.

    Attributes
    ----------
    guess_from : GuessFrom
        Candidate pool policy. Strings ``"possible"`` / ``"any"`` are
        accepted and converted.
    workers : int
        Maximum number of worker processes used to score candidates and
        to build precomputed tables. Kept low by default because the
        elimination scorers are memory hungry.
    combo_limit : int
        :class:`~scorers.combo_eliminations.MaxComboEliminationsScorer`
        only looks two guesses ahead while more than this many answers
        are possible.
    chunk_size : int or None
        Candidates per work unit; None picks one from the pool size.
    """

    guess_from: GuessFrom = GuessFrom.POSSIBLE_ANSWERS_ONLY
    workers: int = DEFAULT_WORKERS
    combo_limit: int = DEFAULT_COMBO_LIMIT
    chunk_size: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.guess_from, GuessFrom):
            try:
                object.__setattr__(self, "guess_from", GuessFrom(self.guess_from))
            except ValueError:
                choices = [g.value for g in GuessFrom]
                raise InvalidConfiguration(
                    f"guess_from must be one of {choices}, got {self.guess_from!r}"
                ) from None
        check_positive("workers", self.workers)
        check_positive("combo_limit", self.combo_limit)
        if self.chunk_size is not None:
            check_positive("chunk_size", self.chunk_size)


def check_positive(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise InvalidConfiguration(f"{name} must be a positive integer, got {value!r}")


# ------------------------------------------------------------------
# One-time lazy values
# ------------------------------------------------------------------

class OnceCell(Generic[T]):
    """A value computed at most once, even with concurrent first callers.

    States: ``UNINITIALIZED`` -> ``COMPUTING`` -> ``READY``. The first
    caller of :meth:`get_or_compute` computes; callers arriving while it
    computes block until the value is ready. If the computation raises,
    the cell goes back to ``UNINITIALIZED`` and the error propagates.

    Pickling keeps a ready value and drops everything else, so worker
    processes receive finished tables only.
    """

    UNINITIALIZED = "uninitialized"
    COMPUTING = "computing"
    READY = "ready"

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._state = self.UNINITIALIZED
        self._value: T | None = None

    @property
    def state(self) -> str:
        return self._state

    def is_ready(self) -> bool:
        return self._state == self.READY

    def get(self) -> T:
        if self._state != self.READY:
            raise RuntimeError("value has not been computed yet")
        return self._value  # type: ignore[return-value]

    def get_or_compute(self, compute: Callable[[], T]) -> T:
        with self._cond:
            while self._state == self.COMPUTING:
                self._cond.wait()
            if self._state == self.READY:
                return self._value  # type: ignore[return-value]
            self._state = self.COMPUTING

        try:
            value = compute()
        except BaseException:
            with self._cond:
                self._state = self.UNINITIALIZED
                self._cond.notify_all()
            raise

        with self._cond:
            self._value = value
            self._state = self.READY
            self._cond.notify_all()
        return value

    def set(self, value: T) -> None:
        """Fill the cell from outside (e.g. a precomputed file)."""
        with self._cond:
            if self._state != self.UNINITIALIZED:
                raise RuntimeError(f"cannot set a cell that is {self._state}")
            self._value = value
            self._state = self.READY
            self._cond.notify_all()

    def __getstate__(self):
        return self._value if self._state == self.READY else None, self._state == self.READY

    def __setstate__(self, state):
        value, ready = state
        self._cond = threading.Condition()
        self._value = value
        self._state = self.READY if ready else self.UNINITIALIZED


# ------------------------------------------------------------------
# Scorer interface
# ------------------------------------------------------------------

class Scorer(ABC):
    """Interface that every guess scorer implements.

    A scorer rates a candidate guess against the current possible
    answers and restrictions; higher is better. Anything derived from one
    ``(possible_answers, restrictions)`` snapshot is built once by
    :meth:`build_round_state` and cached on the instance until a
    different snapshot arrives.
    """

    #: Human-readable name, also used to look the scorer up by name.
    name: str = ""

    def __init__(self) -> None:
        self._round_lock = threading.Lock()
        self._round_key: tuple[tuple[str, ...], Restrictions] | None = None
        self._round_state: Any = None

    @classmethod
    def from_config(cls, bank: WordBank, config: SolverConfig) -> Scorer:
        """Build the scorer for *bank*; scorers needing more override this."""
        return cls()

    @abstractmethod
    def build_round_state(
        self,
        possible_answers: tuple[str, ...],
        restrictions: Restrictions,
    ) -> Any:
        """Precompute whatever :meth:`score_with_state` needs for a snapshot."""

    @abstractmethod
    def score_with_state(self, candidate: str, state: Any) -> float:
        """Score *candidate* using a state from :meth:`build_round_state`."""

    def score(
        self,
        candidate: str,
        possible_answers: tuple[str, ...],
        restrictions: Restrictions,
    ) -> float:
        """Return the desirability of guessing *candidate*."""
        return self.score_with_state(
            candidate, self.round_state(possible_answers, restrictions)
        )

    def round_state(
        self,
        possible_answers: tuple[str, ...],
        restrictions: Restrictions,
    ) -> Any:
        possible_answers = tuple(possible_answers)
        with self._round_lock:
            key = self._round_key
            if key is not None and (
                (key[0] is possible_answers and key[1] is restrictions)
                or (key[1] == restrictions and key[0] == possible_answers)
            ):
                return self._round_state
            state = self.build_round_state(possible_answers, restrictions)
            self._round_key = (possible_answers, restrictions)
            self._round_state = state
            return state

    def prepare(
        self,
        possible_answers: tuple[str, ...],
        restrictions: Restrictions,
        workers: int = 1,
    ) -> None:
        """Build every lazy table needed to score this snapshot.

        Called before scoring is fanned out, so that workers only ever
        read finished tables.
        """
        self.round_state(possible_answers, restrictions)

    def first_guess_scores(
        self,
        workers: int = 1,
        verbose: bool = False,
    ) -> dict[str, float] | None:
        """Scores of every bank word before any feedback, if cached.

        Scorers whose opening round is too costly to repeat override
        this; the default has no cache.
        """
        return None

    def seed_first_guess_scores(self, scores: dict[str, float]) -> None:
        raise InvalidConfiguration(f"{self.name} scorer has no first-guess table")

    def table_signature(self) -> dict[str, Any]:
        """Settings a persisted first-guess table must have been built with."""
        return {"scorer": self.name}

    def __getstate__(self):
        state = self.__dict__.copy()
        del state["_round_lock"]
        return state

    def __setstate__(self, state):
        self.__dict__.update(state)
        self._round_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
