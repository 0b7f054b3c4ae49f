"""Choosing the next guess from a history of guesses and clues."""

from __future__ import annotations

from typing import Iterable, NamedTuple

from errors import NoPossibleAnswers
from fanout import ScoredWord, rank_candidates, rank_key
from lexicon import WordBank
from restrictions import Restrictions, filter_possible, fold
from strategy import GuessFrom, Scorer, SolverConfig
from wordle_env import GuessRecord, validate_word


class Selection(NamedTuple):
    word: str
    score: float
    ranking: tuple[ScoredWord, ...]


def candidate_pool(
    bank: WordBank,
    possible_answers: tuple[str, ...],
    guessed: Iterable[str],
    guess_from: GuessFrom,
) -> tuple[str, ...]:
    """Words the next guess may be chosen from, in bank order.

    ``ANY_UNGUESSED_WORD`` narrows to the possible answers once at most two
    remain: a word that cannot be the answer cannot win then.
    """
    guessed = set(guessed)
    if guess_from is GuessFrom.ANY_UNGUESSED_WORD and len(possible_answers) > 2:
        return tuple(w for w in bank if w not in guessed)
    return tuple(w for w in possible_answers if w not in guessed)


def _select(
    scorer: Scorer,
    bank: WordBank,
    history: list[GuessRecord],
    restrictions: Restrictions,
    possible: tuple[str, ...],
    config: SolverConfig,
    top_n: int,
    verbose: bool = False,
) -> Selection:
    pool = candidate_pool(bank, possible, (r.guess for r in history), config.guess_from)
    if not pool:
        raise NoPossibleAnswers("no candidate guesses are left")

    order = {w: bank.index_of(w) for w in pool}
    cached = None
    if not history:
        cached = scorer.first_guess_scores(workers=config.workers, verbose=verbose)
    if cached is not None:
        possible_set = set(possible)
        ranking = sorted(
            (ScoredWord(w, cached[w], w in possible_set, order[w]) for w in pool),
            key=rank_key,
        )
    else:
        ranking = rank_candidates(
            scorer, pool, possible, restrictions,
            workers=config.workers,
            order=order,
            chunk_size=config.chunk_size,
            verbose=verbose,
        )

    best = ranking[0]
    kept = ranking[:top_n] if top_n > 0 else ranking
    return Selection(best.word, best.score, tuple(kept))


def select_guess(
    scorer: Scorer,
    bank: WordBank,
    history: Iterable[GuessRecord],
    config: SolverConfig | None = None,
    top_n: int = 0,
) -> Selection:
    """Return the best next guess for *history*.

    Parameters
    ----------
    scorer : Scorer
        Rates candidates; higher is better.
    bank : WordBank
        All valid words; its order breaks the last ties.
    history : iterable of GuessRecord
        Guesses played so far, oldest first.
    config : SolverConfig or None
        Pool policy and worker settings (defaults if None).
    top_n : int
        How many ranked entries to keep in ``Selection.ranking``; 0 keeps
        all of them.

    Raises
    ------
    NoPossibleAnswers
        If the history is contradictory or leaves no candidate guess.
    """
    config = config or SolverConfig()
    records = [
        GuessRecord(validate_word(guess, bank.word_length), tuple(pattern))
        for guess, pattern in history
    ]
    restrictions = fold(records, bank.word_length)
    possible = filter_possible(bank, restrictions)
    return _select(scorer, bank, records, restrictions, possible, config, top_n)


class Guesser:
    """Keeps one game's history and proposes guesses for it.

    Restrictions and possible answers are refined incrementally on every
    :meth:`update`, so each round only filters the answers still left.
    """

    def __init__(
        self,
        bank: WordBank,
        scorer: Scorer,
        config: SolverConfig | None = None,
        verbose: bool = False,
    ) -> None:
        self.bank = bank
        self.scorer = scorer
        self.config = config or SolverConfig()
        self.verbose = verbose
        self.reset()

    def reset(self) -> None:
        """Forget the history and start a new game."""
        self._history: list[GuessRecord] = []
        self._restrictions = Restrictions.empty(self.bank.word_length)
        self._possible: tuple[str, ...] = self.bank.words

    @property
    def history(self) -> list[GuessRecord]:
        return list(self._history)

    @property
    def restrictions(self) -> Restrictions:
        return self._restrictions

    @property
    def possible_answers(self) -> tuple[str, ...]:
        return self._possible

    def update(self, record: GuessRecord) -> tuple[str, ...]:
        """Apply one guess and its clue; return the answers still possible.

        Raises
        ------
        NoPossibleAnswers
            If the clue contradicts earlier ones or leaves no bank word.
        """
        record = GuessRecord(*record)
        restrictions = self._restrictions.update(record)
        possible = filter_possible(self._possible, restrictions)
        self._history.append(
            GuessRecord(validate_word(record.guess, self.bank.word_length), tuple(record.clue))
        )
        self._restrictions = restrictions
        self._possible = possible
        return possible

    def select_next_guess(self, top_n: int = 0) -> Selection:
        return _select(
            self.scorer, self.bank, self._history, self._restrictions,
            self._possible, self.config, top_n, verbose=self.verbose,
        )
