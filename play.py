#!/usr/bin/env python3
"""Interactive solver: think of a word, type the clues, the engine guesses.

Clue characters: ``.`` absent, ``y`` present elsewhere, ``g`` correct.
Type ``word clue`` (e.g. ``crane ..gy.``) to report a different guess
than the suggested one, or ``q`` to quit.
"""

from __future__ import annotations

import argparse
import sys

from errors import InvalidWord, NoPossibleAnswers, WordleError
from guesser import Guesser
from lexicon import load_word_bank
from scorers import create_scorer, scorer_names
from strategy import DEFAULT_WORKERS, GuessFrom, SolverConfig
from wordle_env import GuessRecord, is_solved, parse_clue, validate_word


def read_record(suggestion: str, word_length: int, prompt=input) -> GuessRecord | None:
    """Ask for a clue until one parses; None means quit."""
    while True:
        text = prompt("Clue (. y g), 'word clue', or q: ").strip()
        if text.lower() in ("q", "quit", "exit"):
            return None
        parts = text.split()
        try:
            if len(parts) == 2:
                word = validate_word(parts[0], word_length)
                return GuessRecord(word, parse_clue(parts[1], word_length))
            if len(parts) == 1:
                return GuessRecord(suggestion, parse_clue(parts[0], word_length))
        except InvalidWord as exc:
            print(f"  {exc}")
            continue
        print("  Enter the clue, e.g. '..gy.'")


def main() -> None:
    parser = argparse.ArgumentParser(description="Interactive Wordle solver")
    parser.add_argument("--words", type=str, required=True, help="Path to word list")
    parser.add_argument("--scorer", type=str, default="max-eliminations",
                        help=f"Scorer name, one of {scorer_names()}")
    parser.add_argument("--guess-from", choices=[g.value for g in GuessFrom],
                        default=GuessFrom.ANY_UNGUESSED_WORD.value,
                        help="Candidate pool policy (default: any)")
    parser.add_argument("--workers", type=int, default=DEFAULT_WORKERS,
                        help=f"Worker processes (default: {DEFAULT_WORKERS})")
    parser.add_argument("--max-guesses", type=int, default=6, help="Max guesses per game")
    parser.add_argument("--top", type=int, default=5, help="Show this many alternatives")
    args = parser.parse_args()

    try:
        config = SolverConfig(guess_from=args.guess_from, workers=args.workers)
        bank = load_word_bank(args.words)
        scorer = create_scorer(args.scorer, bank, config)
    except (WordleError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"Word bank: {len(bank)} words of length {bank.word_length}")
    print(f"Scorer: {scorer.name}")
    guesser = Guesser(bank, scorer, config)

    for turn in range(1, args.max_guesses + 1):
        try:
            selection = guesser.select_next_guess(top_n=args.top)
        except NoPossibleAnswers as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        others = ", ".join(f"{s.word} ({s.score:.2f})" for s in selection.ranking[1:])
        print(f"\nGuess {turn}: {selection.word}  "
              f"(score {selection.score:.2f}, {len(guesser.possible_answers)} possible)")
        if others:
            print(f"  also: {others}")

        record = read_record(selection.word, bank.word_length)
        if record is None:
            return
        if is_solved(record.clue):
            print(f"Solved in {turn} guesses!")
            return
        try:
            remaining = guesser.update(record)
        except NoPossibleAnswers as exc:
            print(f"Error: {exc}", file=sys.stderr)
            sys.exit(1)
        if len(remaining) <= 10:
            print(f"  possible: {', '.join(remaining)}")

    print(f"Out of guesses; {len(guesser.possible_answers)} word(s) were still possible.")


if __name__ == "__main__":
    main()
