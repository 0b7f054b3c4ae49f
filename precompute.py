#!/usr/bin/env python3
"""Precompute the first-guess score table of an elimination scorer.

Scoring the opening guess is the same work for every game on a word bank
(O(N²) clue computations for max-eliminations, O(N³) for combo), so it is
computed once and saved for later runs.

Usage:
    python3 precompute.py --words data/words.txt
    python3 precompute.py --words data/words.txt --scorer combo-eliminations \
        --guess-from any --combo-limit 500 --workers 4
"""

from __future__ import annotations

import argparse
import os
import pickle
import sys
import tempfile
import time
from pathlib import Path

from errors import InvalidConfiguration, WordleError
from lexicon import WordBank, load_word_bank
from scorers import create_scorer, scorer_names
from strategy import DEFAULT_COMBO_LIMIT, DEFAULT_WORKERS, GuessFrom, Scorer, SolverConfig

_DIR = Path(__file__).resolve().parent
TABLE_DIR = _DIR / "data" / "first_guess"


# ── Table I/O ──────────────────────────────────────────────

def save_table(data: dict, path: Path) -> None:
    """Atomically save a table (write tmp then rename)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            pickle.dump(data, f, protocol=pickle.HIGHEST_PROTOCOL)
        os.replace(tmp, str(path))
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def load_table(path: Path) -> dict:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"First-guess table not found: {path}")
    with open(path, "rb") as f:
        return pickle.load(f)


def default_table_path(scorer: Scorer, bank: WordBank) -> Path:
    parts = [str(v) for v in scorer.table_signature().values()]
    return TABLE_DIR / f"{'_'.join(parts)}_{len(bank)}x{bank.word_length}.pkl"


# ── Precompute / load ──────────────────────────────────────

def precompute_first_guess(
    scorer: Scorer,
    bank: WordBank,
    path: str | Path,
    workers: int = DEFAULT_WORKERS,
    verbose: bool = False,
) -> dict[str, float]:
    """Compute *scorer*'s first-guess scores and save them to *path*.

    Raises
    ------
    InvalidConfiguration
        If the scorer has no first-guess table.
    """
    scores = scorer.first_guess_scores(workers=workers, verbose=verbose)
    if scores is None:
        raise InvalidConfiguration(f"{scorer.name} scorer has no first-guess table")
    data = dict(scorer.table_signature())
    data["words"] = list(bank.words)
    data["scores"] = dict(scores)
    save_table(data, Path(path))
    return scores


def load_first_guess_table(path: str | Path, scorer: Scorer, bank: WordBank) -> None:
    """Seed *scorer* with a table saved by :func:`precompute_first_guess`.

    Raises
    ------
    InvalidConfiguration
        If the table was built for another bank or scorer setting.
    """
    data = load_table(Path(path))
    if not isinstance(data, dict) or "scores" not in data or "words" not in data:
        raise InvalidConfiguration(f"{path} is not a first-guess table")
    if tuple(data["words"]) != bank.words:
        raise InvalidConfiguration(
            f"{path} was built for a different word bank "
            f"({len(data['words'])} words, expected {len(bank)})"
        )
    for key, expected in scorer.table_signature().items():
        if data.get(key) != expected:
            raise InvalidConfiguration(
                f"{path} was built with {key}={data.get(key)!r}, expected {expected!r}"
            )
    scorer.seed_first_guess_scores(data["scores"])


# ── CLI ────────────────────────────────────────────────────

def main() -> None:
    parser = argparse.ArgumentParser(
        description="Precompute first-guess scores for an elimination scorer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 precompute.py --words data/words.txt
  python3 precompute.py --words data/words.txt --scorer combo-eliminations --workers 4
""",
    )
    parser.add_argument("--words", type=str, required=True, help="Path to word list")
    parser.add_argument("--scorer", type=str, default="max-eliminations",
                        help=f"Scorer name (default: max-eliminations; one of {scorer_names()})")
    parser.add_argument("--guess-from", choices=[g.value for g in GuessFrom],
                        default=GuessFrom.POSSIBLE_ANSWERS_ONLY.value,
                        help="Candidate pool policy (default: possible)")
    parser.add_argument("--workers", type=int, default=DEFAULT_WORKERS,
                        help=f"Worker processes (default: {DEFAULT_WORKERS})")
    parser.add_argument("--combo-limit", type=int, default=DEFAULT_COMBO_LIMIT,
                        help=f"Two-guess lookahead above this many answers "
                             f"(default: {DEFAULT_COMBO_LIMIT})")
    parser.add_argument("--output", type=str, default=None,
                        help="Output path (default: data/first_guess/<scorer>...pkl)")
    args = parser.parse_args()

    try:
        config = SolverConfig(
            guess_from=args.guess_from,
            workers=args.workers,
            combo_limit=args.combo_limit,
        )
        bank = load_word_bank(args.words)
        scorer = create_scorer(args.scorer, bank, config)
    except (WordleError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    out_path = Path(args.output) if args.output else default_table_path(scorer, bank)
    print(f"Word bank: {len(bank)} words of length {bank.word_length}")
    print(f"Scorer: {scorer!r}")

    t0 = time.time()
    try:
        scores = precompute_first_guess(scorer, bank, out_path,
                                        workers=config.workers, verbose=True)
    except KeyboardInterrupt:
        print(f"\n\n  Interrupted! Nothing was written to {out_path}")
        sys.exit(0)
    except WordleError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    best = max(scores, key=lambda w: (scores[w], -bank.index_of(w)))
    print(f"  -> best opening guess: {best} ({scores[best]:.4f}) "
          f"[{time.time() - t0:.0f}s]")
    print(f"Table saved to {out_path}")


if __name__ == "__main__":
    main()
