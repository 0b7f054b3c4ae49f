#!/usr/bin/env python3
"""Benchmark a scorer by solving every word (or a sample) of a word bank."""

from __future__ import annotations

import argparse
import json
import math
import random
import sys
import time
from collections import Counter
from dataclasses import asdict, dataclass, field
from pathlib import Path

from errors import WordleError
from guesser import Guesser
from lexicon import WordBank, load_word_bank
from precompute import load_first_guess_table
from scorers import create_scorer, scorer_names
from strategy import DEFAULT_COMBO_LIMIT, DEFAULT_WORKERS, GuessFrom, Scorer, SolverConfig
from wordle_env import WordleEnv, format_clue

RESULTS_DIR = Path(__file__).resolve().parent / "results"


@dataclass
class GameResult:
    target: str
    solved: bool
    guesses: list[str] = field(default_factory=list)
    clues: list[str] = field(default_factory=list)

    @property
    def num_guesses(self) -> int:
        return len(self.guesses)


def play_game(
    target: str,
    bank: WordBank,
    scorer: Scorer,
    config: SolverConfig | None = None,
    max_guesses: int | None = None,
    verbose: bool = False,
) -> GameResult:
    """Let the engine play one game against *target*.

    With ``max_guesses=None`` the game runs until solved; the engine
    never repeats a guess, so it ends within ``len(bank)`` guesses.
    """
    env = WordleEnv(bank, max_guesses=max_guesses or len(bank))
    env.reset(secret=target)
    guesser = Guesser(bank, scorer, config)
    result = GameResult(target=target, solved=False)

    while not env.game_over():
        word = guesser.select_next_guess(top_n=1).word
        pat = env.guess(word)
        result.guesses.append(word)
        result.clues.append(format_clue(pat))
        if verbose:
            print(f"  Guess {len(result.guesses)}: {word}  {format_clue(pat)}")
        if env.is_solved():
            break
        remaining = guesser.update((word, pat))
        if verbose:
            print(f"    remaining={len(remaining)}")

    result.solved = env.is_solved()
    return result


def run_benchmark(
    bank: WordBank,
    scorer: Scorer,
    config: SolverConfig | None = None,
    num_games: int | None = None,
    seed: int = 42,
    max_guesses: int | None = None,
    verbose: bool = False,
    progress: bool = False,
) -> list[GameResult]:
    """Play one game per target word; all words unless *num_games* is set."""
    config = config or SolverConfig()
    if num_games is None or num_games >= len(bank):
        targets = list(bank.words)
    else:
        targets = random.Random(seed).sample(list(bank.words), num_games)

    # Shared by every game; computed once up front.
    scorer.first_guess_scores(workers=config.workers, verbose=verbose)

    results: list[GameResult] = []
    t0 = time.time()
    for i, target in enumerate(targets, 1):
        if verbose:
            print(f"\n--- Game {i}/{len(targets)} | Target: {target} ---")
        results.append(play_game(target, bank, scorer, config, max_guesses, verbose))
        if progress:
            elapsed = time.time() - t0
            eta = elapsed / i * (len(targets) - i)
            print(f"\r  [{i}/{len(targets)}] {elapsed:.0f}s elapsed  ETA {eta:.0f}s   ",
                  end="", flush=True)
    if progress:
        print()
    return results


def summarize(results: list[GameResult]) -> dict:
    n = len(results)
    guesses = [r.num_guesses for r in results]
    mean = sum(guesses) / n if n else 0.0
    std = math.sqrt(sum((g - mean) ** 2 for g in guesses) / n) if n else 0.0
    return {
        "games": n,
        "solved": sum(1 for r in results if r.solved),
        "mean_guesses": round(mean, 3),
        "std_guesses": round(std, 3),
        "distribution": dict(sorted(Counter(guesses).items())),
    }


def print_summary(results: list[GameResult], scorer_name: str) -> None:
    summary = summarize(results)
    n = summary["games"]
    print(f"\n=== {scorer_name} — {n} games ===")
    print("|Num guesses|Num games|")
    print("|-----------|---------|")
    for num, count in summary["distribution"].items():
        print(f"|{num}|{count}|")
    print(f"\n  Solved: {summary['solved']}/{n}")
    print(f"  Average guesses: {summary['mean_guesses']:.2f} "
          f"+/- {summary['std_guesses']:.2f}")


def plot_distribution(results: list[GameResult], scorer_name: str, path: Path | None = None) -> None:
    try:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except ImportError:
        print("matplotlib not installed — skipping plot", file=sys.stderr)
        return

    guesses = [r.num_guesses for r in results]
    mx = max(guesses) if guesses else 6
    bins = list(range(1, mx + 2))

    fig, ax = plt.subplots(figsize=(6, 4))
    ax.hist(guesses, bins=bins, edgecolor="black", align="left")
    ax.set_title(f"{scorer_name} — guess distribution")
    ax.set_xlabel("Guesses")
    ax.set_ylabel("Count")
    fig.tight_layout()

    dest = path or RESULTS_DIR / f"benchmark_{scorer_name.lower()}.png"
    dest.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(dest, dpi=150)
    plt.close(fig)
    print(f"Plot saved to {dest}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Benchmark a Wordle scorer on a word bank")
    parser.add_argument("--words", type=str, required=True, help="Path to word list")
    parser.add_argument("--scorer", type=str, required=True,
                        help=f"Scorer name, one of {scorer_names()}")
    parser.add_argument("--guess-from", choices=[g.value for g in GuessFrom],
                        default=GuessFrom.POSSIBLE_ANSWERS_ONLY.value,
                        help="Candidate pool policy (default: possible)")
    parser.add_argument("--workers", type=int, default=DEFAULT_WORKERS,
                        help=f"Worker processes (default: {DEFAULT_WORKERS})")
    parser.add_argument("--combo-limit", type=int, default=DEFAULT_COMBO_LIMIT,
                        help=f"Combo lookahead threshold (default: {DEFAULT_COMBO_LIMIT})")
    parser.add_argument("--num-games", type=int, default=None,
                        help="Number of games (default: every word in the bank)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed for sampling targets")
    parser.add_argument("--max-guesses", type=int, default=None,
                        help="Give up after this many guesses (default: never)")
    parser.add_argument("--first-guess-table", type=str, default=None,
                        help="Precomputed first-guess table (see precompute.py)")
    parser.add_argument("--verbose", action="store_true", help="Print per-game details")
    parser.add_argument("--plot", type=str, default=None, help="Save plot to this path")
    parser.add_argument("--json", type=str, default=None, help="Save results as JSON")
    args = parser.parse_args()

    try:
        config = SolverConfig(
            guess_from=args.guess_from,
            workers=args.workers,
            combo_limit=args.combo_limit,
        )
        bank = load_word_bank(args.words)
        scorer = create_scorer(args.scorer, bank, config)
        if args.first_guess_table:
            load_first_guess_table(args.first_guess_table, scorer, bank)
    except (WordleError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(f"Word bank: {len(bank)} words of length {bank.word_length}")
    print(f"Scorer: {scorer!r} (guess from: {config.guess_from.value})")

    try:
        results = run_benchmark(
            bank, scorer, config,
            num_games=args.num_games,
            seed=args.seed,
            max_guesses=args.max_guesses,
            verbose=args.verbose,
            progress=not args.verbose,
        )
    except WordleError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    print_summary(results, scorer.name)

    if args.plot:
        plot_distribution(results, scorer.name, Path(args.plot))

    if args.json:
        json_path = Path(args.json)
        json_path.parent.mkdir(parents=True, exist_ok=True)
        output = {
            "scorer": scorer.name,
            "config": {
                "guess_from": config.guess_from.value,
                "workers": config.workers,
                "combo_limit": config.combo_limit,
                "num_games": args.num_games,
                "seed": args.seed,
                "max_guesses": args.max_guesses,
            },
            "summary": summarize(results),
            "games": [asdict(r) | {"num_guesses": r.num_guesses} for r in results],
        }
        json_path.write_text(json.dumps(output, indent=2, ensure_ascii=False), encoding="utf-8")
        print(f"JSON saved to {json_path}")


if __name__ == "__main__":
    main()
