"""Auto-discovery of Scorer subclasses in this ``scorers/`` package."""

from __future__ import annotations

import importlib
import inspect
import pkgutil
from pathlib import Path
from typing import TYPE_CHECKING

from errors import InvalidConfiguration
from strategy import Scorer, SolverConfig

if TYPE_CHECKING:
    from lexicon import WordBank

_PKG_DIR = Path(__file__).resolve().parent


def _subclasses_in_module(mod) -> list[type[Scorer]]:
    found: list[type[Scorer]] = []
    for attr_name in dir(mod):
        obj = getattr(mod, attr_name)
        if (
            isinstance(obj, type)
            and issubclass(obj, Scorer)
            and obj is not Scorer
            and not inspect.isabstract(obj)
            and obj.__module__ == mod.__name__
        ):
            found.append(obj)
    return found


def discover_scorers() -> list[type[Scorer]]:
    """Import all .py files in this package and return their scorers."""
    found: list[type[Scorer]] = []
    for info in sorted(pkgutil.iter_modules([str(_PKG_DIR)]), key=lambda i: i.name):
        mod = importlib.import_module(f"scorers.{info.name}")
        found.extend(_subclasses_in_module(mod))
    return found


def scorer_names() -> list[str]:
    return [cls.name for cls in discover_scorers()]


def find_scorer(name: str) -> type[Scorer]:
    """Return the scorer class called *name* (case-insensitive)."""
    for cls in discover_scorers():
        if cls.name.lower() == name.lower():
            return cls
    raise InvalidConfiguration(
        f"Scorer {name!r} not found. Available: {scorer_names()}"
    )


def create_scorer(
    name: str,
    bank: WordBank,
    config: SolverConfig | None = None,
) -> Scorer:
    """Instantiate the scorer called *name* for *bank*."""
    return find_scorer(name).from_config(bank, config or SolverConfig())
