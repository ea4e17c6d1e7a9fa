"""Expansion engines: turn authored CSS plus view sources into expanded CSS."""

from twstrata.expansion.base import (
    ExpansionEngine,
    PassthroughEngine,
    compose_source,
    source_directive,
)
from twstrata.expansion.tailwind import DEFAULT_COMMAND, TailwindCliEngine

ENGINES = ("tailwind", "passthrough")

__all__ = [
    "ExpansionEngine",
    "PassthroughEngine",
    "TailwindCliEngine",
    "DEFAULT_COMMAND",
    "ENGINES",
    "compose_source",
    "source_directive",
]
