"""Expansion engine protocol and the engine-agnostic input composition."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Protocol


class ExpansionEngine(Protocol):
    """Turns authored CSS with ``@source`` directives into expanded CSS text."""

    def expand(self, css: str, *, source_path: Path) -> str: ...


def source_directive(view: Path) -> str:
    posix = Path(view).as_posix().replace("\\", "\\\\").replace('"', '\\"')
    return f'@source "{posix}";'


def compose_source(views: Iterable[Path], source_css: str) -> str:
    """Build the engine input for a group.

    One ``@source`` line per view file is placed before the hand-authored CSS.
    """
    lines = [source_directive(view) for view in views]
    lines.append(source_css)
    return "\n".join(lines) + "\n"


class PassthroughEngine:
    """Returns its input unchanged, for sources that are already expanded."""

    def expand(self, css: str, *, source_path: Path) -> str:
        return css
