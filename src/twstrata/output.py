"""Output writer: one ``<group>.css`` per final tree."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

from twstrata.errors import OutputError
from twstrata.model.tree import Root

logger = logging.getLogger(__name__)


def write_outputs(outputs: Mapping[str, Root], out_dir: Path) -> dict[str, Path]:
    """Write every tree to ``out_dir/<group>.css``; empty trees give empty files."""
    out_dir = Path(out_dir)
    written: dict[str, Path] = {}
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        for name, tree in outputs.items():
            path = out_dir / f"{name}.css"
            path.write_text(tree.to_css(), encoding="utf-8")
            logger.info("Generated CSS file: %s", path)
            written[name] = path
    except OSError as exc:
        raise OutputError(f"Cannot write output CSS to {out_dir}: {exc}", cause=exc) from exc
    return written
