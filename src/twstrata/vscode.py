"""VS Code settings export for the Tailwind CSS IntelliSense extension.

Maps every source CSS file to itself plus the views that use it, so the
editor resolves utility classes per group.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from twstrata.errors import ConfigurationError
from twstrata.model.group import SourceGroupMap

logger = logging.getLogger(__name__)

SETTINGS_KEY = "tailwindCSS.experimental.configFile"


def _relative(path: Path, root: Path) -> str:
    return Path(os.path.relpath(path, root)).as_posix()


def build_vscode_settings(
    group_map: SourceGroupMap, source_dir: Path, settings_root: Path
) -> dict[str, Any]:
    """Pure mapping from groups to the IntelliSense ``configFile`` setting."""
    config_file: dict[str, list[str]] = {}
    for group in group_map:
        css = _relative(Path(source_dir) / group.source_filename, settings_root)
        views = [_relative(view, settings_root) for view in group.views]
        config_file[css] = [css, *views]
    return {SETTINGS_KEY: config_file}


def find_settings_file(start: Path) -> Path:
    """``settings.json`` of the nearest ``.vscode`` directory at or above *start*.

    Falls back to ``<start>/.vscode/settings.json`` when none exists.
    """
    start = Path(start).resolve()
    for directory in (start, *start.parents):
        if (directory / ".vscode").is_dir():
            return directory / ".vscode" / "settings.json"
    return start / ".vscode" / "settings.json"


def update_vscode_settings(path: Path, settings: dict[str, Any]) -> dict[str, Any]:
    """Merge *settings* into the JSON file at *path* and write it back."""
    path = Path(path)
    current: dict[str, Any] = {}
    if path.exists():
        try:
            current = json.loads(path.read_text(encoding="utf-8") or "{}")
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Error reading settings file: {path}", cause=exc) from exc
        if not isinstance(current, dict):
            raise ConfigurationError(f"Settings file {path} does not contain a JSON object")
    current.update(settings)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(current, indent=4) + "\n", encoding="utf-8")
    logger.info("Updated settings file: %s", path)
    return current
