"""Build configuration: defaults plus an optional ``twstrata.yaml`` file.

Example ``twstrata.yaml``::

    source_dir: tw
    out_dir: wwwroot/css
    views:
      - Views/**/*.cshtml
    global_css_name: theme
    directive_overrides:
      html: '<!--\\s*@useCSS\\s*:\\s*([\\w\\-./\\\\]+(?:\\.css)?)\\s*-->'
"""

from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from twstrata.errors import ConfigurationError
from twstrata.expansion.tailwind import DEFAULT_COMMAND
from twstrata.groups.resolver import DEFAULT_STUB_IMPORT

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("twstrata.yaml", "twstrata.yml")

DEFAULT_VIEWS: tuple[str, ...] = (
    "views/**/*.html",
    "views/**/*.liquid",
    "views/**/*.cshtml",
)


@dataclass(frozen=True)
class TwStrataConfig:
    source_dir: str = "tw"
    out_dir: str = "dist"
    views: tuple[str, ...] = DEFAULT_VIEWS
    global_css_name: str = "theme"
    critical_css_name: str = "critical"
    directive_overrides: dict[str, str] = field(default_factory=dict)
    stub_import: str = DEFAULT_STUB_IMPORT
    tailwind_command: tuple[str, ...] = DEFAULT_COMMAND
    max_workers: int | None = None
    watch_interval: float = 0.5  # seconds between polls
    watch_debounce: float = 0.2  # quiet period before a rebuild
    working_dir: str = "."

    def __post_init__(self) -> None:
        # Group names are file stems; "theme.css" and "theme" are the same group.
        for name in ("global_css_name", "critical_css_name"):
            value = getattr(self, name)
            if value.endswith(".css"):
                object.__setattr__(self, name, value[: -len(".css")])
        if not self.global_css_name:
            raise ConfigurationError("global_css_name must not be empty")
        if not self.critical_css_name:
            raise ConfigurationError("critical_css_name must not be empty")
        if self.global_css_name == self.critical_css_name:
            raise ConfigurationError(
                "global_css_name and critical_css_name must differ"
            )

    @property
    def root(self) -> Path:
        return Path(os.path.abspath(self.working_dir))

    @property
    def source_path(self) -> Path:
        return self.root / self.source_dir

    @property
    def out_path(self) -> Path:
        return self.root / self.out_dir

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, working_dir: str = ".") -> TwStrataConfig:
        """Build a config from user values; missing keys keep their defaults."""
        known = {f.name for f in fields(cls)} - {"working_dir"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration key(s): {', '.join(unknown)}")

        kwargs: dict[str, Any] = {"working_dir": working_dir}
        for key, value in data.items():
            if value is None:
                continue
            kwargs[key] = _coerce(key, value)
        return cls(**kwargs)

    def with_working_dir(self, working_dir: str) -> TwStrataConfig:
        return replace(self, working_dir=working_dir)


def _expect(key: str, value: Any, types: type | tuple[type, ...]) -> Any:
    if isinstance(value, bool) or not isinstance(value, types):
        raise ConfigurationError(f"Invalid value for {key!r}: {value!r}")
    return value


def _coerce(key: str, value: Any) -> Any:
    if key == "views":
        if isinstance(value, str):
            return (value,)
        _expect(key, value, list)
        return tuple(_expect(key, v, str) for v in value)
    if key == "tailwind_command":
        if isinstance(value, str):
            return tuple(shlex.split(value))
        _expect(key, value, list)
        return tuple(_expect(key, v, str) for v in value)
    if key == "directive_overrides":
        _expect(key, value, dict)
        return {str(ext): _expect(key, pattern, str) for ext, pattern in value.items()}
    if key == "max_workers":
        return _expect(key, value, int)
    if key in ("watch_interval", "watch_debounce"):
        return float(_expect(key, value, (int, float)))
    return _expect(key, value, str)


def find_config_file(cwd: str | Path) -> Path | None:
    for name in CONFIG_FILENAMES:
        candidate = Path(cwd) / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: str | Path | None = None, cwd: str | Path | None = None) -> TwStrataConfig:
    """Load configuration from YAML, falling back to defaults.

    Args:
        path: Explicit config file. If None, ``twstrata.yaml`` (or ``.yml``)
            in *cwd* is used when present.
        cwd: Project root that relative paths resolve against.
    """
    working_dir = str(cwd) if cwd is not None else os.getcwd()

    config_path = Path(path) if path is not None else find_config_file(working_dir)
    if config_path is None:
        logger.info("No twstrata.yaml file found. Using defaults.")
        return TwStrataConfig(working_dir=working_dir)

    logger.info("Loading %s", config_path)
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {config_path}", cause=exc) from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}", cause=exc) from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the top level")
    return TwStrataConfig.from_mapping(data, working_dir=working_dir)
