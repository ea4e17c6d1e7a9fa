"""One complete build: views -> groups -> stubs -> cascade -> output files."""

from __future__ import annotations

import glob
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from twstrata.cascade.orchestrator import CascadeResult, Expander, build_cascade
from twstrata.config import TwStrataConfig
from twstrata.expansion.base import ExpansionEngine, PassthroughEngine
from twstrata.expansion.tailwind import TailwindCliEngine
from twstrata.groups.directives import build_extractors
from twstrata.groups.resolver import (
    discover_source_groups,
    ensure_source_stubs,
    resolve_groups,
)
from twstrata.model.group import SourceGroupMap
from twstrata.output import write_outputs

logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    """What a build produced."""

    written: dict[str, Path] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)
    created_stubs: list[Path] = field(default_factory=list)
    duration: float = 0.0

    @property
    def succeeded(self) -> bool:
        return not self.failures


def format_duration(seconds: float) -> str:
    """Humanize a duration: ``350ms``, ``1.2s``, ``2m 5s``, ``1h 3m``."""
    if seconds < 1:
        return f"{int(round(seconds * 1000))}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(round(seconds)), 60)
    if minutes < 60:
        return f"{minutes}m {secs}s"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m"


def collect_view_files(patterns: Iterable[str], root: Path) -> list[Path]:
    """Expand view globs (``**`` supported) relative to *root*, files only."""
    found: list[Path] = []
    seen: set[Path] = set()
    for pattern in patterns:
        for match in sorted(glob.glob(pattern, root_dir=root, recursive=True)):
            path = (Path(root) / match).resolve()
            if path in seen or not path.is_file():
                continue
            seen.add(path)
            found.append(path)
    return found


def make_engine(name: str, config: TwStrataConfig) -> ExpansionEngine:
    if name == "passthrough":
        return PassthroughEngine()
    if name == "tailwind":
        return TailwindCliEngine(config.tailwind_command, cwd=str(config.root))
    raise ValueError(f"Unknown expansion engine: {name!r}")


def resolve_source_groups(config: TwStrataConfig) -> SourceGroupMap:
    """Collect the configured views and resolve them into a group map."""
    view_files = collect_view_files(config.views, config.root)
    logger.debug("Found %d view file(s)", len(view_files))
    group_map = resolve_groups(
        view_files,
        build_extractors(config.directive_overrides),
        config.global_css_name,
        critical_group=config.critical_css_name,
        known_groups=discover_source_groups(config.source_path),
        max_workers=config.max_workers,
    )
    return group_map


def build_all(config: TwStrataConfig, engine: ExpansionEngine | None = None) -> BuildReport:
    """Run a full build and write the output stylesheets.

    Raises:
        TwStrataError: on any fatal condition (configuration, stub creation,
            global tier failure, output failure).
    """
    start = time.monotonic()
    engine = engine or make_engine("tailwind", config)
    logger.info("Source dir: %s", config.source_path)

    group_map = resolve_source_groups(config)
    report = BuildReport()
    report.created_stubs = ensure_source_stubs(
        group_map, config.source_path, stub_import=config.stub_import
    )

    cascade: CascadeResult = build_cascade(
        group_map,
        Expander(engine, config.source_path),
        max_workers=config.max_workers,
    )
    report.written = write_outputs(cascade.outputs, config.out_path)
    report.failures = dict(cascade.failures)
    report.duration = time.monotonic() - start

    if report.failures:
        logger.warning(
            "Build finished with %d failed group(s): %s",
            len(report.failures),
            ", ".join(sorted(report.failures)),
        )
    logger.debug(
        "Built %d stylesheet(s) in %s", len(report.written), format_duration(report.duration)
    )
    return report
