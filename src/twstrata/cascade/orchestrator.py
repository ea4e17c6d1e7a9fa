"""Tier orchestrator: expands every group and deduplicates the cascade.

Priority is critical > global > page groups. Global loses whatever critical
already declares; each page group loses whatever critical or the reduced global
declares. Page groups are never compared with each other.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from twstrata.cascade.paths import aggregate_paths
from twstrata.cascade.prune import strip_at_rules, subtract
from twstrata.errors import CascadeError, ConfigurationError, ExpansionError
from twstrata.expansion.base import ExpansionEngine, compose_source
from twstrata.model.group import Group, SourceGroupMap
from twstrata.model.tree import Root
from twstrata.parser import ParseError, parse_css

logger = logging.getLogger(__name__)


class Expander:
    """Feeds one group through the expansion engine and parses the result."""

    def __init__(self, engine: ExpansionEngine, source_dir: Path) -> None:
        self.engine = engine
        self.source_dir = Path(source_dir)

    def source_path(self, group: Group) -> Path:
        return self.source_dir / group.source_filename

    def expand(self, group: Group) -> Root:
        source_path = self.source_path(group)
        if group.views:
            logger.info(
                "Processing %s CSS with sources: %s",
                group.name,
                ", ".join(str(v) for v in group.views),
            )
        else:
            logger.info("Processing %s CSS with no sources", group.name)

        try:
            source_css = source_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ExpansionError(
                f"Cannot read source CSS {source_path}: {exc}",
                group=group.name,
                cause=exc,
            ) from exc

        expanded = self.engine.expand(
            compose_source(group.views, source_css), source_path=source_path
        )
        try:
            tree = parse_css(expanded, source_name=str(source_path))
        except ParseError as exc:
            raise ExpansionError(
                f"Engine output for {group.name} is not valid CSS ({exc.location}): {exc}",
                group=group.name,
                cause=exc,
            ) from exc
        strip_at_rules(tree, "source")
        return tree


@dataclass
class CascadeResult:
    """Final trees keyed by group name, plus the groups that failed."""

    outputs: dict[str, Root] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return not self.failures


def _expand_or_record(
    expander: Expander, group: Group, result: CascadeResult
) -> Root | None:
    try:
        return expander.expand(group)
    except ExpansionError as exc:
        logger.error("Error generating %s CSS: %s", group.name, exc)
        if exc.stderr:
            logger.error("%s", exc.stderr)
        result.failures[group.name] = str(exc)
        return None


def build_cascade(
    group_map: SourceGroupMap,
    expander: Expander,
    *,
    max_workers: int | None = None,
) -> CascadeResult:
    """Expand and deduplicate every group in *group_map*.

    Raises:
        ConfigurationError: the global group is not in the map.
        CascadeError: the global group could not be expanded.
    """
    global_group = group_map.get(group_map.global_name)
    if global_group is None:
        raise ConfigurationError(
            f"Global CSS '{group_map.global_name}' not found in the group map"
        )
    critical_group = group_map.get(group_map.critical_name)
    if critical_group is None:
        critical_group = Group(name=group_map.critical_name)

    result = CascadeResult()

    # Critical and global are independent until the subtraction step.
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        critical_future = pool.submit(_expand_or_record, expander, critical_group, result)
        global_future = pool.submit(expander.expand, global_group)
        critical_tree = critical_future.result()
        try:
            global_tree = global_future.result()
        except ExpansionError as exc:
            raise CascadeError(
                f"Global CSS '{global_group.name}' failed to build: {exc}", cause=exc
            ) from exc

    critical_paths = aggregate_paths(critical_tree) if critical_tree is not None else set()
    subtract(global_tree, critical_paths)
    base_paths = critical_paths | aggregate_paths(global_tree)

    if critical_tree is not None:
        result.outputs[critical_group.name] = critical_tree
    result.outputs[global_group.name] = global_tree

    def _build_page(group: Group) -> Root | None:
        tree = _expand_or_record(expander, group, result)
        if tree is not None:
            subtract(tree, base_paths)
        return tree

    pages = group_map.page_groups()
    page_trees: dict[str, Root] = {}
    if pages:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            futures = {pool.submit(_build_page, group): group for group in pages}
            for future in as_completed(futures):
                tree = future.result()
                if tree is not None:
                    page_trees[futures[future].name] = tree

    for group in pages:
        if group.name in page_trees:
            result.outputs[group.name] = page_trees[group.name]

    logger.debug(
        "Cascade complete: %d output(s), %d failure(s)",
        len(result.outputs),
        len(result.failures),
    )
    return result
