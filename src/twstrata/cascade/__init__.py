"""Tiered deduplication: structural paths, pruning and the tier orchestrator."""

from twstrata.cascade.orchestrator import CascadeResult, Expander, build_cascade
from twstrata.cascade.paths import PATH_SEPARATOR, aggregate_paths, build_path
from twstrata.cascade.prune import prune_by_paths, prune_empty, strip_at_rules, subtract

__all__ = [
    "build_path",
    "aggregate_paths",
    "PATH_SEPARATOR",
    "prune_by_paths",
    "prune_empty",
    "subtract",
    "strip_at_rules",
    "Expander",
    "CascadeResult",
    "build_cascade",
]
