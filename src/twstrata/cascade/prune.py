"""Tree pruning: subtract known declaration paths and drop emptied containers."""

from __future__ import annotations

import logging
from collections.abc import Set

from twstrata.cascade.paths import build_path
from twstrata.model.tree import AtRule, Container, Root, Rule

logger = logging.getLogger(__name__)


def prune_by_paths(tree: Container, excluded: Set[str]) -> Container:
    """Detach every declaration of *tree* whose path is in *excluded*."""
    if not excluded:
        return tree
    removed = 0
    for decl in list(tree.walk_decls()):
        if build_path(decl) in excluded:
            decl.remove()
            removed += 1
    logger.debug("Removed %d duplicate declaration(s)", removed)
    return tree


def prune_empty(tree: Container) -> Container:
    """Detach rules and at-rules left without children, bottom-up.

    Children are resolved before their parent is inspected, so a single pass
    removes whole chains such as ``@media { @supports { .a { } } }``. At-rules
    without a body count as empty. The root itself is never detached.
    """
    for child in tree.children:
        if isinstance(child, Container):
            prune_empty(child)
    if isinstance(tree, (Rule, AtRule)) and tree.is_empty:
        tree.remove()
    return tree


def subtract(tree: Root, excluded: Set[str]) -> Root:
    """Remove *excluded* paths from *tree*, then clean up empty containers."""
    prune_by_paths(tree, excluded)
    prune_empty(tree)
    return tree


def strip_at_rules(tree: Container, name: str) -> Container:
    """Detach every at-rule called *name* (``@source`` leftovers and the like)."""
    for node in list(tree.walk()):
        if isinstance(node, AtRule) and node.name == name:
            node.remove()
    return tree
