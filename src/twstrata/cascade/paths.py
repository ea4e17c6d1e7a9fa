"""Structural paths: the identity used to decide that two declarations match."""

from __future__ import annotations

from twstrata.model.tree import AtRule, Container, Declaration, Rule

PATH_SEPARATOR = " > "


def build_path(decl: Declaration) -> str:
    """Return the full ancestor-to-leaf path of *decl*, outermost frame first.

    Rule frames contribute their selector text and at-rule frames contribute
    ``@name params``. Frames are compared as written: ``@media (width >= 40rem)``
    and ``@media (min-width: 40rem)`` are different paths.
    """
    parts = [f"{decl.prop}:{decl.value}"]
    current = decl.parent
    while current is not None:
        if isinstance(current, Rule):
            parts.append(current.selector)
        elif isinstance(current, AtRule):
            parts.append(current.frame)
        current = current.parent
    parts.reverse()
    return PATH_SEPARATOR.join(parts)


def aggregate_paths(tree: Container) -> set[str]:
    """Collect the paths of every declaration in *tree*."""
    return {build_path(decl) for decl in tree.walk_decls()}
