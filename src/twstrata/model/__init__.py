"""twstrata model layer -- public type re-exports."""

from twstrata.model.group import Group, SourceGroupMap
from twstrata.model.tree import AtRule, Comment, Container, Declaration, Node, Root, Rule

__all__ = [
    # tree
    "Node",
    "Container",
    "Root",
    "Rule",
    "AtRule",
    "Declaration",
    "Comment",
    # groups
    "Group",
    "SourceGroupMap",
]
