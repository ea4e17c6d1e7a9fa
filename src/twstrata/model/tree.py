"""CSS tree model: Root, Rule, AtRule, Declaration and Comment nodes.

Containers own their children through an ordered ``nodes`` list. Each child
keeps a ``parent`` pointer that is only used to build structural paths and to
detach the child; it never implies ownership.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

INDENT = "  "


@dataclass(eq=False)
class Node:
    """Base class for every CSS tree node."""

    parent: Container | None = field(default=None, init=False, repr=False)

    def remove(self) -> None:
        """Detach this node from its parent. A detached node is a no-op."""
        if self.parent is not None:
            self.parent.remove_child(self)

    def to_css(self, depth: int = 0) -> str:
        raise NotImplementedError


@dataclass(eq=False)
class Container(Node):
    """A node that owns an ordered sequence of children."""

    nodes: list[Node] | None = field(default_factory=list)

    def append(self, *children: Node) -> Container:
        if self.nodes is None:
            self.nodes = []
        for child in children:
            child.remove()
            child.parent = self
            self.nodes.append(child)
        return self

    def remove_child(self, child: Node) -> None:
        if not self.nodes:
            return
        for index, existing in enumerate(self.nodes):
            if existing is child:
                del self.nodes[index]
                child.parent = None
                return

    @property
    def children(self) -> list[Node]:
        return list(self.nodes or [])

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    def walk(self) -> Iterator[Node]:
        """Yield every descendant depth-first, in source order.

        Iterates over a snapshot of each child list, so the caller may detach
        the node it was just handed.
        """
        for child in self.children:
            yield child
            if isinstance(child, Container):
                yield from child.walk()

    def walk_decls(self) -> Iterator[Declaration]:
        for node in self.walk():
            if isinstance(node, Declaration):
                yield node

    def _body_css(self, depth: int) -> str:
        return "".join(child.to_css(depth) for child in self.children)


@dataclass(eq=False)
class Root(Container):
    """The top of a parsed stylesheet. Never has a parent."""

    def to_css(self, depth: int = 0) -> str:
        return self._body_css(0)

    def __str__(self) -> str:
        return self.to_css()


@dataclass(eq=False)
class Rule(Container):
    """A qualified rule such as ``.btn:hover { ... }``."""

    selector: str = ""

    def to_css(self, depth: int = 0) -> str:
        pad = INDENT * depth
        return f"{pad}{self.selector} {{\n{self._body_css(depth + 1)}{pad}}}\n"


@dataclass(eq=False)
class AtRule(Container):
    """An at-rule. ``nodes`` is None for statement at-rules (``@layer a, b;``)."""

    name: str = ""
    params: str = ""

    @property
    def frame(self) -> str:
        """Text identifying this at-rule in a structural path."""
        if self.params:
            return f"@{self.name} {self.params}"
        return f"@{self.name}"

    def to_css(self, depth: int = 0) -> str:
        pad = INDENT * depth
        if self.nodes is None:
            return f"{pad}{self.frame};\n"
        return f"{pad}{self.frame} {{\n{self._body_css(depth + 1)}{pad}}}\n"


@dataclass(eq=False)
class Declaration(Node):
    """A ``prop: value`` pair. ``value`` keeps any ``!important`` flag."""

    prop: str = ""
    # Kept with any !important flag, so `red` and `red !important` are distinct paths.
    value: str = ""

    def to_css(self, depth: int = 0) -> str:
        return f"{INDENT * depth}{self.prop}: {self.value};\n"


@dataclass(eq=False)
class Comment(Node):
    """A ``/* ... */`` comment, stored without its delimiters."""

    text: str = ""

    def to_css(self, depth: int = 0) -> str:
        return f"{INDENT * depth}/*{self.text}*/\n"
