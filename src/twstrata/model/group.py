"""Group model: named bundles of view files sharing one CSS source."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator


@dataclass
class Group:
    """A CSS source group and the view files that reference it."""

    name: str
    views: list[Path] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Group name must be a non-empty string")

    @property
    def source_filename(self) -> str:
        return f"{self.name}.css"


@dataclass
class SourceGroupMap:
    """Every group taking part in one build, keyed by name.

    ``global_name`` and ``critical_name`` identify the two reserved tiers;
    every other group is a page group. A map belongs to a single build and is
    discarded afterwards.
    """

    global_name: str
    critical_name: str
    groups: dict[str, Group] = field(default_factory=dict)

    def ensure(self, name: str) -> Group:
        """Return the named group, creating an empty one if needed."""
        group = self.groups.get(name)
        if group is None:
            group = Group(name=name)
            self.groups[name] = group
        return group

    def add_view(self, name: str, view: Path) -> Group:
        group = self.ensure(name)
        group.views.append(view)
        return group

    def page_groups(self) -> list[Group]:
        """Groups other than global and critical, in insertion order."""
        reserved = (self.global_name, self.critical_name)
        return [g for name, g in self.groups.items() if name not in reserved]

    def names(self) -> list[str]:
        return list(self.groups)

    def get(self, name: str) -> Group | None:
        return self.groups.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.groups

    def __getitem__(self, name: str) -> Group:
        return self.groups[name]

    def __iter__(self) -> Iterator[Group]:
        return iter(self.groups.values())

    def __len__(self) -> int:
        return len(self.groups)
