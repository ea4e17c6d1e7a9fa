"""Group resolution: view-file directives, source discovery and stubs."""

from twstrata.groups.directives import (
    DEFAULT_DIRECTIVES,
    DirectiveExtractor,
    RegexDirective,
    build_extractors,
)
from twstrata.groups.resolver import (
    DEFAULT_STUB_IMPORT,
    discover_source_groups,
    ensure_source_stub,
    ensure_source_stubs,
    group_name_from_reference,
    resolve_groups,
    stub_content,
)

__all__ = [
    "DEFAULT_DIRECTIVES",
    "DEFAULT_STUB_IMPORT",
    "DirectiveExtractor",
    "RegexDirective",
    "build_extractors",
    "discover_source_groups",
    "ensure_source_stub",
    "ensure_source_stubs",
    "group_name_from_reference",
    "resolve_groups",
    "stub_content",
]
