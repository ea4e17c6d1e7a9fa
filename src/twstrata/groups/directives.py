"""Per-extension ``@useCSS`` directive extractors.

Syntax example (HTML):
    <!-- @useCSS: checkout -->
    <!-- @useCSS: ../tw/checkout.css -->
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Protocol

DEFAULT_DIRECTIVES: dict[str, str] = {
    "html": r"<!--\s*@useCSS:\s*([\w\-./\\]+(?:\.css)?)?\s*-->",
    "cshtml": r"@\*\s*@useCSS:\s*([\w\-./\\]+(?:\.css)?)?\s*\*@",
    "liquid": r"{%\s*comment\s*%}\s*@useCSS:\s*([\w\-./\\]+(?:\.css)?)?\s*{%\s*endcomment\s*%}",
}


class DirectiveExtractor(Protocol):
    """Finds an explicit group reference in a view file's text."""

    def extract(self, text: str) -> str | None: ...


@dataclass(frozen=True)
class RegexDirective:
    """Extractor backed by a regex whose first group captures the reference."""

    pattern: re.Pattern[str]

    @classmethod
    def compile(cls, pattern: str | re.Pattern[str], flags: int = 0) -> RegexDirective:
        if isinstance(pattern, re.Pattern):
            return cls(pattern)
        return cls(re.compile(pattern, flags))

    def extract(self, text: str) -> str | None:
        match = self.pattern.search(text)
        if match is None or not match.groups():
            return None
        return match.group(1) or None


def build_extractors(
    overrides: Mapping[str, str | re.Pattern[str]] | None = None,
) -> dict[str, DirectiveExtractor]:
    """Default extractors, with *overrides* replacing them per extension.

    Defaults are case-insensitive; overrides are compiled exactly as given.
    Extension keys are normalized to lower case without a leading dot.
    """
    extractors: dict[str, DirectiveExtractor] = {
        ext: RegexDirective.compile(pattern, re.IGNORECASE)
        for ext, pattern in DEFAULT_DIRECTIVES.items()
    }
    for ext, pattern in (overrides or {}).items():
        extractors[normalize_extension(ext)] = RegexDirective.compile(pattern)
    return extractors


def normalize_extension(ext: str) -> str:
    return ext.lstrip(".").lower()
