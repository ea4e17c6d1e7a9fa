"""Parser error types."""

from __future__ import annotations


class ParseError(Exception):
    """Raised when CSS text cannot be parsed into a tree.

    ``line`` and ``column`` are 1-based and point at the offending token when
    the lexer or parser reported one.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        source_name: str = "",
    ):
        self.line = line
        self.column = column
        self.source_name = source_name
        super().__init__(message)

    @property
    def location(self) -> str:
        where = self.source_name or "<css>"
        if self.line is None:
            return where
        if self.column is None:
            return f"{where}:{self.line}"
        return f"{where}:{self.line}:{self.column}"
