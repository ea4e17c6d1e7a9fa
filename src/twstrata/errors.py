"""Error hierarchy for twstrata builds."""

from __future__ import annotations


class TwStrataError(Exception):
    """Base error for everything that can abort or degrade a build."""

    def __init__(self, message: str, *, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class ConfigurationError(TwStrataError):
    """Bad configuration or project layout. Fatal."""


class StubCreationError(TwStrataError):
    """A default source CSS file could not be created. Fatal."""

    def __init__(self, message: str, *, path: str = "", cause: Exception | None = None) -> None:
        super().__init__(message, cause=cause)
        self.path = path


class ExpansionError(TwStrataError):
    """A single group could not be expanded into CSS."""

    def __init__(
        self,
        message: str,
        *,
        group: str = "",
        stderr: str = "",
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self.group = group
        self.stderr = stderr


class CascadeError(TwStrataError):
    """The global tier failed, so no other tier can be deduplicated. Fatal."""


class OutputError(TwStrataError):
    """An output stylesheet could not be written. Fatal."""
