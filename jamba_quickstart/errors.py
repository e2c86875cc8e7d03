"""Error taxonomy for the quickstart generator.

Every failure surfaced to a caller derives from ``QuickstartError`` and carries
enough context (the failing field, template version or codec message) for the
caller to show an actionable message.  Nothing here is retried or logged; the
exceptions simply propagate to whoever started the operation.
"""

from __future__ import annotations


class QuickstartError(Exception):
    """Base class for all quickstart generation failures."""


class ValidationError(QuickstartError):
    """Raised when user input is missing a mandatory field."""

    def __init__(self, field: str, message: str = "") -> None:
        self.field = field
        super().__init__(message or f"Field '{field}' must be provided")


class FetchError(QuickstartError):
    """Raised when the template package for a version cannot be retrieved."""

    def __init__(self, version: str, message: str, status: int | None = None) -> None:
        self.version = version
        self.status = status
        detail = f" (HTTP {status})" if status is not None else ""
        super().__init__(f"Cannot fetch template '{version}'{detail}: {message}")


class DecodeError(QuickstartError):
    """Raised when template bytes are not a valid archive or an entry fails to extract."""

    def __init__(self, message: str, entry: str | None = None) -> None:
        self.entry = entry
        prefix = f"{entry}: " if entry else ""
        super().__init__(f"Cannot decode template archive: {prefix}{message}")


class EncodeError(QuickstartError):
    """Raised when the output archive cannot be serialised."""

    def __init__(self, message: str, entry: str | None = None) -> None:
        self.entry = entry
        prefix = f"{entry}: " if entry else ""
        super().__init__(f"Cannot encode plugin archive: {prefix}{message}")


class PathConflictError(QuickstartError):
    """Raised when two template entries resolve to the same output path."""

    def __init__(self, path: str, first: str, second: str) -> None:
        self.path = path
        self.sources = (first, second)
        super().__init__(f"Template entries '{first}' and '{second}' both resolve to '{path}'")
