"""Pydantic models for template and resolved archive entries."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class RawEntry(BaseModel):
    """A single file read from the template archive.

    ``content`` is a ``str`` for text files and ``bytes`` for binary ones
    (images, icons) that never go through token substitution.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Path relative to the template root")
    content: str | bytes = Field(..., description="Text or binary file content")
    timestamp: datetime | None = Field(default=None, description="Modification time (UTC)")
    unix_permissions: int | None = Field(default=None, description="Unix mode bits")

    @property
    def is_binary(self) -> bool:
        return isinstance(self.content, bytes)

    @property
    def size(self) -> int:
        """Size of the content in bytes once encoded."""
        if isinstance(self.content, bytes):
            return len(self.content)
        return len(self.content.encode("utf-8"))


class ResolvedEntry(RawEntry):
    """A template entry whose path and content have been token-substituted."""


# Ordered mapping ``relative path -> entry`` in archive enumeration order.
FileTree = dict[str, RawEntry]


class PluginArchive(BaseModel):
    """The generated, downloadable plugin archive."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., description="Archive file name, e.g. 'MyPlugin-src.zip'")
    content: bytes = Field(..., description="Serialised ZIP bytes")

    def save(self, directory: str | Path) -> Path:
        """Write the archive into *directory* and return the file path."""
        target_dir = Path(directory)
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / self.filename
        target.write_bytes(self.content)
        return target
