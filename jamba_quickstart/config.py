"""Jamba Quickstart configuration.

Settings for where blank plugin templates are downloaded from, which parts
of a template archive are dropped, and how the generated ``<name>-src.zip``
is written.  ``Config.from_env`` reads the ``JQ_*`` overrides used by the
command line tool; ``save``/``load`` keep a copy as JSON.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field


class TemplateConfig(BaseModel):
    """Where blank plugin templates come from and how they are unpacked."""

    base_url: str = Field(
        default="https://jamba.dev/assets/quickstart/web",
        description="URL prefix under which versioned template zips are published",
    )
    filename_pattern: str = Field(
        default="plugin-{version}.zip",
        description="Template file name; '{version}' is replaced by the requested version",
    )
    root_marker: str = Field(
        default="blank-plugin/",
        description="Path prefix (up to and including this segment) stripped from every entry",
    )
    excluded_dirs: list[str] = Field(
        default=["__MACOSX", ".idea"],
        description="Directory names whose content never makes it into the deliverable",
    )
    excluded_files: list[str] = Field(
        default=[".DS_Store"],
        description="File names that are silently dropped from the template",
    )
    timeout: int = Field(default=30, ge=1, description="Download timeout in seconds")


class ArchiveConfig(BaseModel):
    """Tuning knobs for the generated plugin archive."""

    compression: Literal["deflated", "stored"] = Field(default="deflated")
    default_file_permissions: int = Field(
        default=0o100644, description="Unix mode used when a template entry carries none"
    )
    default_dir_permissions: int = Field(
        default=0o40755, description="Unix mode used for generated folder entries"
    )
    root_suffix: str = Field(
        default="-src", description="Appended to the plugin name to form the root folder"
    )


class Config(BaseModel):
    """Global quickstart configuration.

    Instances are typically created once by the CLI entry point and then
    passed to the fetcher, loader and writer.
    """

    output_dir: Path = Field(default=Path("."))
    template: TemplateConfig = Field(default_factory=TemplateConfig)
    archive: ArchiveConfig = Field(default_factory=ArchiveConfig)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            JQ_OUTPUT_DIR, JQ_TEMPLATE_BASE_URL, JQ_TEMPLATE_TIMEOUT,
            JQ_ROOT_MARKER, JQ_COMPRESSION.
        """
        template_kwargs: dict[str, Any] = {}
        if os.environ.get("JQ_TEMPLATE_BASE_URL"):
            template_kwargs["base_url"] = os.environ["JQ_TEMPLATE_BASE_URL"]
        if os.environ.get("JQ_TEMPLATE_TIMEOUT"):
            template_kwargs["timeout"] = int(os.environ["JQ_TEMPLATE_TIMEOUT"])
        if os.environ.get("JQ_ROOT_MARKER"):
            template_kwargs["root_marker"] = os.environ["JQ_ROOT_MARKER"]

        archive_kwargs: dict[str, Any] = {}
        if os.environ.get("JQ_COMPRESSION"):
            archive_kwargs["compression"] = os.environ["JQ_COMPRESSION"]

        return cls(
            output_dir=Path(os.environ.get("JQ_OUTPUT_DIR", ".")),
            template=TemplateConfig(**template_kwargs),
            archive=ArchiveConfig(**archive_kwargs),
        )
