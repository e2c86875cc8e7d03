"""Shared pytest fixtures for the Jamba Quickstart test suite.

Provides reusable fixtures for:
- In-memory template archives built with ``zipfile``
- Deterministic identifier sources
- Pre-built resolvers, writers and engines
"""

from __future__ import annotations

import io
import itertools
import zipfile
from datetime import datetime, timezone
from typing import Any

import pytest

from jamba_quickstart.scaffolder import (
    ArchiveLoader,
    ArchiveWriter,
    ConfigurationResolver,
    IdentifierGenerator,
    PluginScaffoldEngine,
)


# ---------------------------------------------------------------------------
# Archive helpers
# ---------------------------------------------------------------------------

def build_zip(
    entries: list[tuple[str, Any]],
    permissions: dict[str, int] | None = None,
    date_time: tuple[int, int, int, int, int, int] = (2024, 3, 15, 10, 30, 0),
) -> bytes:
    """Build a ZIP archive in memory.

    Names ending with ``/`` become directory entries.  ``permissions`` maps a
    name to the Unix mode stored in its external attributes.
    """
    permissions = permissions or {}
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in entries:
            info = zipfile.ZipInfo(name, date_time=date_time)
            if name in permissions:
                info.create_system = 3
                info.external_attr = permissions[name] << 16
            else:
                # MS-DOS entries carry no Unix mode.
                info.create_system = 0
                info.external_attr = 0x10 if name.endswith("/") else 0x20
            if isinstance(content, str):
                content = content.encode("utf-8")
            archive.writestr(info, content)
    return buffer.getvalue()


def read_zip(data: bytes) -> dict[str, bytes]:
    """Return ``{name: content}`` for every file (non-directory) entry."""
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        return {
            info.filename: archive.read(info)
            for info in archive.infolist()
            if not info.is_dir()
        }


def sequential_hex_source():
    """Deterministic identifier source: 000...001, 000...002, ..."""
    counter = itertools.count(1)
    return lambda: f"{next(counter):032x}"


# ---------------------------------------------------------------------------
# Template fixtures
# ---------------------------------------------------------------------------

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\xfe"


@pytest.fixture
def template_entries() -> list[tuple[str, Any]]:
    """Entries of a small but realistic blank plugin template."""
    return [
        ("blank-plugin/", b""),
        ("blank-plugin/CMakeLists.txt",
         "project([-target-])\n"
         "set(JAMBA_GIT_HASH \"[-jamba_git_hash-]\")\n"
         "option(JAMBA_ENABLE_AUDIO_UNIT \"\" [-enable_audio_unit-])\n"),
        ("blank-plugin/src/cpp/__Plugin__.h",
         "[-namespace_start-]\n"
         "class [-name-]Processor {};\n"
         "[-namespace_end-]\n"),
        ("blank-plugin/src/cpp/__Plugin___VST3.cpp",
         "static const ::Steinberg::FUID [-name-]ProcessorUID([-processor_uuid-]);\n"
         "static const ::Steinberg::FUID [-name-]ControllerUID([-controller_uuid-]);\n"),
        ("blank-plugin/resource/logo.png", PNG_BYTES),
        ("blank-plugin/configure.sh", "#!/bin/sh\necho [-name-]\n"),
        ("blank-plugin/.idea/workspace.xml", "<project/>"),
        ("blank-plugin/.DS_Store", b"\x00\x00\x00\x01Bud1"),
        ("__MACOSX/blank-plugin/._CMakeLists.txt", b"\x00\x05\x16\x07"),
    ]


@pytest.fixture
def template_zip(template_entries: list[tuple[str, Any]]) -> bytes:
    """The template archive as bytes; ``configure.sh`` is executable."""
    return build_zip(
        template_entries,
        permissions={
            "blank-plugin/configure.sh": 0o100755,
            "blank-plugin/CMakeLists.txt": 0o100644,
        },
    )


@pytest.fixture
async def template_tree(template_zip: bytes):
    """The template archive loaded into a ``FileTree``."""
    return await ArchiveLoader().load(template_zip)


# ---------------------------------------------------------------------------
# Component fixtures
# ---------------------------------------------------------------------------

FIXED_NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def deterministic_identifiers() -> IdentifierGenerator:
    return IdentifierGenerator(sequential_hex_source())


@pytest.fixture
def resolver(deterministic_identifiers: IdentifierGenerator) -> ConfigurationResolver:
    return ConfigurationResolver(
        jamba_git_hash="v6.0.0",
        jamba_download_url_hash="abc123",
        identifiers=deterministic_identifiers,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def writer() -> ArchiveWriter:
    return ArchiveWriter(local_tz=timezone.utc, clock=lambda: FIXED_NOW)


@pytest.fixture
def engine(resolver: ConfigurationResolver, writer: ArchiveWriter) -> PluginScaffoldEngine:
    return PluginScaffoldEngine(resolver, writer)
