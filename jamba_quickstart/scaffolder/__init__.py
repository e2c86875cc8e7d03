"""Jamba Quickstart scaffolder -- resolves template archives into plugin archives.

Quick usage::

    from jamba_quickstart.scaffolder import (
        ArchiveLoader, ArchiveWriter, ConfigurationResolver, PluginScaffoldEngine,
    )

    template = await ArchiveLoader().load(template_bytes)
    engine = PluginScaffoldEngine(ConfigurationResolver("v6.0.0"), ArchiveWriter())
    archive = await engine.generate(template, {"name": "MyPlugin", "company": "Acme"})
    archive.save("/tmp/output")
"""

from jamba_quickstart.scaffolder.engine import PluginScaffoldEngine
from jamba_quickstart.scaffolder.identifiers import IdentifierGenerator, UniqueID
from jamba_quickstart.scaffolder.loader import ArchiveLoader
from jamba_quickstart.scaffolder.models import FileTree, PluginArchive, RawEntry, ResolvedEntry
from jamba_quickstart.scaffolder.processor import ContentProcessor, TokenBasedContentProcessor
from jamba_quickstart.scaffolder.resolver import ConfigurationResolver, TokenSet
from jamba_quickstart.scaffolder.writer import ArchiveWriter, correct_for_archive_timezone_quirk

__all__ = [
    "ArchiveLoader",
    "ArchiveWriter",
    "ConfigurationResolver",
    "ContentProcessor",
    "FileTree",
    "IdentifierGenerator",
    "PluginArchive",
    "PluginScaffoldEngine",
    "RawEntry",
    "ResolvedEntry",
    "TokenBasedContentProcessor",
    "TokenSet",
    "UniqueID",
    "correct_for_archive_timezone_quirk",
]
