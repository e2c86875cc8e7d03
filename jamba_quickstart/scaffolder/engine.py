"""Plugin scaffold orchestration.

Resolves a loaded template tree against user input and serialises the result.
The template tree is never modified: every request maps it into a brand new
tree of ``ResolvedEntry``, so one loaded template can serve any number of
generations with different input and fresh identifiers.
"""

from __future__ import annotations

from collections.abc import Mapping

from jamba_quickstart.errors import PathConflictError

from .models import FileTree, PluginArchive, RawEntry, ResolvedEntry
from .processor import TokenBasedContentProcessor
from .resolver import ConfigurationResolver, TokenSet
from .writer import ArchiveWriter


class PluginScaffoldEngine:
    """Turns a template ``FileTree`` plus user input into a plugin archive.

    Usage::

        engine = PluginScaffoldEngine(ConfigurationResolver("v6.0.0"), ArchiveWriter())
        archive = await engine.generate(template, {"name": "Foo", "company": "Acme"})
        archive.save("./out")  # -> ./out/Foo-src.zip
    """

    def __init__(
        self,
        resolver: ConfigurationResolver,
        writer: ArchiveWriter | None = None,
        root_suffix: str = "-src",
    ) -> None:
        self.resolver = resolver
        self.writer = writer or ArchiveWriter()
        self.root_suffix = root_suffix

    # -- Public API --------------------------------------------------------

    def resolve_tree(
        self, template: Mapping[str, RawEntry], user_input: Mapping[str, str]
    ) -> tuple[TokenSet, FileTree]:
        """Resolve every template entry without writing an archive.

        Raises:
            ValidationError: If the user input lacks a plugin name.
            PathConflictError: If two template entries resolve to the same path.
        """
        tokens = self.resolver.resolve(user_input)
        processor = TokenBasedContentProcessor(tokens)

        resolved: FileTree = {}
        sources: dict[str, str] = {}
        for entry in template.values():
            path = processor.process_path(entry.path)
            if path in sources:
                raise PathConflictError(path, sources[path], entry.path)
            sources[path] = entry.path
            resolved[path] = ResolvedEntry(
                path=path,
                content=processor.process_content(entry.content),
                timestamp=entry.timestamp,
                unix_permissions=entry.unix_permissions,
            )
        return tokens, resolved

    async def generate(
        self, template: Mapping[str, RawEntry], user_input: Mapping[str, str]
    ) -> PluginArchive:
        """Generate ``{name}-src.zip`` from *template* and *user_input*.

        Raises:
            ValidationError: Before any substitution if no plugin name is given.
            PathConflictError: If two template entries resolve to the same path.
            EncodeError: If the archive cannot be serialised.
        """
        tokens, resolved = self.resolve_tree(template, user_input)
        return await self.writer.write(self.root_name(tokens), resolved)

    def root_name(self, tokens: TokenSet) -> str:
        """Name of the folder wrapping every entry, e.g. ``"Foo-src"``."""
        return f"{tokens.plugin_name}{self.root_suffix}"
