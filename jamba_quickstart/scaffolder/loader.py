"""Template archive loading.

Decodes a template ZIP into an in-memory ``FileTree``.  Every file entry is
extracted as an independent unit of work in a worker thread; the load only
completes once all of them have finished, and a single failing entry fails
the whole load.
"""

from __future__ import annotations

import asyncio
import io
import zipfile
import zlib
from collections.abc import Iterable
from datetime import datetime, timezone

from jamba_quickstart.errors import DecodeError

from .models import FileTree, RawEntry

_UNIX_SYSTEM = 3


def strip_root(path: str, root_marker: str) -> str:
    """Remove everything up to and including *root_marker* from *path*.

    Paths that do not contain the marker are returned unchanged::

        strip_root("blank-plugin/src/foo.cpp", "blank-plugin/") -> "src/foo.cpp"
    """
    if not root_marker:
        return path
    _, sep, rest = path.partition(root_marker)
    return rest if sep else path


class ArchiveLoader:
    """Turns template bytes into a ``FileTree`` of ``RawEntry``."""

    def __init__(
        self,
        root_marker: str = "blank-plugin/",
        excluded_dirs: Iterable[str] = ("__MACOSX", ".idea"),
        excluded_files: Iterable[str] = (".DS_Store",),
    ) -> None:
        self.root_marker = root_marker
        self.excluded_dirs = frozenset(excluded_dirs)
        self.excluded_files = frozenset(excluded_files)

    # -- Public API --------------------------------------------------------

    async def load(self, data: bytes) -> FileTree:
        """Decode *data* into a tree ordered like the archive's entries.

        Raises:
            DecodeError: If *data* is not a ZIP archive or any entry cannot
                be extracted.
        """
        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, ValueError) as exc:
            raise DecodeError(str(exc)) from exc

        with archive:
            selected: list[tuple[zipfile.ZipInfo, str]] = []
            for info in archive.infolist():
                relative = self._relative_path(info)
                if relative is not None:
                    selected.append((info, relative))

            # Wait for every extraction before closing the archive.
            results = await asyncio.gather(
                *(asyncio.to_thread(self._extract, archive, info, relative)
                  for info, relative in selected),
                return_exceptions=True,
            )

        tree: FileTree = {}
        for (info, _), result in zip(selected, results):
            if isinstance(result, DecodeError):
                raise result
            if isinstance(result, Exception):
                raise DecodeError(str(result), entry=info.filename) from result
            if isinstance(result, BaseException):
                raise result
            tree[result.path] = result
        return tree

    def is_excluded(self, path: str) -> bool:
        """Return ``True`` for OS/IDE metadata that is not part of the deliverable.

        Excluded directories only match as the first segment, either of the
        archive path (``__MACOSX/blank-plugin/...``) or of the path below the
        root marker (``blank-plugin/.idea/...``).  Excluded file names match
        in any folder.
        """
        segments = [segment for segment in path.split("/") if segment]
        if not segments:
            return True
        if segments[-1] in self.excluded_files:
            return True
        if len(segments) > 1 and segments[0] in self.excluded_dirs:
            return True
        stripped = [segment for segment in strip_root(path, self.root_marker).split("/") if segment]
        return len(stripped) > 1 and stripped[0] in self.excluded_dirs

    # -- Internals ---------------------------------------------------------

    def _relative_path(self, info: zipfile.ZipInfo) -> str | None:
        """Return the stripped path of a content entry, ``None`` if it is skipped."""
        if info.is_dir() or self.is_excluded(info.filename):
            return None
        relative = strip_root(info.filename, self.root_marker)
        return relative or None

    @staticmethod
    def _extract(archive: zipfile.ZipFile, info: zipfile.ZipInfo, relative: str) -> RawEntry:
        try:
            raw = archive.read(info)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError, OSError) as exc:
            raise DecodeError(str(exc), entry=info.filename) from exc

        content: str | bytes
        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError:
            content = raw

        permissions = None
        if info.create_system == _UNIX_SYSTEM:
            permissions = (info.external_attr >> 16) or None

        try:
            timestamp = datetime(*info.date_time, tzinfo=timezone.utc)
        except ValueError:
            timestamp = None

        return RawEntry(
            path=relative,
            content=content,
            timestamp=timestamp,
            unix_permissions=permissions,
        )
