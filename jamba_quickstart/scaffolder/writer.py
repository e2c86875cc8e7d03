"""Plugin archive serialisation.

Writes a resolved ``FileTree`` into a new ZIP wrapped in a single root folder.
ZIP entries store a naive wall-clock time, so every timestamp goes through
:func:`correct_for_archive_timezone_quirk` before it is stamped; extracted
files then show the intended time on the consuming machine.
"""

from __future__ import annotations

import asyncio
import io
import struct
import zipfile
import zlib
from collections.abc import Callable, Mapping
from datetime import datetime, timezone, tzinfo

from jamba_quickstart.errors import EncodeError

from .models import PluginArchive, RawEntry

_UNIX_SYSTEM = 3
_MSDOS_DIRECTORY = 0x10
_DOS_EPOCH = (1980, 1, 1, 0, 0, 0)

COMPRESSION_METHODS: dict[str, int] = {
    "deflated": zipfile.ZIP_DEFLATED,
    "stored": zipfile.ZIP_STORED,
}


def correct_for_archive_timezone_quirk(
    moment: datetime, local_tz: tzinfo | None = None
) -> datetime:
    """Return the naive local wall-clock time a ZIP entry must hold for *moment*.

    Naive input is taken as UTC.  *local_tz* defaults to the machine's local
    timezone.
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    local = moment.astimezone(local_tz) if local_tz is not None else moment.astimezone()
    return local.replace(tzinfo=None)


def _date_time(moment: datetime) -> tuple[int, int, int, int, int, int]:
    fields = (moment.year, moment.month, moment.day, moment.hour, moment.minute, moment.second)
    return max(fields, _DOS_EPOCH)


def _parent_dirs(path: str) -> list[str]:
    """``"a/b/c.txt"`` -> ``["a/", "a/b/"]``."""
    parts = path.split("/")[:-1]
    return ["/".join(parts[: i + 1]) + "/" for i in range(len(parts))]


class ArchiveWriter:
    """Serialises resolved entries into a Unix-flavoured ZIP archive."""

    def __init__(
        self,
        compression: str = "deflated",
        default_file_permissions: int = 0o100644,
        default_dir_permissions: int = 0o40755,
        local_tz: tzinfo | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if compression not in COMPRESSION_METHODS:
            raise ValueError(f"Unknown compression: {compression!r}")
        self.compression = COMPRESSION_METHODS[compression]
        self.default_file_permissions = default_file_permissions
        self.default_dir_permissions = default_dir_permissions
        self.local_tz = local_tz
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    # -- Public API --------------------------------------------------------

    async def write(self, root_name: str, tree: Mapping[str, RawEntry]) -> PluginArchive:
        """Serialise *tree* under ``root_name/`` and return ``root_name.zip``.

        Raises:
            EncodeError: If any entry cannot be written.
        """
        content = await asyncio.to_thread(self._serialize, root_name, tree)
        return PluginArchive(filename=f"{root_name}.zip", content=content)

    # -- Internals ---------------------------------------------------------

    def _serialize(self, root_name: str, tree: Mapping[str, RawEntry]) -> bytes:
        now = correct_for_archive_timezone_quirk(self.clock(), self.local_tz)
        buffer = io.BytesIO()
        written_dirs: set[str] = set()

        with zipfile.ZipFile(buffer, mode="w", compression=self.compression) as archive:
            for path, entry in tree.items():
                name = f"{root_name}/{path}"
                try:
                    for directory in _parent_dirs(name):
                        if directory not in written_dirs:
                            written_dirs.add(directory)
                            archive.writestr(self._dir_info(directory, now), b"")

                    moment = now
                    if entry.timestamp is not None:
                        moment = correct_for_archive_timezone_quirk(entry.timestamp, self.local_tz)
                    archive.writestr(self._file_info(name, entry, moment), self._encode(entry))
                except (ValueError, OverflowError, struct.error, zlib.error, OSError) as exc:
                    raise EncodeError(str(exc), entry=name) from exc

        return buffer.getvalue()

    def _dir_info(self, name: str, moment: datetime) -> zipfile.ZipInfo:
        info = zipfile.ZipInfo(name, date_time=_date_time(moment))
        info.create_system = _UNIX_SYSTEM
        info.external_attr = (self.default_dir_permissions << 16) | _MSDOS_DIRECTORY
        return info

    def _file_info(self, name: str, entry: RawEntry, moment: datetime) -> zipfile.ZipInfo:
        info = zipfile.ZipInfo(name, date_time=_date_time(moment))
        info.create_system = _UNIX_SYSTEM
        info.compress_type = self.compression
        permissions = entry.unix_permissions
        if permissions is None:
            permissions = self.default_file_permissions
        info.external_attr = (permissions & 0xFFFF) << 16
        return info

    @staticmethod
    def _encode(entry: RawEntry) -> bytes:
        if isinstance(entry.content, bytes):
            return entry.content
        return entry.content.encode("utf-8")
