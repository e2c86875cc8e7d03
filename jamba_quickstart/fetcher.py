"""Template acquisition and per-version caching.

A fetcher only has to answer "give me the bytes for this version or tell me
why not".  ``HttpTemplateFetcher`` downloads ``plugin-<version>.zip`` with
``httpx.AsyncClient``; ``LocalTemplateFetcher`` reads a zip from disk.
``TemplateCache`` loads each version once and shares the resulting read-only
tree between all generation requests.

Typical usage::

    cache = TemplateCache(HttpTemplateFetcher(config.template.base_url), ArchiveLoader())
    template = await cache.get("v6.0.0")
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Protocol

import httpx

from jamba_quickstart.errors import FetchError
from jamba_quickstart.scaffolder.loader import ArchiveLoader
from jamba_quickstart.scaffolder.models import FileTree


class TemplateFetcher(Protocol):
    """Anything that can produce template bytes for a version string."""

    async def fetch(self, version: str) -> bytes: ...


class HttpTemplateFetcher:
    """Downloads versioned template zips over HTTP(S).

    The client performs no retries; any failure is reported as ``FetchError``
    and it is up to the caller to try again.
    """

    def __init__(
        self,
        base_url: str,
        filename_pattern: str = "plugin-{version}.zip",
        timeout: int = 30,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.filename_pattern = filename_pattern
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            follow_redirects=True,
        )

    def url_for(self, version: str) -> str:
        return f"{self.base_url}/{self.filename_pattern.format(version=version)}"

    async def fetch(self, version: str) -> bytes:
        """Download the template for *version*.

        Raises:
            FetchError: On a blank version, a connection problem, a timeout
                or any non-success HTTP status.
        """
        if not version or not version.strip():
            raise FetchError(version, "No template version given")

        path = "/" + self.filename_pattern.format(version=version)
        try:
            async with self._client() as client:
                response = await client.get(path)
                response.raise_for_status()
                return response.content
        except httpx.HTTPStatusError as exc:
            raise FetchError(
                version,
                f"{exc.response.reason_phrase or 'request failed'} for {self.url_for(version)}",
                status=exc.response.status_code,
            ) from exc
        except httpx.ConnectError as exc:
            raise FetchError(version, f"Cannot connect to {self.base_url}") from exc
        except httpx.TimeoutException as exc:
            raise FetchError(version, f"Request timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise FetchError(version, str(exc)) from exc


class LocalTemplateFetcher:
    """Serves a template zip that already sits on disk, whatever the version."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def fetch(self, version: str) -> bytes:
        try:
            return await asyncio.to_thread(self.path.read_bytes)
        except OSError as exc:
            raise FetchError(version, f"Cannot read {self.path}: {exc.strerror or exc}") from exc


class TemplateCache:
    """Loads each template version once and shares the tree.

    Concurrent ``get`` calls for the same version await the same load.  A
    load that fails is dropped from the cache so the next call tries again.
    """

    def __init__(self, fetcher: TemplateFetcher, loader: ArchiveLoader | None = None) -> None:
        self.fetcher = fetcher
        self.loader = loader or ArchiveLoader()
        self._loads: dict[str, asyncio.Task[FileTree]] = {}

    async def get(self, version: str) -> FileTree:
        """Return the loaded tree for *version*, fetching it on first use.

        Raises:
            FetchError: If the template bytes cannot be retrieved.
            DecodeError: If the bytes are not a valid template archive.
        """
        task = self._loads.get(version)
        if task is None:
            task = asyncio.ensure_future(self._load(version))
            self._loads[version] = task
        try:
            return await asyncio.shield(task)
        except Exception:
            if self._loads.get(version) is task:
                del self._loads[version]
            raise

    def versions(self) -> list[str]:
        """Versions that are loaded (or being loaded)."""
        return list(self._loads)

    def file_count(self, version: str) -> int:
        """Number of files in an already loaded template, 0 if not loaded."""
        task = self._loads.get(version)
        if task is None or not task.done() or task.cancelled() or task.exception():
            return 0
        return len(task.result())

    async def _load(self, version: str) -> FileTree:
        data = await self.fetcher.fetch(version)
        return await self.loader.load(data)
