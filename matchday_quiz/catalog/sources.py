"""
Catalog sources.

A source turns a catalog name ("players", "countries", ...) into the raw,
ordered list of entries. Anything that goes wrong is raised as
CatalogLoadError; the registry decides what to do about it.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, List, Optional

import aiohttp

logger = logging.getLogger(__name__)


class CatalogLoadError(Exception):
    """A catalog could not be fetched or parsed."""


def _ensure_list(name: str, payload: Any) -> List[Any]:
    if not isinstance(payload, list):
        raise CatalogLoadError(f"catalog {name!r} is not a JSON list")
    return payload


class JsonDirectorySource:
    """Reads <root>/<name>.json from disk."""

    def __init__(self, root):
        self.root = Path(root)

    def _read(self, name: str) -> List[Any]:
        path = self.root / f"{name}.json"
        try:
            with path.open(encoding="utf-8") as fh:
                payload = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogLoadError(f"{path}: {e}") from e
        return _ensure_list(name, payload)

    async def fetch(self, name: str) -> List[Any]:
        return await asyncio.to_thread(self._read, name)


class HttpCatalogSource:
    """GETs <base_url>/<name>.json."""

    def __init__(self, base_url: str, timeout: Optional[float] = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def fetch(self, name: str) -> List[Any]:
        url = f"{self.base_url}/{name}.json"
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url) as resp:
                    if resp.status >= 400:
                        raise CatalogLoadError(f"HTTP {resp.status} for {url}")
                    payload = await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, json.JSONDecodeError) as e:
            raise CatalogLoadError(f"{url}: {e!r}") from e

        logger.debug("Fetched catalog %s from %s", name, url)
        return _ensure_list(name, payload)


class StaticCatalogSource:
    """In-memory catalogs, keyed by name. Unknown names fail to load."""

    def __init__(self, catalogs):
        self.catalogs = dict(catalogs)

    async def fetch(self, name: str) -> List[Any]:
        if name not in self.catalogs:
            raise CatalogLoadError(f"unknown catalog {name!r}")
        return _ensure_list(name, self.catalogs[name])
