"""
Catalog registry (per host application, not module-global).

Behavior:
- One CatalogIndex per catalog name, built on first request and kept for
  the registry's lifetime.
- Concurrent first requests for the same name share a single load.
- A failed load is logged and cached as an empty index. Never raises.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Protocol

from .index import CatalogIndex, build_index, empty_index
from .sources import CatalogLoadError

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    async def fetch(self, name: str) -> List[Any]:
        ...


class CatalogRegistry:
    def __init__(self, source: CatalogSource):
        self.source = source
        self._indexes: Dict[str, CatalogIndex] = {}
        self._pending: Dict[str, asyncio.Task] = {}

    def cached(self, name: str) -> Optional[CatalogIndex]:
        return self._indexes.get(name)

    async def get_index(self, name: str) -> CatalogIndex:
        index = self._indexes.get(name)
        if index is not None:
            return index

        task = self._pending.get(name)
        if task is None:
            task = asyncio.ensure_future(self._load(name))
            self._pending[name] = task

        try:
            index = await asyncio.shield(task)
        finally:
            if task.done():
                self._pending.pop(name, None)

        self._indexes.setdefault(name, index)
        return self._indexes[name]

    async def _load(self, name: str) -> CatalogIndex:
        try:
            entries = await self.source.fetch(name)
        except CatalogLoadError as e:
            logger.warning("Catalog %r could not be loaded: %s", name, e)
            return empty_index(name)
        except Exception as e:
            logger.warning("Catalog %r could not be loaded: %r", name, e)
            return empty_index(name)

        index = build_index(name, entries)
        logger.info("Catalog %r loaded (%d items)", name, len(index))
        return index
