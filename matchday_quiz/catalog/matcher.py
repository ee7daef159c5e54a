# matchday_quiz/catalog/matcher.py

from __future__ import annotations

import asyncio
import logging
import unicodedata
from typing import List, Optional, Tuple

from ..utils.normalize import normalize
from .index import CatalogIndex, CatalogItem

logger = logging.getLogger(__name__)

MAX_SUGGESTIONS = 10
MIN_QUERY_LENGTH = 2
# Only exact-prefix hits for queries this short
PREFIX_ONLY_LENGTH = 2
FUZZY_MIN_QUERY_LENGTH = 3
FUZZY_ACCEPT_DISTANCE = 0.2
FUZZY_CANDIDATES = 20
FUZZY_RANK = 0.5

RANK_PREFIX = 3
RANK_WORD_PREFIX = 2
RANK_SUBSTRING = 1
RANK_NONE = 0


def rank_item(item: CatalogItem, query: str) -> int:
    """
    3 = some field starts with the query
    2 = some word of a field starts with it
    1 = some field contains it
    0 = no match
    `query` must already be normalized.
    """
    fields = item.fields
    if any(f.startswith(query) for f in fields):
        return RANK_PREFIX
    if any(w.startswith(query) for f in fields for w in f.split()):
        return RANK_WORD_PREFIX
    if any(query in f for f in fields):
        return RANK_SUBSTRING
    return RANK_NONE


def _collation_key(item: CatalogItem) -> Tuple[str, str]:
    # accent/case-insensitive first, raw name breaks remaining ties
    return (item.norm, item.name)


def rank_items(index: CatalogIndex, raw_query) -> List[CatalogItem]:
    """Rank catalog items against a partial query. Pure and deterministic."""
    query = normalize(raw_query)
    if len(query) < MIN_QUERY_LENGTH:
        return []

    scored: List[Tuple[float, CatalogItem]] = []
    for item in index.items:
        rank = rank_item(item, query)
        if len(query) <= PREFIX_ONLY_LENGTH:
            if rank == RANK_PREFIX:
                scored.append((rank, item))
        elif rank > RANK_NONE:
            scored.append((rank, item))

    if not scored and len(query) >= FUZZY_MIN_QUERY_LENGTH:
        seen = set()
        for item, distance in index.fuzzy.search(query, limit=FUZZY_CANDIDATES):
            if distance > FUZZY_ACCEPT_DISTANCE or item.id in seen:
                continue
            seen.add(item.id)
            scored.append((FUZZY_RANK, item))
            if len(scored) >= MAX_SUGGESTIONS:
                break

    scored.sort(key=lambda r: (-r[0],) + _collation_key(r[1]))
    return [item for _, item in scored[:MAX_SUGGESTIONS]]


async def suggest(registry, catalog_name: str, raw_query) -> List[CatalogItem]:
    """Autocomplete suggestions for a catalog (at most 10)."""
    query = normalize(raw_query)
    if len(query) < MIN_QUERY_LENGTH:
        return []
    index = await registry.get_index(catalog_name)
    # the fuzzy fallback scans every item; keep it off the event loop
    return await asyncio.to_thread(rank_items, index, raw_query)


class SuggestionFeed:
    """
    Live suggestions for one input box.

    Every query change bumps the epoch; a response is applied only if the
    epoch it was issued under is still current when it completes.
    """

    def __init__(self, registry, catalog_name: str):
        self.registry = registry
        self.catalog_name = catalog_name
        self.epoch = 0
        self.query = ""
        self.results: List[CatalogItem] = []

    async def update(self, raw_query) -> bool:
        self.epoch += 1
        issued = self.epoch
        self.query = raw_query

        results = await suggest(self.registry, self.catalog_name, raw_query)

        if issued != self.epoch:
            logger.debug(
                "Dropping stale suggestions for %r (epoch %s, now %s)",
                raw_query,
                issued,
                self.epoch,
            )
            return False

        self.results = results
        return True


def _is_greek(text: str) -> bool:
    return any("GREEK" in unicodedata.name(ch, "") for ch in text if ch.isalpha())


def preferred_label(item: CatalogItem, raw_query: str = "") -> str:
    """
    Label to show once an item is picked: a Greek alias if the player was
    typing in Greek and one exists, otherwise the display name.
    """
    if raw_query and _is_greek(raw_query):
        greek: Optional[str] = next((a for a in item.aliases if _is_greek(a)), None)
        if greek:
            return greek
    return item.name
