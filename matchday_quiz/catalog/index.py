# matchday_quiz/catalog/index.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from difflib import SequenceMatcher
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..utils.normalize import normalize, slug

logger = logging.getLogger(__name__)

# Fuse-style distance: 0.0 is a perfect match, 1.0 is nothing in common.
FUZZY_THRESHOLD = 0.55
MIN_MATCH_LENGTH = 2


@dataclass(frozen=True)
class CatalogItem:
    id: str
    key: Optional[str]
    name: str
    aliases: Tuple[str, ...] = ()
    norm: str = ""
    aliases_norm: Tuple[str, ...] = ()

    @property
    def fields(self) -> Tuple[str, ...]:
        """Normalized name followed by normalized aliases."""
        return (self.norm,) + self.aliases_norm


def to_item(entry: Any, catalog_name: str) -> Optional[CatalogItem]:
    """
    Build an item from a raw catalog entry.
    Entries are either a bare display name or {key?/code?/iso2?, name, aliases?}.
    """
    if isinstance(entry, str):
        return CatalogItem(
            id=f"{catalog_name}:{slug(entry)}",
            key=None,
            name=entry,
            norm=normalize(entry),
        )

    if not isinstance(entry, dict):
        return None

    name = str(entry.get("name") or "")
    raw_aliases = entry.get("aliases")
    aliases = tuple(str(a) for a in raw_aliases) if isinstance(raw_aliases, list) else ()

    key = None
    for field_name in ("key", "code", "iso2"):
        if entry.get(field_name) is not None:
            key = str(entry[field_name])
            break

    return CatalogItem(
        id=f"{catalog_name}:{slug(name)}",
        key=key,
        name=name,
        aliases=aliases,
        norm=normalize(name),
        aliases_norm=tuple(normalize(a) for a in aliases),
    )


class FuzzyIndex:
    """
    Small approximate-match index over item names and aliases.

    Location is ignored: a query is scored against the whole field and
    against every same-length window of it, and the best window wins.
    """

    def __init__(
        self,
        items: Iterable[CatalogItem],
        threshold: float = FUZZY_THRESHOLD,
        min_match_length: int = MIN_MATCH_LENGTH,
    ):
        self.items = list(items)
        self.threshold = threshold
        self.min_match_length = min_match_length

    @staticmethod
    def distance(query: str, text: str) -> float:
        if not query or not text:
            return 1.0
        if query in text:
            return 0.0

        best = SequenceMatcher(None, query, text).ratio()
        width = len(query)
        if len(text) > width:
            for start in range(len(text) - width + 1):
                window = text[start:start + width]
                ratio = SequenceMatcher(None, query, window).ratio()
                if ratio > best:
                    best = ratio
        return round(1.0 - best, 6)

    def search(self, query: str, limit: int = 20) -> List[Tuple[CatalogItem, float]]:
        """Return (item, distance) pairs under the threshold, best first."""
        q = normalize(query)
        if len(q) < self.min_match_length:
            return []

        hits: List[Tuple[CatalogItem, float]] = []
        for item in self.items:
            fields = [f for f in item.fields if len(f) >= self.min_match_length]
            if not fields:
                continue
            score = min(self.distance(q, f) for f in fields)
            if score <= self.threshold:
                hits.append((item, score))

        # stable: equal distances keep catalog order
        hits.sort(key=lambda hit: hit[1])
        return hits[:limit]


@dataclass
class CatalogIndex:
    name: str
    items: List[CatalogItem] = field(default_factory=list)
    by_name: Dict[str, CatalogItem] = field(default_factory=dict)
    by_id: Dict[str, CatalogItem] = field(default_factory=dict)
    fuzzy: FuzzyIndex = field(default_factory=lambda: FuzzyIndex([]))

    def __len__(self) -> int:
        return len(self.items)

    def lookup(self, text) -> Optional[CatalogItem]:
        """Exact lookup of free text by normalized name or alias."""
        return self.by_name.get(normalize(text))

    def get(self, item_id: str) -> Optional[CatalogItem]:
        return self.by_id.get(item_id)


def build_index(catalog_name: str, entries: Iterable[Any]) -> CatalogIndex:
    items: List[CatalogItem] = []
    for entry in entries:
        item = to_item(entry, catalog_name)
        if item is None:
            logger.warning("Skipping malformed entry in catalog %r: %r", catalog_name, entry)
            continue
        items.append(item)

    # First writer wins: earlier entries own a colliding name/alias
    by_name: Dict[str, CatalogItem] = {}
    for item in items:
        for token in item.fields:
            if not token:
                continue
            owner = by_name.get(token)
            if owner is None:
                by_name[token] = item
            elif owner.id != item.id:
                logger.debug(
                    "Catalog %r: %r already owned by %s, ignored for %s",
                    catalog_name,
                    token,
                    owner.id,
                    item.id,
                )

    by_id: Dict[str, CatalogItem] = {}
    for item in items:
        by_id.setdefault(item.id, item)

    return CatalogIndex(
        name=catalog_name,
        items=items,
        by_name=by_name,
        by_id=by_id,
        fuzzy=FuzzyIndex(items),
    )


def empty_index(catalog_name: str) -> CatalogIndex:
    return CatalogIndex(name=catalog_name)
