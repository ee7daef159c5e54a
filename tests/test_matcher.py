import asyncio
import time

from matchday_quiz.catalog import matcher
from matchday_quiz.catalog.index import build_index
from matchday_quiz.catalog.matcher import (
    RANK_PREFIX,
    RANK_SUBSTRING,
    RANK_WORD_PREFIX,
    SuggestionFeed,
    preferred_label,
    rank_item,
    rank_items,
    suggest,
)
from matchday_quiz.catalog.registry import CatalogRegistry
from matchday_quiz.catalog.sources import StaticCatalogSource


def names(items):
    return [i.name for i in items]


def test_rank_item_levels():
    item = build_index("players", [{"name": "Cristiano Ronaldo", "aliases": ["CR7"]}]).items[0]
    assert rank_item(item, "cris") == RANK_PREFIX
    assert rank_item(item, "cr7") == RANK_PREFIX
    assert rank_item(item, "ron") == RANK_WORD_PREFIX
    assert rank_item(item, "naldo") == RANK_SUBSTRING
    assert rank_item(item, "messi") == 0


def test_exact_display_name_ranks_as_prefix(registry):
    index = asyncio.run(registry.get_index("players"))
    for item in index.items:
        assert rank_item(item, item.norm) == RANK_PREFIX
        assert item in rank_items(index, item.name)


def test_short_query_is_prefix_only(registry):
    out = asyncio.run(suggest(registry, "players", "ro"))
    # "Cristiano Ronaldo" only matches on a later word, not allowed for 2 chars
    assert names(out) == ["Ronaldo Nazário"]


def test_query_below_two_chars_gives_nothing(registry):
    assert asyncio.run(suggest(registry, "players", "r")) == []
    assert asyncio.run(suggest(registry, "players", "  ")) == []


def test_ordering_by_rank_then_name(registry):
    out = asyncio.run(suggest(registry, "players", "ron"))
    assert names(out) == ["Ronaldo Nazário", "Cristiano Ronaldo"]

    out = asyncio.run(suggest(registry, "players", "an"))
    assert names(out) == ["Andrés Iniesta", "Angelos Charisteas"]


def test_alias_and_accent_insensitive_matching(registry):
    out = asyncio.run(suggest(registry, "players", "ΧΑΡΙΣ"))
    assert names(out) == ["Angelos Charisteas"]
    out = asyncio.run(suggest(registry, "countries", "espa"))
    assert names(out) == ["Spain"]


def test_fuzzy_fallback_when_nothing_matches(registry):
    out = asyncio.run(suggest(registry, "players", "zidanne"))
    assert names(out)[0] == "Zinedine Zidane"
    assert len({i.id for i in out}) == len(out)


def test_no_fuzzy_for_short_or_hopeless_queries(registry):
    assert asyncio.run(suggest(registry, "players", "qq")) == []
    assert asyncio.run(suggest(registry, "players", "xyzxyz")) == []


def test_at_most_ten_sorted_and_stable():
    entries = [f"Player {n}" for n in range(15, 0, -1)]
    registry = CatalogRegistry(StaticCatalogSource({"squad": entries}))

    first = asyncio.run(suggest(registry, "squad", "pla"))
    second = asyncio.run(suggest(registry, "squad", "pla"))
    assert len(first) == 10
    assert first == second
    assert [i.norm for i in first] == sorted(i.norm for i in first)


def test_unknown_catalog_suggests_nothing(registry):
    assert asyncio.run(suggest(registry, "stadiums", "camp")) == []


def test_preferred_label_uses_greek_alias_for_greek_queries(registry):
    index = asyncio.run(registry.get_index("countries"))
    greece = index.lookup("greece")
    assert preferred_label(greece, "Ελλ") == "Ελλάδα"
    assert preferred_label(greece, "gre") == "Greece"
    spain = index.lookup("spain")
    assert preferred_label(spain, "") == "Spain"


# -----------------------------
# Stale-result handling
# -----------------------------

class SlowFirstSource:
    """First fetch is slow, so the first keystroke's lookup finishes last."""

    def __init__(self, entries):
        self.entries = entries
        self.calls = 0

    async def fetch(self, name):
        self.calls += 1
        await asyncio.sleep(0.05)
        return self.entries


class SlowRegistry(CatalogRegistry):
    def __init__(self, source, delays):
        super().__init__(source)
        self.delays = list(delays)

    async def get_index(self, name):
        delay = self.delays.pop(0) if self.delays else 0
        index = await super().get_index(name)
        await asyncio.sleep(delay)
        return index


def test_feed_discards_stale_responses():
    registry = SlowRegistry(SlowFirstSource(["Lionel Messi", "Lionel Scaloni"]), delays=[0.1, 0])
    feed = SuggestionFeed(registry, "players")

    async def run():
        slow = asyncio.create_task(feed.update("lionel"))
        await asyncio.sleep(0)
        fast = asyncio.create_task(feed.update("lionel me"))
        return await slow, await fast

    slow_applied, fast_applied = asyncio.run(run())
    assert slow_applied is False
    assert fast_applied is True
    assert feed.epoch == 2
    assert names(feed.results) == ["Lionel Messi"]


def test_feed_applies_in_order_updates(registry):
    feed = SuggestionFeed(registry, "countries")

    async def run():
        await feed.update("gr")
        first = names(feed.results)
        await feed.update("sp")
        return first, names(feed.results)

    first, second = asyncio.run(run())
    assert first == ["Greece"]
    assert second == ["Spain"]


def test_feed_discards_stale_ranking_with_cached_index(registry, monkeypatch):
    real_rank_items = matcher.rank_items

    def slow_for_short_query(index, raw_query):
        if raw_query == "lionel":
            time.sleep(0.2)
        return real_rank_items(index, raw_query)

    monkeypatch.setattr(matcher, "rank_items", slow_for_short_query)
    feed = SuggestionFeed(registry, "players")

    async def run():
        await registry.get_index("players")
        slow = asyncio.create_task(feed.update("lionel"))
        await asyncio.sleep(0.05)
        fast = asyncio.create_task(feed.update("lionel me"))
        return await slow, await fast

    slow_applied, fast_applied = asyncio.run(run())
    assert slow_applied is False
    assert fast_applied is True
    assert names(feed.results) == ["Lionel Messi"]


def test_ranking_does_not_block_the_event_loop(monkeypatch):
    registry = CatalogRegistry(StaticCatalogSource({"players": ["Lionel Messi"]}))
    real_rank_items = matcher.rank_items

    def slow(index, raw_query):
        time.sleep(0.2)
        return real_rank_items(index, raw_query)

    monkeypatch.setattr(matcher, "rank_items", slow)

    async def run():
        await registry.get_index("players")
        ticks = []

        async def ticker():
            for _ in range(5):
                ticks.append(time.monotonic())
                await asyncio.sleep(0.01)

        task = asyncio.create_task(suggest(registry, "players", "qwzyk"))
        await ticker()
        return ticks, await task

    ticks, results = asyncio.run(run())
    assert results == []
    # every tick ran while the ranking was still busy in its thread
    assert len(ticks) == 5
    assert ticks[-1] - ticks[0] < 0.15
