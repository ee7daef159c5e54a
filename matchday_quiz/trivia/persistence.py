"""
Saving / restoring a GameState through a plain key-value store.

Each slice of the state lives under its own "<prefix>:<slice>" key as a JSON
string. Restoring is verbatim; the only repair is clamping the question
index into range. A missing or unreadable slice falls back to its initial
value.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Protocol

from ..db import get_pool
from .constants import STORAGE_KEY
from .state import BoostState, GameStage, GameState, Outcome, PlayerState

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...


class MemoryStore:
    def __init__(self):
        self.data: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)


class PostgresStore:
    """Key-value rows in the game_state table (see db.init_schema)."""

    async def get(self, key: str) -> Optional[str]:
        pool = await get_pool()
        async with pool.acquire() as conn:
            return await conn.fetchval("SELECT value FROM game_state WHERE key = $1", key)

    async def set(self, key: str, value: str) -> None:
        pool = await get_pool()
        async with pool.acquire() as conn:
            await conn.execute(
                """
                INSERT INTO game_state (key, value, updated_at)
                VALUES ($1, $2, NOW()) ON CONFLICT (key)
                DO
                UPDATE SET
                    value = EXCLUDED.value,
                    updated_at = NOW();
                """,
                key,
                value,
            )

    async def delete(self, key: str) -> None:
        pool = await get_pool()
        async with pool.acquire() as conn:
            await conn.execute("DELETE FROM game_state WHERE key = $1", key)


# -----------------------------
# Slice codecs
# -----------------------------

def _dump_player(p: PlayerState) -> Dict[str, Any]:
    return {"name": p.name, "score": p.score, "streak": p.streak, "maxStreak": p.max_streak}


def _load_player(raw: Dict[str, Any]) -> PlayerState:
    return PlayerState(
        name=str(raw.get("name") or ""),
        score=int(raw.get("score", 0)),
        streak=int(raw.get("streak", 0)),
        max_streak=int(raw.get("maxStreak", 0)),
    )


def _dump_boost(b: BoostState) -> Dict[str, Any]:
    return {"available": b.available, "armedIndex": b.armed_index}


def _load_boost(raw: Dict[str, Any]) -> BoostState:
    armed = raw.get("armedIndex")
    return BoostState(
        available=bool(raw.get("available", True)),
        armed_index=None if armed is None else int(armed),
    )


def _load_outcomes(raw: Dict[str, Any]) -> Dict[int, Outcome]:
    return {int(k): Outcome(v) for k, v in raw.items()}


def _load_answers(raw: Dict[str, Any]) -> Dict[int, Any]:
    return {int(k): v for k, v in raw.items()}


# slice name -> (dump from state, load into GameState kwargs)
_SLICES: Dict[str, tuple] = {
    "index": (lambda s: s.index, lambda raw: {"index": int(raw)}),
    "stage": (lambda s: s.stage.value, lambda raw: {"stage": GameStage(raw)}),
    "p1": (lambda s: _dump_player(s.player), lambda raw: {"player": _load_player(raw)}),
    "x2": (lambda s: _dump_boost(s.boost), lambda raw: {"boost": _load_boost(raw)}),
    "wager": (lambda s: s.wager, lambda raw: {"wager": int(raw)}),
    "finalResolved": (lambda s: s.final_resolved, lambda raw: {"final_resolved": bool(raw)}),
    "answered": (
        lambda s: {str(k): v.value for k, v in s.outcomes.items()},
        lambda raw: {"outcomes": _load_outcomes(raw)},
    ),
    "playerAnswers": (
        lambda s: {str(k): v for k, v in s.answers.items()},
        lambda raw: {"answers": _load_answers(raw)},
    ),
}


def slice_key(prefix: str, name: str) -> str:
    return f"{prefix}:{name}"


async def save_state(store: KeyValueStore, state: GameState, prefix: str = STORAGE_KEY) -> None:
    for name, (dump, _) in _SLICES.items():
        await store.set(slice_key(prefix, name), json.dumps(dump(state), ensure_ascii=False))


async def load_state(store: KeyValueStore, question_count: int, prefix: str = STORAGE_KEY) -> GameState:
    kwargs: Dict[str, Any] = {}
    for name, (_, load) in _SLICES.items():
        raw = await store.get(slice_key(prefix, name))
        if raw is None:
            continue
        try:
            kwargs.update(load(json.loads(raw)))
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning("Ignoring unreadable slice %s: %s", slice_key(prefix, name), e)

    state = GameState(**kwargs)

    last_index = max(question_count - 1, 0)
    if not 0 <= state.index <= last_index:
        clamped = min(max(state.index, 0), last_index)
        logger.info("Restored index %s out of range, clamped to %s", state.index, clamped)
        kwargs["index"] = clamped
        state = GameState(**kwargs)

    return state


async def clear_state(store: KeyValueStore, prefix: str = STORAGE_KEY) -> None:
    """Forget a saved game entirely (name included)."""
    for name in _SLICES:
        await store.delete(slice_key(prefix, name))
