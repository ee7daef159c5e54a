# matchday_quiz/trivia/sessions.py
# Live GameSessions per player, restored from and saved to the store.

from __future__ import annotations

import asyncio
import logging
from typing import Dict, Hashable, List, Optional, Tuple

from .constants import STORAGE_KEY
from .intents import Intent
from .machine import GameSession
from .persistence import KeyValueStore, load_state, save_state
from .questions import Question

logger = logging.getLogger(__name__)


class SessionHub:
    """
    One GameSession per key. Loading, dispatching and saving for a key all
    happen under that key's lock, so concurrent intents from the same
    player apply and persist one at a time.
    """

    def __init__(self, questions: List[Question], registry, store: KeyValueStore):
        self.questions = questions
        self.registry = registry
        self.store = store
        self.sessions: Dict[Hashable, GameSession] = {}
        self._locks: Dict[Hashable, asyncio.Lock] = {}

    @staticmethod
    def prefix(key) -> str:
        parts = key if isinstance(key, tuple) else (key,)
        return ":".join([STORAGE_KEY, *(str(p) for p in parts)])

    def lock(self, key) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def peek(self, key) -> Optional[GameSession]:
        """The live session, if one was already loaded (never touches the store)."""
        return self.sessions.get(key)

    async def _load(self, key) -> GameSession:
        session = self.sessions.get(key)
        if session is None:
            state = await load_state(self.store, len(self.questions), self.prefix(key))
            session = self.sessions[key] = GameSession(self.questions, self.registry, state)
            logger.debug("Session %s restored at stage %s", key, state.stage.value)
        return session

    async def get(self, key) -> GameSession:
        async with self.lock(key):
            return await self._load(key)

    async def dispatch(self, key, intent: Intent) -> Tuple[GameSession, bool]:
        async with self.lock(key):
            session = await self._load(key)
            changed = await session.dispatch(intent)
            if changed:
                await save_state(self.store, session.state, self.prefix(key))
            return session, changed
