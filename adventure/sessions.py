"""In-memory session table.

Sessions live only as long as the process. The store is an explicit object
owned by the app (``app.state.sessions``) and passed to route handlers;
nothing in the engine reaches for it directly.

Each session carries an asyncio.Lock. Callers hold it for a whole turn so
that one session never has two interpretations in flight; different
sessions never share a lock.
"""

from __future__ import annotations

import asyncio
import logging
import uuid

from adventure.models import GameState

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self) -> None:
        self._states: dict[str, GameState] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._states)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._states

    def create(self) -> tuple[str, GameState]:
        """Start a new session with the fixed initial state."""
        session_id = str(uuid.uuid4())
        state = GameState()
        self._states[session_id] = state
        self._locks[session_id] = asyncio.Lock()
        logger.info("New game started with session ID: %s", session_id)
        return session_id, state

    def get(self, session_id: str | None) -> GameState | None:
        if not session_id:
            return None
        return self._states.get(session_id)

    def lock(self, session_id: str) -> asyncio.Lock:
        """The single-writer lock for a session. Raises KeyError for unknown ids."""
        return self._locks[session_id]

    def delete(self, session_id: str) -> bool:
        if session_id not in self._states:
            return False
        del self._states[session_id]
        del self._locks[session_id]
        return True
