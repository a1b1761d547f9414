"""
Agent feature: in-memory chat sessions, one per user.

Session lifecycle:
  Absent → Active on the first chat request for a user_id. Active sessions
  keep their agent, history and lesson filter for the life of the process,
  unless the store evicts them. Eviction is on by default: beyond
  SESSION_MAX_USERS the least recently used session is dropped, and with
  SESSION_TTL_SECONDS > 0 a session idle for that long expires. Every chat
  turn counts as use. An evicted user starts over with an empty session.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from cachetools import Cache, LRUCache, TTLCache
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from lesson_tutor.features.agent.filters import LessonFilter

logger = logging.getLogger(__name__)


@dataclass
class ChatSession:
    user_id: str
    agent: Any
    lesson_filter: LessonFilter | None = None
    history: list[BaseMessage] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def apply_filter(self, lesson_filter: LessonFilter | None) -> None:
        """Replace the filter when one is given; None keeps the previous one."""
        if lesson_filter is not None:
            self.lesson_filter = lesson_filter

    def record_turn(self, user_text: str, reply: str, limit: int) -> None:
        """Append the user/assistant pair and keep only the last `limit` messages."""
        self.history.append(HumanMessage(content=user_text))
        self.history.append(AIMessage(content=reply))
        if len(self.history) > limit:
            self.history = self.history[-limit:]


class SessionStore:
    """Process-wide user_id → ChatSession map with bounded capacity."""

    def __init__(
        self,
        max_sessions: int = 1000,
        ttl_seconds: int = 0,
        timer: Callable[[], float] = time.monotonic,
    ):
        self._sessions: Cache
        if ttl_seconds > 0:
            self._sessions = TTLCache(maxsize=max_sessions, ttl=ttl_seconds, timer=timer)
        else:
            self._sessions = LRUCache(maxsize=max_sessions)

    def get(self, user_id: str) -> ChatSession | None:
        return self._sessions.get(user_id)

    def get_or_create(
        self,
        user_id: str,
        agent_factory: Callable[[], Any],
        lesson_filter: LessonFilter | None = None,
    ) -> tuple[ChatSession, bool]:
        """Return the user's session, creating it (and its agent) on first use.

        Returns:
            (session, created). An existing session gets `lesson_filter` applied
            through ChatSession.apply_filter.
        """
        session = self._sessions.get(user_id)
        if session is not None:
            session.apply_filter(lesson_filter)
            # re-insert so TTLCache restarts the idle clock
            self._sessions[user_id] = session
            return session, False

        session = ChatSession(user_id=user_id, agent=agent_factory(), lesson_filter=lesson_filter)
        self._sessions[user_id] = session
        logger.info(f"Created chat session for user {user_id} ({len(self._sessions)} active)")
        return session, True

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, user_id: object) -> bool:
        return user_id in self._sessions
