"""
Agent feature: Service layer for multi-turn lesson chat.
"""

import logging
from typing import Any, Callable

from lesson_tutor.config import get_settings
from lesson_tutor.core.exceptions import AgentError, AppBaseError, ValidationError
from lesson_tutor.features.agent.filters import LessonFilter
from lesson_tutor.features.agent.schemas import ChatDebug, ChatRequest, ChatResponse
from lesson_tutor.features.agent.sessions import SessionStore

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = "I couldn't generate a response. Please try again."


class ChatService:
    """Resolves the user's session, runs the agent, and keeps history trimmed."""

    def __init__(self, sessions: SessionStore, agent_factory: Callable[[], Any]):
        self.sessions = sessions
        self.agent_factory = agent_factory
        self.settings = get_settings()

    async def chat(self, request: ChatRequest) -> ChatResponse:
        """Answer the latest message in `request`.

        Raises:
            ValidationError: no messages, or the last message has no content.
            AgentError: the agent or anything it calls failed.
        """
        if not request.messages:
            raise ValidationError("No messages found")

        latest = request.messages[-1]
        if not latest.content:
            raise ValidationError("Invalid message format")

        user_message = latest.content
        lesson_filter = LessonFilter.from_lesson_ids(request.lesson_ids)
        applied_filter = lesson_filter.to_metadata_filter() if lesson_filter else None

        logger.info(f"Processing message for user {request.user_id}: \"{user_message[:80]}\"")
        logger.info(f"Using metadata filter: {applied_filter}")

        session, _ = self.sessions.get_or_create(
            request.user_id, self.agent_factory, lesson_filter
        )

        async with session.lock:
            try:
                result = await session.agent.ainvoke({
                    "input": user_message,
                    "chat_history": list(session.history),
                    "lesson_filter": session.lesson_filter,
                })
            except AgentError:
                raise
            except AppBaseError as e:
                raise AgentError(e.message, detail=type(e).__name__) from e
            except Exception as e:
                logger.error(f"Agent failed for user {request.user_id}: {e}")
                raise AgentError(str(e) or type(e).__name__) from e

            response_text = result.get("output") or FALLBACK_RESPONSE
            session.record_turn(user_message, response_text, self.settings.CHAT_HISTORY_LIMIT)

        return ChatResponse(
            response=response_text,
            debug=ChatDebug(
                used_retrieval=len(result.get("tool_invocations") or []) > 0,
                applied_filter=applied_filter,
            ),
        )
