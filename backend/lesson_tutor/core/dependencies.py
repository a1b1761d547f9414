"""
FastAPI dependency injection functions.
"""

from functools import lru_cache, partial

from fastapi import Depends
from supabase import Client

from lesson_tutor.config import get_settings
from lesson_tutor.core.database import get_supabase_client
from lesson_tutor.features.agent.graph import build_lesson_agent
from lesson_tutor.features.agent.service import ChatService
from lesson_tutor.features.agent.sessions import SessionStore
from lesson_tutor.features.lessons.service import LessonService
from lesson_tutor.features.lessons.store import LessonVectorStore


def get_db() -> Client:
    """Dependency: get Supabase client."""
    return get_supabase_client()


def get_lesson_store(db: Client = Depends(get_db)) -> LessonVectorStore:
    """Dependency: vector store bound to the configured index and namespace."""
    settings = get_settings()
    return LessonVectorStore(
        db,
        index_name=settings.VECTOR_INDEX_NAME,
        namespace=settings.VECTOR_NAMESPACE,
    )


@lru_cache
def get_session_store() -> SessionStore:
    """Dependency: the process-wide chat session store (singleton)."""
    settings = get_settings()
    return SessionStore(
        max_sessions=settings.SESSION_MAX_USERS,
        ttl_seconds=settings.SESSION_TTL_SECONDS,
    )


def get_lesson_service(
    store: LessonVectorStore = Depends(get_lesson_store),
) -> LessonService:
    return LessonService(store)


def get_chat_service(
    sessions: SessionStore = Depends(get_session_store),
    store: LessonVectorStore = Depends(get_lesson_store),
) -> ChatService:
    """Dependency: chat service whose new sessions get an agent bound to `store`."""
    return ChatService(sessions, agent_factory=partial(build_lesson_agent, store))
