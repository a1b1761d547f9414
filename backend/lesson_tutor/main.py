"""
Lesson Tutor - FastAPI Application Entry Point.

Feature-based modular architecture:
  features/lessons → POST /upsert-lesson (embed + store lesson text)
  features/agent   → POST /chat (per-user tutor agent with lesson retrieval)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from lesson_tutor.config import get_settings
from lesson_tutor.core.dependencies import get_session_store
from lesson_tutor.core.exceptions import (
    AppBaseError,
    app_error_handler,
    request_validation_handler,
    unhandled_error_handler,
)

# ── Feature Routers ──────────────────────────────────────
from lesson_tutor.features.lessons.router import router as lessons_router
from lesson_tutor.features.agent.router import router as agent_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup & shutdown."""
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print(f"🚀 {settings.APP_NAME} v{settings.APP_VERSION} starting...")
    print(f"🤖 LLM Provider: {settings.LLM_PROVIDER} ({settings.LLM_MODEL})")
    print(f"📚 Vector index: {settings.VECTOR_INDEX_NAME} @ {settings.VECTOR_INDEX_HOST[:40]}...")
    yield
    sessions = get_session_store()
    print(f"👋 Shutting down, dropping {len(sessions)} chat sessions...")
    sessions.clear()


def create_app() -> FastAPI:
    """Application factory."""
    settings = get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Lesson upsert and retrieval-augmented tutor chat",
        lifespan=lifespan,
    )

    # ── CORS ─────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Error Handlers ───────────────────────────────────
    app.add_exception_handler(AppBaseError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # ── Register Feature Routers ─────────────────────────
    app.include_router(lessons_router, tags=["Lessons"])
    app.include_router(agent_router, tags=["Agent"])

    # ── Health Check ─────────────────────────────────────
    @app.get("/health", tags=["System"])
    async def health_check():
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    return app


app = create_app()
