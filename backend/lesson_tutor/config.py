"""
Application configuration using Pydantic Settings.
All config is loaded from environment variables / .env file.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    # ── App ──────────────────────────────────────────────
    APP_NAME: str = "lesson-tutor"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"  # comma-separated

    # ── Vector Store (Supabase pgvector) ─────────────────
    VECTOR_INDEX_HOST: str  # Supabase project URL
    VECTOR_INDEX_NAME: str  # table holding lesson vectors
    VECTOR_STORE_API_KEY: str
    VECTOR_NAMESPACE: str = "ns1"
    RETRIEVAL_TOP_K: int = 3

    # ── LLM (Provider-Agnostic) ──────────────────────────
    LLM_PROVIDER: str = "openai"  # openai | gemini | groq
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_API_KEY: str = ""
    LLM_TEMPERATURE: float = 0.0

    # ── Embedding ────────────────────────────────────────
    EMBEDDING_PROVIDER: str = "openai"  # openai | gemini
    EMBEDDING_MODEL: str = "text-embedding-ada-002"
    EMBEDDING_API_KEY: str = ""  # empty -> LLM_API_KEY
    EMBEDDING_DIMENSIONS: int = 1536

    # ── Agent ────────────────────────────────────────────
    AGENT_RECURSION_LIMIT: int = 25  # Max graph steps (agent+tool nodes per turn)
    CHAT_HISTORY_LIMIT: int = 10  # individual messages, not pairs
    TUTOR_SUBJECT: str = "Fusion 360"

    # ── Sessions ─────────────────────────────────────────
    SESSION_MAX_USERS: int = 1000  # least recently used session evicted beyond this
    SESSION_TTL_SECONDS: int = 0  # 0 = no idle expiry

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance (singleton)."""
    return Settings()
