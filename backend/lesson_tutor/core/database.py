"""
Database connections: Supabase client for the lesson vector index.
"""

from functools import lru_cache
from supabase import create_client, Client

from lesson_tutor.config import get_settings


@lru_cache
def get_supabase_client() -> Client:
    """Get the Supabase client (singleton) pointed at the vector index host."""
    settings = get_settings()
    return create_client(settings.VECTOR_INDEX_HOST, settings.VECTOR_STORE_API_KEY)
