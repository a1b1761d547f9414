"""
Lessons feature: Embedding utility functions.
Wraps the provider's embedding model for lesson upserts and retrieval queries.
"""

import logging
import re

from lesson_tutor.config import get_settings
from lesson_tutor.core.exceptions import EmbeddingError
from lesson_tutor.core.llm_provider import create_embeddings

logger = logging.getLogger(__name__)

_WHITESPACE_RUN = re.compile(r"\s\s+")

# Singleton embedding model (lazy init)
_embeddings_model = None


def get_embeddings_model():
    """Get or create the shared embeddings model instance."""
    global _embeddings_model
    if _embeddings_model is None:
        _embeddings_model = create_embeddings()
    return _embeddings_model


def clean_text(text: str) -> str:
    """Collapse runs of whitespace (including newlines) into one space and trim."""
    return _WHITESPACE_RUN.sub(" ", text).strip()


def embed_text(text: str) -> list[float]:
    """Generate embedding vector for a single text string.

    Args:
        text: The text to embed. Cleaned before it is sent to the provider.

    Returns:
        A list of floats, truncated to EMBEDDING_DIMENSIONS.

    Raises:
        EmbeddingError: If the cleaned text is empty or the provider fails.
    """
    cleaned = clean_text(text)
    if not cleaned:
        raise EmbeddingError("Cannot generate embedding for empty text.")

    settings = get_settings()
    try:
        vector = get_embeddings_model().embed_query(cleaned)
    except Exception as e:
        logger.error(f"Error getting embedding: {e}")
        raise EmbeddingError(f"Failed to get embedding: {e}") from e

    return vector[:settings.EMBEDDING_DIMENSIONS]
