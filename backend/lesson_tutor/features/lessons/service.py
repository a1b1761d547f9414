"""
Lessons feature: Service layer for upserting lesson text into the vector index.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable

from lesson_tutor.core.exceptions import AppBaseError, StorageError, ValidationError
from lesson_tutor.features.lessons.embedding import embed_text
from lesson_tutor.features.lessons.schemas import LessonUpsertRequest, LessonUpsertResponse
from lesson_tutor.features.lessons.store import LessonVectorStore

logger = logging.getLogger(__name__)

# Always written by the server; caller metadata cannot override them.
CONTENT_KEY = "content"
LAST_UPDATED_KEY = "lastUpdated"


def resolve_lesson_id(raw_id: str | int | float | None) -> str:
    """Use the caller's ID (numbers stringified) or generate a fresh UUID.

    Whole floats drop the fraction, so 1001.0 and 1001 name the same lesson.
    """
    if raw_id is None or raw_id == "":
        return str(uuid.uuid4())
    if isinstance(raw_id, float) and raw_id.is_integer():
        return str(int(raw_id))
    return str(raw_id)


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with millisecond precision, e.g. 2024-05-01T10:00:00.000Z."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_metadata(content: str, extra: dict[str, Any] | None) -> dict[str, Any]:
    return {
        **(extra or {}),
        CONTENT_KEY: content,
        LAST_UPDATED_KEY: utc_timestamp(),
    }


class LessonService:
    """Embeds lesson text and writes it to the vector store, one record per call."""

    def __init__(
        self,
        store: LessonVectorStore,
        embed: Callable[[str], list[float]] = embed_text,
    ):
        self.store = store
        self.embed = embed

    def upsert_lesson(self, request: LessonUpsertRequest) -> LessonUpsertResponse:
        """Validate, embed and store a lesson.

        Raises:
            ValidationError: content missing, empty or not a string.
            EmbeddingError: cleaned content is empty or the provider failed.
            StorageError: the vector store write failed.
        """
        content = request.content
        if not content or not isinstance(content, str):
            raise ValidationError("Invalid request: content field is required and must be a string.")

        vector = self.embed(content)
        lesson_id = resolve_lesson_id(request.id)
        metadata = build_metadata(content, request.metadata)

        logger.info(f"Upserting lesson with ID: {lesson_id}")
        try:
            self.store.upsert(lesson_id, vector, metadata)
        except AppBaseError:
            raise
        except Exception as e:
            raise StorageError(str(e)) from e
        logger.info(f"Successfully upserted lesson with ID: {lesson_id}")

        return LessonUpsertResponse(
            message=f"Successfully upserted lesson with ID: {lesson_id}",
            id=lesson_id,
        )
