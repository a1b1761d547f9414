"""
Lessons feature: vector store backed by a Supabase pgvector table.

One row per lesson, keyed on (namespace, id). Similarity search goes through
the `match_lessons` RPC defined in backend/sql/lessons.sql.
"""

import json
import logging
from typing import Any, Callable

from supabase import Client

from lesson_tutor.core.exceptions import StorageError
from lesson_tutor.features.lessons.embedding import embed_text
from lesson_tutor.features.lessons.schemas import LessonRecord, RetrievedLesson

logger = logging.getLogger(__name__)

MATCH_RPC = "match_lessons"


class LessonVectorStore:
    """Upsert, fetch and similarity search over lesson vectors."""

    def __init__(
        self,
        db: Client,
        index_name: str,
        namespace: str,
        embed: Callable[[str], list[float]] = embed_text,
    ):
        self.db = db
        self.index_name = index_name
        self.namespace = namespace
        self.embed = embed

    def upsert(
        self,
        lesson_id: str,
        vector: list[float],
        metadata: dict[str, Any],
        namespace: str | None = None,
    ) -> None:
        """Write a single lesson vector, replacing any row with the same ID."""
        row = {
            "id": lesson_id,
            "namespace": namespace or self.namespace,
            "embedding": vector,
            "metadata": metadata,
        }
        try:
            self.db.table(self.index_name).upsert(row, on_conflict="namespace,id").execute()
        except Exception as e:
            raise StorageError(f"Failed to upsert lesson {lesson_id}: {e}") from e

    def fetch(self, lesson_id: str, namespace: str | None = None) -> LessonRecord | None:
        """Load one lesson by ID, or None if it is not in the namespace."""
        try:
            result = (
                self.db.table(self.index_name)
                .select("id, metadata, embedding")
                .eq("namespace", namespace or self.namespace)
                .eq("id", lesson_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            raise StorageError(f"Failed to fetch lesson {lesson_id}: {e}") from e

        if not result.data:
            return None

        row = result.data[0]
        embedding = row.get("embedding")
        if isinstance(embedding, str):
            # PostgREST serializes pgvector columns as "[0.1,0.2,...]"
            embedding = json.loads(embedding)
        return LessonRecord(id=str(row["id"]), metadata=row.get("metadata") or {}, embedding=embedding)

    def retrieve(
        self,
        query_text: str,
        k: int,
        namespace: str | None = None,
        lesson_ids: list[str] | None = None,
    ) -> list[RetrievedLesson]:
        """Top-k lessons most similar to `query_text`, optionally limited to `lesson_ids`.

        An empty or None `lesson_ids` means no restriction.
        """
        query_vector = self.embed(query_text)

        try:
            result = self.db.rpc(
                MATCH_RPC,
                {
                    "query_embedding": query_vector,
                    "match_count": k,
                    "match_namespace": namespace or self.namespace,
                    "filter_ids": lesson_ids or None,
                },
            ).execute()
        except Exception as e:
            raise StorageError(f"Failed to query lessons: {e}") from e

        lessons = []
        for row in result.data or []:
            metadata = row.get("metadata") or {}
            lessons.append(RetrievedLesson(
                id=str(row["id"]),
                content=str(metadata.get("content", "")),
                metadata=metadata,
                similarity=row.get("similarity"),
            ))
        return lessons
