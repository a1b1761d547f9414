"""
Shared fixtures. Required settings are seeded before any lesson_tutor import
so get_settings() never reaches for a real .env.
"""

import os

os.environ.setdefault("VECTOR_INDEX_HOST", "https://test-project.supabase.co")
os.environ.setdefault("VECTOR_INDEX_NAME", "lessons")
os.environ.setdefault("VECTOR_STORE_API_KEY", "test-key")
os.environ.setdefault("LLM_API_KEY", "test-llm-key")

from unittest.mock import AsyncMock, Mock

import pytest

from lesson_tutor.features.agent.sessions import SessionStore
from lesson_tutor.features.lessons.schemas import LessonRecord, RetrievedLesson


class InMemoryLessonStore:
    """Stands in for LessonVectorStore: keeps rows in a dict, retrieval ignores vectors."""

    def __init__(self, namespace: str = "ns1"):
        self.namespace = namespace
        self.rows: dict[tuple[str, str], dict] = {}
        self.retrieve_calls: list[dict] = []

    def upsert(self, lesson_id, vector, metadata, namespace=None):
        self.rows[(namespace or self.namespace, lesson_id)] = {
            "id": lesson_id,
            "embedding": list(vector),
            "metadata": dict(metadata),
        }

    def fetch(self, lesson_id, namespace=None):
        row = self.rows.get((namespace or self.namespace, lesson_id))
        return LessonRecord(**row) if row else None

    def retrieve(self, query_text, k, namespace=None, lesson_ids=None):
        self.retrieve_calls.append({"query": query_text, "k": k, "lesson_ids": lesson_ids})
        hits = []
        for (ns, lesson_id), row in self.rows.items():
            if ns != (namespace or self.namespace):
                continue
            if lesson_ids and lesson_id not in lesson_ids:
                continue
            hits.append(RetrievedLesson(
                id=lesson_id,
                content=row["metadata"]["content"],
                metadata=row["metadata"],
            ))
        return hits[:k]


def make_fake_agent(tool_invocations=None):
    """Agent double that echoes the input back as its reply."""
    agent = Mock()

    async def ainvoke(inputs):
        return {
            "output": f"reply to {inputs['input']}",
            "tool_invocations": list(tool_invocations or []),
        }

    agent.ainvoke = AsyncMock(side_effect=ainvoke)
    return agent


@pytest.fixture
def lesson_store():
    return InMemoryLessonStore()


@pytest.fixture
def fake_embed():
    return Mock(return_value=[0.1, 0.2, 0.3])


@pytest.fixture
def session_store():
    return SessionStore(max_sessions=100)


@pytest.fixture
def agent_factory():
    return Mock(side_effect=lambda: make_fake_agent())
