"""
Agent feature: lesson-ID retrieval filter.

Immutable value carried by the chat session and handed to the agent on each
turn; the retrieval tool receives it as an injected argument.
"""

from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class LessonFilter:
    """Restricts retrieval to lessons whose ID is in `lesson_ids`."""
    lesson_ids: tuple[str, ...]

    @classmethod
    def from_lesson_ids(cls, lesson_ids: Iterable[str] | None) -> "LessonFilter | None":
        """None when no IDs were supplied, meaning unrestricted retrieval."""
        ids = tuple(str(i) for i in (lesson_ids or ()))
        if not ids:
            return None
        return cls(ids)

    def to_metadata_filter(self) -> dict[str, Any]:
        return {"id": {"$in": list(self.lesson_ids)}}

    def __contains__(self, lesson_id: object) -> bool:
        return lesson_id in self.lesson_ids
