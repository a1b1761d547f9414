from typing import Any, Optional

from pydantic import BaseModel


class LessonUpsertRequest(BaseModel):
    id: Optional[str | int | float] = None  # generated when absent; numbers stringified
    content: Optional[str] = None  # required; checked by the service for a clean 400
    metadata: Optional[dict[str, Any]] = None


class LessonUpsertResponse(BaseModel):
    message: str
    id: str


class LessonRecord(BaseModel):
    id: str
    metadata: dict[str, Any]
    embedding: Optional[list[float]] = None


class RetrievedLesson(BaseModel):
    id: str
    content: str
    metadata: dict[str, Any] = {}
    similarity: Optional[float] = None
