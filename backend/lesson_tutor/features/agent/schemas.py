from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"] = "user"
    content: Optional[str] = None  # only the latest message's content is required

    model_config = ConfigDict(frozen=True)


class ChatRequest(BaseModel):
    messages: list[ChatMessage] = []
    user_id: str = Field(default="default-user", alias="userId")
    lesson_ids: list[str] = Field(default_factory=list, alias="lessonIds")

    model_config = ConfigDict(populate_by_name=True)


class ChatDebug(BaseModel):
    used_retrieval: bool = Field(alias="usedRetrieval")
    applied_filter: Optional[dict[str, Any]] = Field(default=None, alias="appliedFilter")

    model_config = ConfigDict(populate_by_name=True)


class ChatResponse(BaseModel):
    response: str
    debug: ChatDebug
