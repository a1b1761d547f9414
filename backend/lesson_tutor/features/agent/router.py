"""
Agent feature: Chat API route.
"""

from fastapi import APIRouter, Depends

from lesson_tutor.core.dependencies import get_chat_service
from lesson_tutor.features.agent.schemas import ChatRequest, ChatResponse
from lesson_tutor.features.agent.service import ChatService

router = APIRouter()


@router.post(
    "/chat",
    response_model=ChatResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
)
async def chat(
    data: ChatRequest,
    service: ChatService = Depends(get_chat_service),
):
    """Chat with the lesson tutor agent.

    Example body:
        {
          "messages": [{"role": "user", "content": "Tell me about Fusion 360 basics"}],
          "userId": "user123",
          "lessonIds": ["1001", "1002", "1003"]
        }
    """
    return await service.chat(data)
