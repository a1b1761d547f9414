"""
Lessons feature: API route for upserting lesson content.
"""

from fastapi import APIRouter, Depends

from lesson_tutor.core.dependencies import get_lesson_service
from lesson_tutor.features.lessons.schemas import LessonUpsertRequest, LessonUpsertResponse
from lesson_tutor.features.lessons.service import LessonService

router = APIRouter()


@router.post("/upsert-lesson", response_model=LessonUpsertResponse)
def upsert_lesson(
    data: LessonUpsertRequest,
    service: LessonService = Depends(get_lesson_service),
):
    """Embed a lesson's text and store it (with metadata) in the vector index.

    Example body:
        {"id": 1001, "content": "## Sketch basics ...", "metadata": {"title": "Sketching"}}
    """
    return service.upsert_lesson(data)
