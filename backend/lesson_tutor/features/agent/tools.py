"""
Agent feature: lesson retrieval tool.
A LangChain tool the LangGraph agent calls to pull lesson content from the
vector store. The lesson filter is injected from graph state, never chosen by the LLM.
"""

import logging
from typing import Annotated

from langchain_core.tools import BaseTool, InjectedToolArg, tool

from lesson_tutor.config import get_settings
from lesson_tutor.features.agent.prompts import TOOL_DESCRIPTION_TEMPLATE
from lesson_tutor.features.lessons.store import LessonVectorStore

logger = logging.getLogger(__name__)

LESSON_SEARCH_TOOL = "lesson_search"


def create_lesson_search_tool(store: LessonVectorStore) -> BaseTool:
    """Build the retrieval tool bound to `store`."""
    settings = get_settings()

    @tool(LESSON_SEARCH_TOOL)
    def lesson_search(
        query: str,
        lesson_filter: Annotated[list[str] | None, InjectedToolArg] = None,
    ) -> str:
        """Search the lesson knowledge base.

        Args:
            query: What to look up in the lessons.
        """
        lessons = store.retrieve(
            query,
            k=settings.RETRIEVAL_TOP_K,
            lesson_ids=lesson_filter,
        )
        logger.info(f"{LESSON_SEARCH_TOOL}: {len(lessons)} lessons for '{query[:60]}' (filter={lesson_filter})")
        return "\n\n".join(lesson.content for lesson in lessons)

    lesson_search.description = TOOL_DESCRIPTION_TEMPLATE.format(subject=settings.TUTOR_SUBJECT)
    return lesson_search
