"""
Tests for the lesson agent graph.

A scripted fake chat model drives the ReAct loop so the tool node, filter
injection and result shaping run for real against the in-memory store.
"""

import pytest
from langchain_core.language_models.fake_chat_models import GenericFakeChatModel
from langchain_core.messages import AIMessage, HumanMessage, ToolMessage

from lesson_tutor.features.agent.filters import LessonFilter
from lesson_tutor.features.agent.graph import (
    build_lesson_agent,
    collect_tool_invocations,
    extract_text,
)
from lesson_tutor.features.agent.tools import LESSON_SEARCH_TOOL, create_lesson_search_tool


class ScriptedChatModel(GenericFakeChatModel):
    """Fake model that accepts bind_tools and replays its scripted messages."""

    def bind_tools(self, tools, **kwargs):
        return self


def _tool_call(query, call_id="call_1"):
    return AIMessage(
        content="",
        tool_calls=[{"name": LESSON_SEARCH_TOOL, "args": {"query": query}, "id": call_id}],
    )


@pytest.fixture
def seeded_store(lesson_store):
    lesson_store.upsert("1001", [0.1], {"content": "Extrude pulls a sketch into 3D."})
    lesson_store.upsert("1002", [0.2], {"content": "Fillet rounds an edge."})
    return lesson_store


# -- pure helpers --

class TestExtractText:
    def test_plain_string(self):
        assert extract_text("hello") == "hello"

    def test_structured_parts(self):
        content = [{"type": "thinking", "thinking": "hmm"}, {"type": "text", "text": "Answer"}]
        assert extract_text(content) == "Answer"

    def test_none(self):
        assert extract_text(None) == ""


class TestCollectToolInvocations:
    def test_collects_in_order(self):
        messages = [
            HumanMessage(content="q"),
            _tool_call("extrude", "c1"),
            ToolMessage(content="...", tool_call_id="c1", name=LESSON_SEARCH_TOOL),
            AIMessage(content="done"),
        ]
        assert collect_tool_invocations(messages) == [
            {"name": LESSON_SEARCH_TOOL, "args": {"query": "extrude"}},
        ]

    def test_none_when_model_answers_directly(self):
        assert collect_tool_invocations([AIMessage(content="hi")]) == []


# -- retrieval tool --

class TestLessonSearchTool:
    @pytest.mark.asyncio
    async def test_filter_is_forwarded_to_store(self, seeded_store):
        search = create_lesson_search_tool(seeded_store)
        result = await search.ainvoke({"query": "fillet", "lesson_filter": ["1002"]})

        assert result == "Fillet rounds an edge."
        assert seeded_store.retrieve_calls[-1]["lesson_ids"] == ["1002"]
        assert seeded_store.retrieve_calls[-1]["k"] == 3

    @pytest.mark.asyncio
    async def test_unfiltered_joins_hits_with_blank_lines(self, seeded_store):
        search = create_lesson_search_tool(seeded_store)
        result = await search.ainvoke({"query": "anything"})

        assert result == "Extrude pulls a sketch into 3D.\n\nFillet rounds an edge."

    def test_filter_not_exposed_to_model(self, seeded_store):
        search = create_lesson_search_tool(seeded_store)
        assert "lesson_filter" not in search.tool_call_schema.model_json_schema()["properties"]


# -- full graph --

class TestLessonAgent:
    @pytest.mark.asyncio
    async def test_tool_turn_reports_invocation_and_uses_filter(self, seeded_store):
        llm = ScriptedChatModel(messages=iter([
            _tool_call("how do I extrude"),
            AIMessage(content="Select the sketch, then press E."),
        ]))
        agent = build_lesson_agent(seeded_store, llm=llm)

        result = await agent.ainvoke({
            "input": "how do I extrude?",
            "chat_history": [],
            "lesson_filter": LessonFilter(("1001",)),
        })

        assert result["output"] == "Select the sketch, then press E."
        assert result["tool_invocations"] == [
            {"name": LESSON_SEARCH_TOOL, "args": {"query": "how do I extrude"}},
        ]
        assert seeded_store.retrieve_calls[-1]["lesson_ids"] == ["1001"]

    @pytest.mark.asyncio
    async def test_direct_answer_has_no_invocations(self, seeded_store):
        llm = ScriptedChatModel(messages=iter([AIMessage(content="Hello!")]))
        agent = build_lesson_agent(seeded_store, llm=llm)

        result = await agent.ainvoke({
            "input": "hi",
            "chat_history": [HumanMessage(content="earlier"), AIMessage(content="reply")],
            "lesson_filter": None,
        })

        assert result == {"output": "Hello!", "tool_invocations": []}
        assert seeded_store.retrieve_calls == []

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, seeded_store, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError("index offline")

        monkeypatch.setattr(seeded_store, "retrieve", broken)
        llm = ScriptedChatModel(messages=iter([_tool_call("x"), AIMessage(content="unused")]))
        agent = build_lesson_agent(seeded_store, llm=llm)

        with pytest.raises(RuntimeError, match="index offline"):
            await agent.ainvoke({"input": "x", "chat_history": [], "lesson_filter": None})
