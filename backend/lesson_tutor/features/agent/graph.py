"""
Agent feature: LangGraph state machine with ReAct loop.

Architecture:
  User Message → Agent (LLM) → Tool Decision → lesson_search → Agent → Response

Constraints:
  - recursion_limit from AGENT_RECURSION_LIMIT config (default 25)
  - One retrieval tool per agent; the lesson filter rides in graph state
    and is injected into every lesson_search call
"""

from typing import Annotated, Any, TypedDict
import logging

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage
from langgraph.graph import StateGraph, END, START
from langgraph.graph.message import add_messages

from lesson_tutor.config import get_settings
from lesson_tutor.core.llm_provider import create_llm
from lesson_tutor.features.agent.filters import LessonFilter
from lesson_tutor.features.agent.prompts import build_system_prompt
from lesson_tutor.features.agent.tools import LESSON_SEARCH_TOOL, create_lesson_search_tool
from lesson_tutor.features.lessons.store import LessonVectorStore

logger = logging.getLogger(__name__)


# ── State Definition ─────────────────────────────────────
class AgentState(TypedDict):
    """State passed through the LangGraph graph."""
    messages: Annotated[list[BaseMessage], add_messages]
    lesson_filter: list[str] | None


def extract_text(content: Any) -> str:
    """Flatten provider message content (plain string or list of parts) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for item in content:
            if isinstance(item, dict) and item.get("type") == "text":
                parts.append(item.get("text", ""))
            elif isinstance(item, str):
                parts.append(item)
        return "".join(parts)
    return "" if content is None else str(content)


def collect_tool_invocations(messages: list[BaseMessage]) -> list[dict]:
    """Every tool call the model made in `messages`, in order."""
    invocations = []
    for message in messages:
        if isinstance(message, AIMessage):
            for tc in message.tool_calls:
                invocations.append({"name": tc["name"], "args": dict(tc.get("args") or {})})
    return invocations


class LessonAgent:
    """Compiled graph plus the calling convention the chat service relies on."""

    def __init__(self, graph, recursion_limit: int):
        self.graph = graph
        self.recursion_limit = recursion_limit

    async def ainvoke(self, inputs: dict) -> dict:
        """Run one turn.

        Args:
            inputs: {"input": str, "chat_history": list[BaseMessage],
                     "lesson_filter": LessonFilter | None}

        Returns:
            {"output": str, "tool_invocations": list[{"name", "args"}]}
        """
        messages = [*inputs.get("chat_history", []), HumanMessage(content=inputs["input"])]
        lesson_filter: LessonFilter | None = inputs.get("lesson_filter")

        result = await self.graph.ainvoke(
            {
                "messages": messages,
                "lesson_filter": list(lesson_filter.lesson_ids) if lesson_filter else None,
            },
            config={"recursion_limit": self.recursion_limit},
        )

        turn_messages = result["messages"][len(messages):]
        output = extract_text(turn_messages[-1].content) if turn_messages else ""
        return {
            "output": output,
            "tool_invocations": collect_tool_invocations(turn_messages),
        }


def build_lesson_agent(store: LessonVectorStore, llm: BaseChatModel | None = None) -> LessonAgent:
    """Build the LangGraph ReAct agent with a single lesson retrieval tool.
    
    Returns:
        LessonAgent wrapping the compiled graph.
    """
    settings = get_settings()

    lesson_search = create_lesson_search_tool(store)
    tool_map = {lesson_search.name: lesson_search}

    # LLM with tools bound
    if llm is None:
        llm = create_llm()
    llm_with_tools = llm.bind_tools([lesson_search])
    system_prompt = build_system_prompt(settings.TUTOR_SUBJECT, LESSON_SEARCH_TOOL)

    # ── Node: Agent (LLM decision) ──────────────────────
    async def agent_node(state: AgentState) -> dict:
        """LLM processes messages and decides: respond or call tool."""
        messages = [SystemMessage(content=system_prompt), *state["messages"]]
        response = await llm_with_tools.ainvoke(messages)
        return {"messages": [response]}

    # ── Routing: should we call tools or end? ────────────
    def should_continue(state: AgentState) -> str:
        """Route based on whether LLM wants to call tools."""
        last_message = state["messages"][-1]
        if hasattr(last_message, "tool_calls") and last_message.tool_calls:
            return "tools"
        return END

    async def tool_node(state: AgentState) -> dict:
        """Execute tools with the lesson filter injected from state."""
        last_message = state["messages"][-1]
        results = []

        for tc in last_message.tool_calls:
            tool_fn = tool_map.get(tc["name"])
            if tool_fn is None:
                results.append(ToolMessage(
                    content=f"Tool '{tc['name']}' does not exist. Use {LESSON_SEARCH_TOOL}.",
                    tool_call_id=tc["id"],
                    name=tc["name"],
                ))
                continue
            args = dict(tc["args"])
            args["lesson_filter"] = state.get("lesson_filter")

            logger.info(f"Calling tool: {tc['name']} with args: {tc['args']}")
            try:
                result = await tool_fn.ainvoke(args)
            except Exception as e:
                logger.error(f"Tool {tc['name']} error: {e}")
                raise
            logger.info(f"Tool {tc['name']} returned ({len(str(result))} chars)")

            results.append(ToolMessage(
                content=str(result),
                tool_call_id=tc["id"],
                name=tc["name"],
            ))

        return {"messages": results}

    # ── Build Graph ──────────────────────────────────────
    graph = StateGraph(AgentState)
    graph.add_node("agent", agent_node)
    graph.add_node("tools", tool_node)

    graph.add_edge(START, "agent")
    graph.add_conditional_edges("agent", should_continue, {"tools": "tools", END: END})
    graph.add_edge("tools", "agent")  # After tool → back to agent

    return LessonAgent(graph.compile(), recursion_limit=settings.AGENT_RECURSION_LIMIT)
