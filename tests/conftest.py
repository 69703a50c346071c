"""Shared fixtures: scripted planners standing in for the reasoning service."""

from typing import (
    Iterable,
    List,
    Mapping,
)

import pytest

from gitflash.agent.planner_interface import BasePlanner
from gitflash.config import Settings
from gitflash.core.schema import (
    ConversationEntry,
    ConversationState,
    PlannerReply,
    ToolCall,
    ToolSchema,
)


class ScriptedPlanner(BasePlanner):
    """Replays a fixed list of replies and records every conversation it was shown."""

    name = "scripted"

    def __init__(self, replies: Iterable[PlannerReply]) -> None:
        self.replies: List[PlannerReply] = list(replies)
        self.seen: List[List[ConversationEntry]] = []
        self.tool_names: List[str] = []

    @classmethod
    def from_settings(cls, config: Settings) -> "ScriptedPlanner":
        return cls([])

    def respond(
        self, conversation: ConversationState, tools: Mapping[str, ToolSchema]
    ) -> PlannerReply:
        self.seen.append(list(conversation.entries))
        self.tool_names = sorted(tools)
        if not self.replies:
            raise AssertionError("planner asked for more turns than scripted")
        return self.replies.pop(0)


class EndlessPlanner(BasePlanner):
    """Never stops asking for ``get_current_directory``."""

    name = "endless"

    def __init__(self) -> None:
        self.calls = 0

    @classmethod
    def from_settings(cls, config: Settings) -> "EndlessPlanner":
        return cls()

    def respond(
        self, conversation: ConversationState, tools: Mapping[str, ToolSchema]
    ) -> PlannerReply:
        self.calls += 1
        return PlannerReply(tool_call=ToolCall(name="get_current_directory"))


def tool(name: str, **args: object) -> PlannerReply:
    """Shorthand for a reply that requests one tool call."""
    return PlannerReply(tool_call=ToolCall(name=name, args=dict(args)))


def answer(text: str) -> PlannerReply:
    """Shorthand for a terminal reply."""
    return PlannerReply(text=text)


@pytest.fixture
def workdir(tmp_path):
    """A working directory nested one level down, with an evil sibling next to it."""
    root = tmp_path / "work-dir"
    root.mkdir()
    evil = tmp_path / "work-dir-evil"
    evil.mkdir()
    (evil / "secret.txt").write_text("top secret", encoding="utf-8")
    return root
