"""
Schema definitions for planner <-> agent <-> tool messages.

These data models serve as the contract between the reasoning service, the agent loop, and the
tool executor.  We keep them separate from runtime logic so they can be imported anywhere without
side-effects.
"""

import json
import uuid
from typing import (
    Any,
    Dict,
    List,
    Literal,
    Mapping,
    Optional,
    Union,
)

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
)

ToolResult = Union[str, Dict[str, Any]]
"""Success payload (text or mapping) or an ``{"error": message}`` mapping."""


def _new_call_id() -> str:
    return f"call_{uuid.uuid4().hex[:12]}"


class ParameterInfo(BaseModel):
    """Type and presence requirement of a single tool parameter."""

    model_config = ConfigDict(frozen=True)

    type: str
    required: bool = True


class ToolSchema(BaseModel):
    """Machine-readable description of one invocable tool."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    parameters: Mapping[str, ParameterInfo] = Field(default_factory=dict)

    def json_schema(self) -> Dict[str, Any]:
        """Render the parameters as a JSON-schema object (OpenAI / Anthropic / Gemini)."""
        return {
            "type": "object",
            "properties": {name: {"type": info.type} for name, info in self.parameters.items()},
            "required": [name for name, info in self.parameters.items() if info.required],
        }


class Message(BaseModel):
    """Plain text message in the conversation."""

    kind: Literal["message"] = "message"
    role: Literal["system", "user", "assistant"] = "user"
    content: str


class ToolCall(BaseModel):
    """A call that the reasoning service wants the agent to execute."""

    kind: Literal["tool_call"] = "tool_call"
    name: str = Field(..., description="Registered tool name")
    args: Dict[str, Any] = Field(default_factory=dict, description="Keyword arguments for the tool")
    id: str = Field(default_factory=_new_call_id, description="Provider correlation id")

    def display(self) -> str:
        """Render as ``name(key="value", ...)`` for the operator."""
        rendered = ", ".join(f"{k}={json.dumps(v)}" for k, v in self.args.items())
        return f"{self.name}({rendered})"


class ToolResponse(BaseModel):
    """Outcome of a tool call, keyed by the same tool name and call id."""

    kind: Literal["tool_response"] = "tool_response"
    name: str
    call_id: str
    result: Any = None

    def payload(self) -> Dict[str, Any]:
        """Wire shape sent back to the reasoning service."""
        return {"result": self.result}


ConversationEntry = Union[Message, ToolCall, ToolResponse]


class ConversationState(BaseModel):
    """Append-only record of one agent invocation."""

    entries: List[ConversationEntry] = Field(default_factory=list)

    def append(self, entry: ConversationEntry) -> None:
        """Add *entry* to the end of the conversation."""
        self.entries.append(entry)


class PlannerReply(BaseModel):
    """What the reasoning service returned for one turn."""

    tool_call: Optional[ToolCall] = None
    text: Optional[str] = None
