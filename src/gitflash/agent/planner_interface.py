"""
Planner interface for git-flash.

This module is the only place that *directly* calls an LLM.  Everything else (agent loop, tools,
executor) stays model-agnostic and talks in terms of :class:`ConversationState` and
:class:`PlannerReply`.

We support three back-ends out of the box, all using native tool calling:

1. **Gemini** via the ``generateContent`` REST endpoint (httpx).
2. **OpenAI** chat completions (``openai`` SDK).
3. **Anthropic** messages (``anthropic`` SDK).

Additional providers can be added by subclassing :class:`BasePlanner` and registering via
:func:`register_planner`.  Planners are stateless: the full conversation is handed in on every
call, and any failure is raised as :class:`PlannerError`.
"""

import json
import logging
from abc import (
    ABC,
    abstractmethod,
)
from typing import (
    Any,
    Callable,
    Dict,
    List,
    Mapping,
    Type,
)

import httpx

from gitflash.config import (
    Settings,
    settings,
)
from gitflash.core.errors import PlannerError
from gitflash.core.schema import (
    ConversationState,
    Message,
    PlannerReply,
    ToolCall,
    ToolResponse,
    ToolSchema,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Registry helpers
# ---------------------------------------------------------------------------
_PLANNER_REGISTRY: dict[str, Type["BasePlanner"]] = {}


def register_planner(name: str) -> Callable:
    """Decorator to register a planner class under *name*."""

    def wrapper(cls: Type["BasePlanner"]) -> Type["BasePlanner"]:
        _PLANNER_REGISTRY[name] = cls
        return cls

    return wrapper


def available_planners() -> List[str]:
    """Names accepted by :func:`load_planner`."""
    return sorted(_PLANNER_REGISTRY)


def load_planner(name: str | None = None, config: Settings | None = None) -> "BasePlanner":
    """
    Factory that returns an instantiated planner.

    Fallback order:
    1. *name* arg
    2. ``config.PLANNER`` env/.env option
    3. default: ``"gemini"``
    """

    config = config or settings
    target = name or getattr(config, "PLANNER", None) or "gemini"
    cls = _PLANNER_REGISTRY.get(target.lower())
    if cls is None:
        raise PlannerError(
            f"Planner '{target}' is not registered. "
            f"Choose one of: {', '.join(available_planners())}"
        )
    return cls.from_settings(config)


# ---------------------------------------------------------------------------
# Base class
# ---------------------------------------------------------------------------
class BasePlanner(ABC):
    """Abstract planner that turns a conversation into a tool call or a final answer."""

    name: str = "base"

    @classmethod
    @abstractmethod
    def from_settings(cls, config: Settings) -> "BasePlanner":
        """Build the planner from application settings."""

    @abstractmethod
    def respond(
        self, conversation: ConversationState, tools: Mapping[str, ToolSchema]
    ) -> PlannerReply:
        """Send *conversation* with the *tools* catalog and return the model's next move."""


def _require_key(key: str | None, planner: str, env_name: str) -> str:
    if not key:
        raise PlannerError(f"No API key configured for the {planner} planner (set {env_name}).")
    return key


# ---------------------------------------------------------------------------
# Gemini
# ---------------------------------------------------------------------------
def gemini_contents(conversation: ConversationState) -> List[Dict[str, Any]]:
    """Translate the conversation into Gemini ``contents``."""
    contents: List[Dict[str, Any]] = []
    for entry in conversation.entries:
        if isinstance(entry, Message):
            role = "model" if entry.role == "assistant" else "user"
            contents.append({"role": role, "parts": [{"text": entry.content}]})
        elif isinstance(entry, ToolCall):
            contents.append(
                {
                    "role": "model",
                    "parts": [{"functionCall": {"name": entry.name, "args": entry.args}}],
                }
            )
        elif isinstance(entry, ToolResponse):
            contents.append(
                {
                    "role": "user",
                    "parts": [
                        {"functionResponse": {"name": entry.name, "response": entry.payload()}}
                    ],
                }
            )
    return contents


def gemini_tools(tools: Mapping[str, ToolSchema]) -> List[Dict[str, Any]]:
    """Render the tool catalog as Gemini ``functionDeclarations``."""
    declarations = []
    for schema in tools.values():
        decl: Dict[str, Any] = {"name": schema.name, "description": schema.description}
        if schema.parameters:
            params = schema.json_schema()
            if not params["required"]:
                del params["required"]
            decl["parameters"] = params
        declarations.append(decl)
    return [{"functionDeclarations": declarations}]


def parse_gemini_response(data: Mapping[str, Any]) -> PlannerReply:
    """Extract the first function call (or the text) from a ``generateContent`` payload."""
    candidates = data.get("candidates") or []
    if not candidates:
        feedback = data.get("promptFeedback")
        raise PlannerError(f"Gemini returned no candidates: {feedback or data}")

    parts = (candidates[0].get("content") or {}).get("parts") or []
    for part in parts:
        call = part.get("functionCall")
        if call:
            name = call.get("name")
            args = call.get("args") or {}
            if not isinstance(name, str) or not isinstance(args, dict):
                raise PlannerError(f"Gemini returned a malformed function call: {call}")
            return PlannerReply(tool_call=ToolCall(name=name, args=args))

    text = "".join(part.get("text", "") for part in parts)
    return PlannerReply(text=text)


@register_planner("gemini")
class GeminiPlanner(BasePlanner):
    """Gemini planner talking to the REST API with httpx."""

    name = "gemini"

    def __init__(
        self,
        api_key: str | None,
        model: str = "gemini-2.0-flash",
        endpoint: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_key = _require_key(api_key, "Gemini", "GEMINI_API_KEY")
        self.model = model
        self.endpoint = endpoint.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, config: Settings) -> "GeminiPlanner":
        return cls(
            api_key=config.GEMINI_API_KEY,
            model=config.GEMINI_MODEL,
            endpoint=config.GEMINI_ENDPOINT,
            timeout=config.REQUEST_TIMEOUT,
        )

    def respond(
        self, conversation: ConversationState, tools: Mapping[str, ToolSchema]
    ) -> PlannerReply:
        url = f"{self.endpoint}/models/{self.model}:generateContent"
        payload = {"contents": gemini_contents(conversation), "tools": gemini_tools(tools)}

        try:
            resp = self._client.post(url, json=payload, headers={"x-goog-api-key": self.api_key})
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error("Gemini request failed: %s", e.response.text)
            raise PlannerError(
                f"Gemini request failed with status {e.response.status_code}: {e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("Gemini request error: %s", str(e))
            raise PlannerError(f"Error calling Gemini endpoint: {str(e)}") from e
        except ValueError as e:
            raise PlannerError(f"Gemini returned invalid JSON: {str(e)}") from e

        logger.debug("Gemini planner response: %s", data)
        return parse_gemini_response(data)


# ---------------------------------------------------------------------------
# OpenAI
# ---------------------------------------------------------------------------
def openai_messages(conversation: ConversationState) -> List[Dict[str, Any]]:
    """Translate the conversation into chat-completions messages."""
    messages: List[Dict[str, Any]] = []
    for entry in conversation.entries:
        if isinstance(entry, Message):
            messages.append({"role": entry.role, "content": entry.content})
        elif isinstance(entry, ToolCall):
            messages.append(
                {
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [
                        {
                            "id": entry.id,
                            "type": "function",
                            "function": {"name": entry.name, "arguments": json.dumps(entry.args)},
                        }
                    ],
                }
            )
        elif isinstance(entry, ToolResponse):
            messages.append(
                {
                    "role": "tool",
                    "tool_call_id": entry.call_id,
                    "content": json.dumps(entry.payload()),
                }
            )
    return messages


def openai_tools(tools: Mapping[str, ToolSchema]) -> List[Dict[str, Any]]:
    """Render the tool catalog as chat-completions ``tools``."""
    return [
        {
            "type": "function",
            "function": {
                "name": schema.name,
                "description": schema.description,
                "parameters": schema.json_schema(),
            },
        }
        for schema in tools.values()
    ]


@register_planner("openai")
class OpenAIPlanner(BasePlanner):
    """OpenAI-based planner using native function calling."""

    name = "openai"

    def __init__(self, api_key: str | None, model: str = "gpt-4o-mini", client: Any = None) -> None:
        if client is None:
            import openai  # pylint: disable=import-outside-toplevel

            client = openai.OpenAI(api_key=_require_key(api_key, "OpenAI", "OPENAI_API_KEY"))
        self._client = client
        self.model = model

    @classmethod
    def from_settings(cls, config: Settings) -> "OpenAIPlanner":
        return cls(api_key=config.OPENAI_API_KEY, model=config.OPENAI_MODEL)

    def respond(
        self, conversation: ConversationState, tools: Mapping[str, ToolSchema]
    ) -> PlannerReply:
        try:
            resp = self._client.chat.completions.create(
                model=self.model,
                messages=openai_messages(conversation),
                tools=openai_tools(tools),
                temperature=0.2,
            )
        except Exception as e:  # pylint: disable=broad-except
            logger.error("OpenAI planner error: %s", str(e))
            raise PlannerError(f"Error calling OpenAI: {str(e)}") from e

        if not resp.choices:
            raise PlannerError("Error: Empty response from OpenAI")

        message = resp.choices[0].message
        if message.tool_calls:
            call = message.tool_calls[0]
            try:
                args = json.loads(call.function.arguments or "{}")
            except json.JSONDecodeError as e:
                raise PlannerError(
                    f"OpenAI returned malformed arguments for '{call.function.name}': {e}"
                ) from e
            if not isinstance(args, dict):
                raise PlannerError(
                    f"OpenAI returned non-object arguments for '{call.function.name}': {args!r}"
                )
            logger.debug("OpenAI planner tool call: %s(%s)", call.function.name, args)
            return PlannerReply(tool_call=ToolCall(id=call.id, name=call.function.name, args=args))

        logger.debug("OpenAI planner response: %s", message.content)
        return PlannerReply(text=message.content or "")


# ---------------------------------------------------------------------------
# Anthropic
# ---------------------------------------------------------------------------
def anthropic_messages(conversation: ConversationState) -> List[Dict[str, Any]]:
    """Translate the conversation into Anthropic ``messages``."""
    messages: List[Dict[str, Any]] = []
    for entry in conversation.entries:
        if isinstance(entry, Message):
            role = "assistant" if entry.role == "assistant" else "user"
            messages.append({"role": role, "content": entry.content})
        elif isinstance(entry, ToolCall):
            messages.append(
                {
                    "role": "assistant",
                    "content": [
                        {
                            "type": "tool_use",
                            "id": entry.id,
                            "name": entry.name,
                            "input": entry.args,
                        }
                    ],
                }
            )
        elif isinstance(entry, ToolResponse):
            messages.append(
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "tool_result",
                            "tool_use_id": entry.call_id,
                            "content": json.dumps(entry.payload()),
                        }
                    ],
                }
            )
    return messages


def anthropic_tools(tools: Mapping[str, ToolSchema]) -> List[Dict[str, Any]]:
    """Render the tool catalog as Anthropic ``tools``."""
    return [
        {"name": s.name, "description": s.description, "input_schema": s.json_schema()}
        for s in tools.values()
    ]


@register_planner("anthropic")
class AnthropicPlanner(BasePlanner):
    """Anthropic Claude-based planner using ``tool_use`` blocks."""

    name = "anthropic"

    def __init__(
        self, api_key: str | None, model: str = "claude-3-5-haiku-latest", client: Any = None
    ) -> None:
        if client is None:
            import anthropic  # pylint: disable=import-outside-toplevel

            client = anthropic.Anthropic(
                api_key=_require_key(api_key, "Anthropic", "ANTHROPIC_API_KEY")
            )
        self._client = client
        self.model = model

    @classmethod
    def from_settings(cls, config: Settings) -> "AnthropicPlanner":
        return cls(api_key=config.ANTHROPIC_API_KEY, model=config.ANTHROPIC_MODEL)

    def respond(
        self, conversation: ConversationState, tools: Mapping[str, ToolSchema]
    ) -> PlannerReply:
        try:
            response = self._client.messages.create(
                model=self.model,
                max_tokens=8192,
                messages=anthropic_messages(conversation),
                tools=anthropic_tools(tools),
                temperature=0.2,
            )
        except Exception as e:  # pylint: disable=broad-except
            logger.error("Anthropic planner error: %s", str(e))
            raise PlannerError(f"Error calling Anthropic: {str(e)}") from e

        texts: List[str] = []
        for block in response.content:
            if block.type == "tool_use":
                if block.input is not None and not isinstance(block.input, dict):
                    raise PlannerError(
                        f"Anthropic returned non-object input for '{block.name}': {block.input!r}"
                    )
                logger.debug("Anthropic planner tool call: %s(%s)", block.name, block.input)
                return PlannerReply(
                    tool_call=ToolCall(id=block.id, name=block.name, args=dict(block.input or {}))
                )
            if block.type == "text":
                texts.append(block.text)

        logger.debug("Anthropic planner response: %s", texts)
        return PlannerReply(text="".join(texts))
