"""
Tool registry for git-flash.

This module provides a decorator to register tools and a registry to look them up by name.
The tools are functions that are called with keyword arguments and return a value.  Their
schemas (the contract advertised to the reasoning service) are derived from each function's
signature, type hints and docstring.
"""

import inspect
import logging
from typing import (
    Any,
    Callable,
    Dict,
    Mapping,
    get_type_hints,
)

from gitflash.core.schema import (
    ParameterInfo,
    ToolSchema,
)

logger = logging.getLogger(__name__)

TOOL_REGISTRY: Dict[str, Callable] = {}
"""Global registry of tool functions."""

CONTEXT_PARAMS = frozenset({"workdir"})
"""Keyword-only parameters injected by the executor and hidden from the schema."""

_JSON_TYPES: Dict[Any, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    list: "array",
    dict: "object",
}


def register_tool(name: str) -> Callable:
    """
    Register a tool function with the given name.
    The name must be unique and is used to look up the function in the registry.

    The function is registered as a decorator, so it can be used like this:
        @register_tool("my_tool")
        def my_tool_function(arg1: str, *, workdir: Path) -> str:
            # Do something
            return result

    Parameters
    ----------
    name: str
        The name of the tool.  This must be unique.
    Returns
    -------
    Callable
        A decorator that registers the function with the given name.
    Raises
    ------
    ValueError
        If a function with the same name is already registered.
    """
    if name in TOOL_REGISTRY:
        raise ValueError(f"Tool '{name}' is already registered.")
    logger.debug("Registering tool '%s'", name)

    def wrapper(fn: Callable) -> Callable:
        TOOL_REGISTRY[name] = fn
        return fn

    return wrapper


def _describe(fn: Callable) -> str:
    doc = inspect.getdoc(fn) or ""
    # The first paragraph is the model-facing description
    return doc.split("\n\n", 1)[0].replace("\n", " ").strip()


def build_schema(name: str, fn: Callable) -> ToolSchema:
    """Derive the :class:`ToolSchema` of *fn* from its signature."""
    sig = inspect.signature(fn)
    type_hints = get_type_hints(fn)
    params: Dict[str, ParameterInfo] = {}
    for param_name, param in sig.parameters.items():
        if param_name in CONTEXT_PARAMS:
            continue
        param_type = type_hints.get(param_name, str)
        params[param_name] = ParameterInfo(
            type=_JSON_TYPES.get(param_type, "string"),
            required=param.default is inspect.Parameter.empty,
        )
    return ToolSchema(name=name, description=_describe(fn), parameters=params)


def get_tool_schemas() -> Mapping[str, ToolSchema]:
    """Extract schema information from every registered tool."""
    return {name: build_schema(name, fn) for name, fn in TOOL_REGISTRY.items()}


# Register the built-in catalog
from gitflash.tools import (  # noqa: E402  pylint: disable=wrong-import-position
    filesystem,
    git,
)

__all__ = [
    "CONTEXT_PARAMS",
    "TOOL_REGISTRY",
    "build_schema",
    "filesystem",
    "get_tool_schemas",
    "git",
    "register_tool",
]
