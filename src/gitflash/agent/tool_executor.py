"""Dispatches tool calls registered in ``gitflash.tools`` and converts failures to data."""

import logging
import os
from pathlib import Path
from typing import (
    Any,
    Dict,
    Mapping,
)

from gitflash.core.errors import ToolExecutionError
from gitflash.core.schema import (
    ToolResult,
    ToolSchema,
)
from gitflash.tools import (
    TOOL_REGISTRY,
    get_tool_schemas,
)

logger = logging.getLogger(__name__)


def execute_tool(
    name: str, args: Dict[str, Any] | None, working_directory: str | os.PathLike[str]
) -> Any:
    """
    Look up *name* in the registry and invoke it with *args*.

    Parameters
    ----------
    name:
        The registered tool name.
    args:
        Keyword arguments to pass verbatim to the tool function.  If *None*,
        an empty dict is assumed.
    working_directory:
        Confinement root handed to the tool as ``workdir``.

    Returns
    -------
    Any
        Whatever the tool function returns.

    Raises
    ------
    ToolExecutionError
        If the tool is missing or its invocation raises an exception.
    """

    if args is None:
        args = {}

    tool_fn = TOOL_REGISTRY.get(name)
    if tool_fn is None:
        raise ToolExecutionError(f"Unknown tool: {name}")

    try:
        logger.debug("Executing tool '%s' with args=%s", name, args)
        return tool_fn(**args, workdir=Path(working_directory))
    except ToolExecutionError:
        raise
    except TypeError as exc:
        # Argument mismatch, including a model-supplied workdir keyword
        logger.warning("Argument error while executing tool '%s': %s", name, exc)
        raise ToolExecutionError(f"Invalid arguments for tool '{name}': {exc}") from exc
    except Exception as exc:  # pylint: disable=broad-except
        logger.info("Tool '%s' failed: %s", name, exc)
        raise ToolExecutionError(str(exc)) from exc


class ToolExecutor:
    """
    Sandboxed executor bound to a fixed working directory.

    :meth:`execute` is total: whatever the tool does, the caller gets a :data:`ToolResult`
    back and never an exception.
    """

    def __init__(self, working_directory: str | os.PathLike[str] | None = None) -> None:
        self.working_directory = Path(working_directory or os.getcwd()).resolve()

    @property
    def schemas(self) -> Mapping[str, ToolSchema]:
        """Schemas of every tool this executor can dispatch."""
        return get_tool_schemas()

    def execute(self, name: str, args: Dict[str, Any] | None = None) -> ToolResult:
        """Run tool *name* and return its result or an ``{"error": message}`` payload."""
        if args is not None and not isinstance(args, dict):
            return {"error": f"Invalid arguments for tool '{name}': expected an object"}
        try:
            return execute_tool(name, args, self.working_directory)
        except ToolExecutionError as exc:
            return {"error": str(exc)}
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Unhandled error in tool '%s'", name)
            return {"error": str(exc) or exc.__class__.__name__}
