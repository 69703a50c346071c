"""Main orchestration loop for git-flash."""

from __future__ import annotations

import json
import logging

from gitflash.agent.planner_interface import BasePlanner
from gitflash.agent.tool_executor import ToolExecutor
from gitflash.common import (
    AnsiColors,
    colored_print,
)
from gitflash.core.errors import TurnLimitExceeded
from gitflash.core.schema import (
    ConversationState,
    Message,
    ToolCall,
    ToolResponse,
    ToolResult,
)

logger = logging.getLogger(__name__)

PREAMBLE = (
    "You are Git Flash, an AI assistant for git and file system operations. "
    "You are operating in the directory: {directory}. "
    "The user's goal is: {instruction}"
)

DRY_RUN_RESULT = {"status": "Dry run mode, command not executed."}


# ---------------------------------------------------------------------------
# Agent Loop
# ---------------------------------------------------------------------------
class AgentLoop:
    """
    Drives the planner until it stops asking for tools.

    Each turn is strictly: ask the planner, show the requested call, run it (or simulate it in
    dry-run mode), show the result, feed it back.  Tool calls are never run concurrently.
    """

    def __init__(
        self,
        planner: BasePlanner,
        executor: ToolExecutor,
        *,
        dry_run: bool = False,
        max_turns: int | None = None,
    ) -> None:
        if max_turns is not None and max_turns < 1:
            raise ValueError("max_turns must be a positive integer or None")
        self.planner = planner
        self.executor = executor
        self.dry_run = dry_run
        self.max_turns = max_turns

    def _dispatch(self, call: ToolCall) -> ToolResult:
        colored_print(f"🤖 Agent wants to run: {call.display()}", AnsiColors.YELLOW)
        if self.dry_run:
            colored_print("-- DRY RUN: SKIPPING COMMAND --", AnsiColors.MAGENTA)
            result: ToolResult = dict(DRY_RUN_RESULT)
        else:
            result = self.executor.execute(call.name, call.args)
        colored_print(f"Result:\n{json.dumps(result, indent=2)}", AnsiColors.DIM)
        return result

    def run(self, instruction: str) -> str:
        """
        Satisfy *instruction* and return the model's final answer.

        Raises
        ------
        PlannerError
            If the reasoning service fails; the invocation is aborted.
        TurnLimitExceeded
            If ``max_turns`` tool calls were made without a final answer.
        """
        colored_print(f"▶️  User Goal: {instruction}", AnsiColors.CYAN)
        conversation = ConversationState()
        conversation.append(
            Message(
                role="user",
                content=PREAMBLE.format(
                    directory=self.executor.working_directory, instruction=instruction
                ),
            )
        )
        tools = self.executor.schemas

        turns = 0
        reply = self.planner.respond(conversation, tools)
        while reply.tool_call is not None:
            if self.max_turns is not None and turns >= self.max_turns:
                logger.warning("Stopping after %d tool calls", turns)
                raise TurnLimitExceeded(self.max_turns)
            turns += 1

            call = reply.tool_call
            logger.info("Turn %d: %s", turns, call.display())
            result = self._dispatch(call)

            conversation.append(call)
            conversation.append(ToolResponse(name=call.name, call_id=call.id, result=result))
            reply = self.planner.respond(conversation, tools)

        final = reply.text or ""
        conversation.append(Message(role="assistant", content=final))
        logger.info("Finished after %d tool calls", turns)
        colored_print(f"✅ Final Response:\n{final}", AnsiColors.GREEN)
        return final
