"""Exception types shared by the tools, the executor and the agent loop."""


class ToolExecutionError(RuntimeError):
    """Raised when a requested tool cannot run or fails."""


class PathDenied(ToolExecutionError):
    """Raised when a path argument resolves outside the working directory."""

    def __init__(self, target: str) -> None:
        super().__init__(f"Path access denied: '{target}' is outside the project directory.")
        self.target = target


class PlannerError(RuntimeError):
    """Raised when the reasoning service cannot be reached or answers with garbage."""


class TurnLimitExceeded(RuntimeError):
    """Raised when the agent loop hits its configured tool-call cap."""

    def __init__(self, max_turns: int) -> None:
        super().__init__(f"Agent exceeded {max_turns} tool calls without a final answer.")
        self.max_turns = max_turns
