"""
git-flash entry point.

This file handles startup concerns (arg-parsing, settings overrides, logging) and hands the
instruction to the agent loop.
"""

import argparse
import logging
import sys

from gitflash.agent.agent_loop import AgentLoop
from gitflash.agent.planner_interface import (
    available_planners,
    load_planner,
)
from gitflash.agent.tool_executor import ToolExecutor
from gitflash.common import (
    AnsiColors,
    colored_print,
)
from gitflash.config import settings
from gitflash.core.errors import (
    PlannerError,
    TurnLimitExceeded,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _init_logging(level: str) -> None:
    numeric = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Command-line interface definition."""
    parser = argparse.ArgumentParser(
        prog="git-flash", description="An AI assistant for git and file system operations."
    )
    parser.add_argument(
        "instruction", nargs="?", help="The natural language instruction for the git agent."
    )
    parser.add_argument(
        "--dry-run", action="store_true", help="Show tool calls without running them."
    )
    parser.add_argument(
        "--planner",
        choices=available_planners(),
        type=str.lower,
        default=None,
        help="Reasoning service to use (default from env: %s)" % settings.PLANNER,
    )
    parser.add_argument(
        "--max-turns",
        type=_positive_int,
        default=settings.MAX_TURNS,
        help="Stop after this many tool calls (default: unlimited)",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        type=str.lower,
        default=settings.LOG_LEVEL,
        help="Logging level (default from env: %(default)s)",
    )
    return parser


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------
def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for git-flash.

    Returns the process exit status: 0 on a final answer, 1 when the planner fails or the turn
    cap is hit, 2 on usage errors.
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    settings.LOG_LEVEL = args.log_level
    _init_logging(settings.LOG_LEVEL)

    if not args.instruction:
        parser.print_usage(sys.stderr)
        colored_print("Error: an instruction is required.", AnsiColors.RED, file=sys.stderr)
        return 2

    secrets = {"GEMINI_API_KEY", "OPENAI_API_KEY", "ANTHROPIC_API_KEY"}
    logger.debug("Settings: %s", settings.model_dump(exclude=secrets))

    try:
        planner = load_planner(args.planner, settings)
        loop = AgentLoop(planner, ToolExecutor(), dry_run=args.dry_run, max_turns=args.max_turns)
        loop.run(args.instruction)
    except (PlannerError, TurnLimitExceeded) as exc:
        colored_print(f"Error: {exc}", AnsiColors.RED)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
