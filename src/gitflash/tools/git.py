"""Version-control tool: runs ``git <command>`` inside the working directory."""

import logging
import subprocess
from pathlib import Path
from typing import (
    Any,
    Dict,
)

from gitflash.tools import register_tool

logger = logging.getLogger(__name__)


@register_tool("run_git_command")
def run_git_command(command: str, *, workdir: Path) -> Dict[str, Any]:
    """Executes a git command. Do not include 'git' in the command string.

    The command goes through the shell and is not time-limited.  A non-zero exit status is a
    regular result: stdout, stderr and the return code are passed back untouched.
    """
    logger.info("Running: git %s (cwd=%s)", command, workdir)
    proc = subprocess.run(  # pylint: disable=subprocess-run-check
        f"git {command}",
        shell=True,
        cwd=workdir,
        capture_output=True,
        text=True,
    )
    return {"stdout": proc.stdout, "stderr": proc.stderr, "return_code": proc.returncode}
