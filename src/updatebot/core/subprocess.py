"""Subprocess execution for the git and gh command-line tools.

- run_command_ignore_output: runs a command with its output suppressed and
  returns the exit code
- execute_gh_command: runs a gh CLI command and returns its stdout, raising
  RuntimeError with the command and stderr attached when it fails
"""

import subprocess
from collections.abc import Sequence
from pathlib import Path


def _format_command(cmd: Sequence[str]) -> str:
    return " ".join(str(arg) for arg in cmd)


def run_command_ignore_output(cmd: Sequence[str], cwd: Path) -> int:
    """Run a command discarding its output and return the exit code.

    A missing binary is reported as exit code 127, like a shell would.
    """
    try:
        result = subprocess.run(
            list(cmd),
            cwd=cwd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except FileNotFoundError:
        return 127
    return result.returncode


def execute_gh_command(cmd: list[str], cwd: Path | None = None) -> str:
    """Execute a gh CLI command and return stdout.

    Args:
        cmd: Command and arguments to execute
        cwd: Working directory for command execution

    Returns:
        stdout from the command

    Raises:
        RuntimeError: If the command fails or gh is not installed
    """
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=True,
        )
        return result.stdout
    except subprocess.CalledProcessError as e:
        error_msg = f"Failed to execute gh command '{_format_command(cmd)}'"
        if e.stderr:
            error_msg += f": {e.stderr.strip()}"
        raise RuntimeError(error_msg) from e
    except FileNotFoundError as e:
        error_msg = f"Command not found: {_format_command(cmd)}"
        raise RuntimeError(error_msg) from e
