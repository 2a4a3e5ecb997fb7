"""Shell and git utilities.

Provides simple wrappers around subprocess calls for running shell commands
and git operations, plus output formatting helpers.
"""

from __future__ import annotations

import subprocess
from pathlib import Path


def git(*args: str, check: bool = True, cwd: Path | None = None) -> str:
    """Run a git command and return stdout.

    Args:
        *args: Arguments to pass to git (e.g., "status", "--short").
        check: If True (default), raise on non-zero exit. Set to False
               for commands that may legitimately fail (e.g., tag lookup).
        cwd: Directory to run in; defaults to the current directory.

    Returns:
        Stripped stdout from the git command.

    Raises:
        subprocess.CalledProcessError: If check is True and git fails.
    """
    result = subprocess.run(
        ["git", *args], capture_output=True, text=True, check=check, cwd=cwd
    )
    return result.stdout.strip()


def run(
    *args: str, check: bool = True, cwd: Path | None = None
) -> subprocess.CompletedProcess[bytes]:
    """Run an arbitrary shell command.

    Unlike git(), this doesn't capture output - it streams directly to
    the terminal so users can see test and publish progress.

    Args:
        *args: Command and arguments (e.g., "npm", "run", "test").
        check: If True (default), raise on non-zero exit.
        cwd: Directory to run in; defaults to the current directory.

    Returns:
        CompletedProcess with returncode for checking success.
    """
    return subprocess.run(args, check=check, cwd=cwd)


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate the phases of the release workflow in terminal output.
    """
    print(f"\n{'─' * 60}\n{msg}\n{'─' * 60}")


def lines(output: str) -> list[str]:
    """Split command output into stripped, non-empty lines."""
    return [line.strip() for line in output.splitlines() if line.strip()]
