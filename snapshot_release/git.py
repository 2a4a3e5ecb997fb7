"""Git adapter used by the release and hotfix workflows.

Release tags are bare versions ("1.5.0"). Tag listings always fetch from
the remote first and come back sorted ascending by semver precedence.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from .shell import git, lines
from .versions import sort_versions


class Git:
    """Thin wrapper over the git binary for one working tree."""

    def __init__(self, cwd: Path | None = None) -> None:
        self.cwd = cwd

    def _git(self, *args: str, check: bool = True) -> str:
        return git(*args, check=check, cwd=self.cwd)

    def is_git_repository(self) -> bool:
        try:
            self._git("rev-parse", "--git-dir")
        except subprocess.CalledProcessError:
            return False
        return True

    def current_branch(self) -> str:
        return self._git("rev-parse", "--abbrev-ref", "HEAD")

    def update_tags(self) -> None:
        self._git("fetch", "--tags")

    def tags_matching(self, pattern: str) -> list[str]:
        """List version tags matching a glob, lowest version first.

        Tags that are not valid semver are left out.
        """
        self.update_tags()
        return sort_versions(lines(self._git("tag", "-l", pattern)))

    def versions(self) -> list[str]:
        """All release tags."""
        return self.tags_matching("[0-9]*.[0-9]*.[0-9]*")

    def versions_from_major(self, major: int) -> list[str]:
        return self.tags_matching(f"{major}.[0-9]*.[0-9]*")

    def versions_from_minor(self, major: int, minor: int) -> list[str]:
        return self.tags_matching(f"{major}.{minor}.[0-9]*")

    def has_uncommitted_changes(self) -> bool:
        """True if any tracked file is modified; untracked files are ignored."""
        return bool(self._git("status", "--short", "--untracked-files=no"))

    def changed_tracked_files(self) -> list[str]:
        """Porcelain status lines for modified tracked files, e.g. "M a.txt"."""
        return lines(self._git("status", "--porcelain", "--untracked-files=no"))

    def create_branch(self, name: str, start_point: str) -> None:
        self._git("checkout", "-B", name, start_point)

    def create_tag(self, name: str, message: str) -> None:
        self._git("tag", "-a", name, "-m", message)

    def commit(
        self, path: str, commit_type: str, message: str, skip_ci: bool = True
    ) -> None:
        """Stage a single path and commit it as "<type>: <message>".

        With skip_ci the message gets a "[skip ci]" marker so the version
        bump commits don't trigger another pipeline run.
        """
        subject = f"{commit_type}: {message}"
        if skip_ci:
            subject += " [skip ci]"
        self._git("add", path)
        self._git("commit", "-m", subject)

    def push(self) -> None:
        """Push the current branch and all tags."""
        self._git("push")
        self._git("push", "--tags")

    def push_new_branch(self, name: str) -> None:
        self._git("push", "origin", name)
