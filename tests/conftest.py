"""Shared test fixtures."""

from __future__ import annotations

import json
from collections.abc import Callable
from fnmatch import fnmatch
from pathlib import Path
from typing import Any

import pytest

from snapshot_release.config import ReleaseConfig
from snapshot_release.manifest import PackageJsonStore
from snapshot_release.project import Project
from snapshot_release.versions import sort_versions


class FakeGit:
    """In-memory stand-in for snapshot_release.git.Git.

    Tag listings are sorted by semver like the real adapter. Side effects
    are recorded in `events` so tests can check ordering across
    collaborators.
    """

    def __init__(
        self,
        branch: str = "main",
        tags: list[str] | None = None,
        changed: list[str] | None = None,
        events: list[tuple[Any, ...]] | None = None,
        repository: bool = True,
    ) -> None:
        self.branch = branch
        self.repository = repository
        self.tags = list(tags or [])
        self.changed = list(changed or [])
        self.events = events if events is not None else []

    def is_git_repository(self) -> bool:
        return self.repository

    def current_branch(self) -> str:
        return self.branch

    def has_uncommitted_changes(self) -> bool:
        return bool(self.changed)

    def changed_tracked_files(self) -> list[str]:
        return list(self.changed)

    def tags_matching(self, pattern: str) -> list[str]:
        return sort_versions(t for t in self.tags if fnmatch(t, pattern))

    def versions(self) -> list[str]:
        return self.tags_matching("[0-9]*.[0-9]*.[0-9]*")

    def versions_from_major(self, major: int) -> list[str]:
        return self.tags_matching(f"{major}.[0-9]*.[0-9]*")

    def versions_from_minor(self, major: int, minor: int) -> list[str]:
        return self.tags_matching(f"{major}.{minor}.[0-9]*")

    def create_branch(self, name: str, start_point: str) -> None:
        self.events.append(("create_branch", name, start_point))

    def create_tag(self, name: str, message: str) -> None:
        self.tags.append(name)
        self.events.append(("tag", name, message))

    def commit(
        self, path: str, commit_type: str, message: str, skip_ci: bool = True
    ) -> None:
        self.events.append(("commit", path, commit_type, message))

    def push(self) -> None:
        self.events.append(("push",))

    def push_new_branch(self, name: str) -> None:
        self.events.append(("push_new_branch", name))


class FakeBuilder:
    """Records build phases instead of running package scripts."""

    def __init__(self, events: list[tuple[Any, ...]]) -> None:
        self.events = events

    def format_manifest(self) -> None:
        self.events.append(("format",))

    def test(self) -> None:
        self.events.append(("test",))

    def verify(self) -> None:
        self.events.append(("verify",))

    def package(self) -> None:
        self.events.append(("package",))


class FakePublisher:
    """Records the manifest version on disk at publish time."""

    def __init__(self, project: Project, events: list[tuple[Any, ...]]) -> None:
        self.project = project
        self.events = events

    def publish(self) -> str:
        on_disk = json.loads(self.project.manifest_path.read_text())["version"]
        self.events.append(("publish", on_disk))
        return "latest"


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a package.json into tmp_path."""

    def _write(version: str = "1.5.0-SNAPSHOT", **fields: Any) -> Path:
        data = {"name": "@acme/widget", "version": version, **fields}
        path = tmp_path / "package.json"
        path.write_text(json.dumps(data, indent=2) + "\n")
        return path

    return _write


@pytest.fixture
def events() -> list[tuple[Any, ...]]:
    return []


@pytest.fixture
def make_project(
    tmp_path: Path,
    write_manifest: Callable[..., Path],
    events: list[tuple[Any, ...]],
) -> Callable[..., tuple[Project, FakeGit]]:
    """Factory building a Project on a tmp package.json and a FakeGit."""

    def _make(
        version: str = "1.5.0-SNAPSHOT",
        branch: str = "main",
        tags: list[str] | None = None,
        changed: list[str] | None = None,
        **fields: Any,
    ) -> tuple[Project, FakeGit]:
        write_manifest(version, **fields)
        git = FakeGit(branch=branch, tags=tags, changed=changed, events=events)
        project = Project(PackageJsonStore.for_dir(tmp_path), git)
        return project, git

    return _make


@pytest.fixture
def npm_config() -> ReleaseConfig:
    return ReleaseConfig(
        package_manager="npm",
        release_registry="https://registry.example.com/releases",
        snapshot_registry="https://registry.example.com/snapshots",
    )
