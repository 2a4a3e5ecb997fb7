"""Project state for a single invocation.

A Project wraps the package.json manifest and the git checkout it lives
in. The branch is read once when the project is created and never
re-queried, so every decision in one run sees the same branch.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from .git import Git
from .manifest import PackageJsonStore
from .models import DependencyInfo, VersionBump
from .versions import (
    SNAPSHOT_MARKER,
    escape_identifier,
    increment_minor,
    increment_patch,
    is_snapshot,
    release_version,
)

DependencyType = Literal[
    "dependencies", "devDependencies", "optionalDependencies", "peerDependencies"
]
DEPENDENCY_TYPES: tuple[str, ...] = (
    "dependencies",
    "devDependencies",
    "optionalDependencies",
    "peerDependencies",
)

DEFAULT_VERSION = "1.0.0-SNAPSHOT"
MAIN_BRANCH = "main"
SUPPORT_PREFIX = "support/"
HOTFIX_PREFIX = "hotfix/"


class Project:
    """The package being released.

    Attributes:
        store: Where the manifest is read from and written to.
        git: Git adapter for the checkout.
        branch: Branch name captured at construction.
    """

    def __init__(self, store: PackageJsonStore, git: Git, build_dir: str = "build"):
        self.store = store
        self.git = git
        self.build_dir = build_dir
        self._manifest: dict[str, Any] = store.read()
        self.branch: str = git.current_branch()

    @classmethod
    def for_cwd(
        cls, git: Git | None = None, root: Path | None = None, build_dir: str = "build"
    ) -> Project:
        """Load the project whose package.json is in root (default: cwd)."""
        root = root or Path.cwd()
        return cls(PackageJsonStore.for_dir(root), git or Git(root), build_dir)

    def refresh(self) -> None:
        """Re-read the manifest from disk."""
        self._manifest = self.store.read()

    @property
    def name(self) -> str:
        return self._manifest.get("name") or "unnamed-package"

    @property
    def version(self) -> str:
        return self._manifest.get("version") or DEFAULT_VERSION

    @property
    def manifest_path(self) -> Path:
        return self.store.path

    @property
    def base_path(self) -> Path:
        return self.store.path.parent

    @property
    def build_path(self) -> Path:
        return self.base_path / self.build_dir

    def update_version(self, new_version: str) -> VersionBump:
        """Set the version and write the manifest before returning."""
        bump = VersionBump(old=self.version, new=new_version)
        self._manifest["version"] = new_version
        self.store.write(self._manifest)
        return bump

    def escaped_branch(self) -> str:
        """Branch name usable as a pre-release identifier."""
        return escape_identifier(self.branch)

    def is_snapshot(self) -> bool:
        return is_snapshot(self.version)

    def is_release(self) -> bool:
        return not self.is_snapshot()

    def is_main_branch(self) -> bool:
        return self.branch == MAIN_BRANCH

    def is_support_branch(self) -> bool:
        return self.branch.startswith(SUPPORT_PREFIX)

    def is_hotfix_branch(self) -> bool:
        return self.branch.startswith(HOTFIX_PREFIX)

    def is_release_branch(self) -> bool:
        """Branches a release may be cut from."""
        return (
            self.is_main_branch() or self.is_support_branch() or self.is_hotfix_branch()
        )

    def next_release_version(self) -> str:
        return release_version(self.version)

    def next_snapshot_version(self) -> str:
        """The development version after releasing next_release_version().

        Hotfix lines advance by patch, every other branch by minor:
        "2.1.3-SNAPSHOT" → "2.1.4-SNAPSHOT" on hotfix/2.1.x,
        "2.2.0-SNAPSHOT" on main.
        """
        next_release = self.next_release_version()
        if self.is_hotfix_branch():
            return increment_patch(next_release) + SNAPSHOT_MARKER
        return increment_minor(next_release) + SNAPSHOT_MARKER

    def has_publish_config(self) -> bool:
        """True if publishConfig names a registry."""
        publish_config = self._manifest.get("publishConfig")
        return isinstance(publish_config, dict) and bool(publish_config.get("registry"))

    def has_script(self, script_name: str) -> bool:
        scripts = self._manifest.get("scripts") or {}
        return script_name in scripts

    def snapshot_dependencies(
        self, dep_type: DependencyType = "dependencies"
    ) -> list[DependencyInfo]:
        """Dependencies of one type whose range points at a snapshot.

        Returns them in declaration order; an absent section yields [].

        Raises:
            ValueError: If dep_type is not a package.json dependency section.
        """
        if dep_type not in DEPENDENCY_TYPES:
            raise ValueError(f"Unknown dependency type: {dep_type}")
        dependencies = self._manifest.get(dep_type) or {}
        return [
            DependencyInfo(name=name, version_range=version_range)
            for name, version_range in dependencies.items()
            if version_range and SNAPSHOT_MARKER in version_range
        ]

    def versions(self) -> list[str]:
        return self.git.versions()

    def versions_from_major(self, major: int) -> list[str]:
        return self.git.versions_from_major(major)

    def versions_from_minor(self, major: int, minor: int) -> list[str]:
        return self.git.versions_from_minor(major, minor)

    def has_uncommitted_changes(self) -> bool:
        return self.git.has_uncommitted_changes()
