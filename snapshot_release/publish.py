"""Publishing to the package registry.

Two concerns live here: choosing the distribution tag ("latest", "next",
...) a published version is exposed under, and running the package
manager's publish command.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime, timezone

from .config import ReleaseConfig
from .errors import PublishFailed
from .project import Project
from .shell import run, step
from .versions import compare_gte, snapshot_suffix

NO_RELEASE_VERSION = "0.0.0"

# Extra flags each package manager needs for a non-interactive publish
PUBLISH_FLAGS: dict[str, tuple[str, ...]] = {
    "npm": ("--ignore-scripts", "--non-interactive"),
    "yarn": ("--ignore-scripts", "--non-interactive"),
    "pnpm": ("--ignore-scripts", "--no-git-checks"),
}


def publish_tag(
    version: str, last_release: str, *, snapshot: bool, hotfix_branch: bool
) -> str:
    """Choose the distribution tag for a version about to be published.

    Only the newest version line may move "latest" or "next"; publishing
    an older line (a patch to 1.2.x after 1.3.0 shipped) lands on
    "release" or "snapshot" instead. Hotfix branches always use "hotfix".

    Args:
        version: Version being published (without any snapshot suffix).
        last_release: Highest existing release tag, or "0.0.0".
        snapshot: Whether the project is on a snapshot version.
        hotfix_branch: Whether the current branch is a hotfix/* branch.

    Raises:
        InvalidVersion: If either version cannot be parsed.
    """
    newest = compare_gte(version, last_release)
    if snapshot:
        return "next" if newest else "snapshot"
    if hotfix_branch:
        return "hotfix"
    return "latest" if newest else "release"


def build_timestamp(now: datetime) -> str:
    """UTC timestamp with millisecond precision: 20240131235959123."""
    now = now.astimezone(timezone.utc)
    return now.strftime("%Y%m%d%H%M%S") + f"{now.microsecond // 1000:03d}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NodePublisher:
    """Publishes the project with npm, yarn or pnpm.

    Snapshot versions get a unique suffix for the duration of the publish
    (so repeated snapshot publishes never collide); the original version is
    written back afterwards whether or not the publish succeeded.
    """

    def __init__(
        self,
        project: Project,
        config: ReleaseConfig,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.project = project
        self.config = config
        self.now = now

    def last_release_version(self) -> str:
        versions = self.project.versions()
        return versions[-1] if versions else NO_RELEASE_VERSION

    def snapshot_publish_version(self, version: str) -> str:
        """Version used on the registry for a snapshot publish.

        Feature branches add their escaped name so snapshots of different
        branches can be told apart: 1.2.0-SNAPSHOT.feature-x.20240131235959123.
        """
        branch_token = ""
        if not self.project.is_release_branch() and self.project.branch != "HEAD":
            branch_token = self.project.escaped_branch()
        return snapshot_suffix(version, branch_token, build_timestamp(self.now()))

    def publish_args(self, tag: str, registry: str | None) -> list[str]:
        args = list(PUBLISH_FLAGS.get(self.config.package_manager, ()))
        if registry:
            args += ["--registry", registry]
        args += ["--tag", tag]
        return args

    def publish(self) -> str:
        """Publish the project and return the distribution tag used.

        Raises:
            PublishFailed: If the package manager exits non-zero or cannot
                be started.
        """
        step(f"Publishing {self.project.name}")

        snapshot = self.project.is_snapshot()
        registry = self.config.registry_for(snapshot)
        version = self.project.version

        if snapshot:
            bump = self.project.update_version(self.snapshot_publish_version(version))
            print(f"  Snapshot version: {bump}")

        try:
            last_release = self.last_release_version()
            print(f"  Last release version: {last_release} Current version: {version}")

            tag = publish_tag(
                version,
                last_release,
                snapshot=snapshot,
                hotfix_branch=self.project.is_hotfix_branch(),
            )
            print(f"  Use tag: {tag}")

            args = self.publish_args(tag, registry)
            print(f"  {self.config.package_manager} publish {' '.join(args)}")
            try:
                result = run(
                    self.config.package_manager,
                    "publish",
                    *args,
                    check=False,
                    cwd=self.project.base_path,
                )
            except OSError as exc:
                raise PublishFailed(self.project.version, error=str(exc)) from exc
            if result.returncode != 0:
                raise PublishFailed(self.project.version, result.returncode)
        finally:
            if self.project.version != version:
                self.project.update_version(version)

        return tag
