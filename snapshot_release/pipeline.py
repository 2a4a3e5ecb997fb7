"""Release workflows: release → hotfix → verify → clean.

The release sequence is:
1. Validate: snapshot version, releasable branch, clean working tree
2. Write the release version to package.json
3. Build: test → verify → package scripts
4. Commit the version and tag it
5. Publish to the registry
6. Write the next snapshot version to package.json
7. Commit and push the branch and tags

Every step has a side effect the next one depends on, so steps run
strictly in order and the first failure stops the run. Nothing that
already happened is rolled back: a failure after step 2 leaves the bumped
manifest (and possibly a commit or tag) behind for manual cleanup.
"""

from __future__ import annotations

import shutil

from .build import BuildProvider
from .errors import (
    IneligibleBranch,
    InvalidVersion,
    NoPriorRelease,
    NotARelease,
    NotSnapshot,
    UncommittedChanges,
)
from .git import Git
from .manifest import MANIFEST_FILE
from .project import HOTFIX_PREFIX, Project
from .publish import NodePublisher
from .report import VerificationReport
from .shell import step
from .versions import SNAPSHOT_MARKER, increment_patch

COMMIT_TYPE = "ci(release)"


def verify_release(project: Project) -> VerificationReport:
    """Generate a fresh verification report for the project."""
    return VerificationReport(project)


def assert_no_uncommitted_changes(git: Git, msg: str) -> None:
    """Raise UncommittedChanges listing the modified tracked files, if any."""
    if git.has_uncommitted_changes():
        raise UncommittedChanges(msg, git.changed_tracked_files())


def check_release_preconditions(project: Project, git: Git) -> None:
    """Validate everything a release needs before anything is written.

    Raises:
        NotSnapshot: If the current version is already a release.
        IneligibleBranch: If not on main, support/* or hotfix/*.
        UncommittedChanges: If tracked files are modified.
    """
    step("Checking release preconditions")
    if not project.is_snapshot():
        raise NotSnapshot(project.version)
    if not project.is_release_branch():
        raise IneligibleBranch(project.branch)
    assert_no_uncommitted_changes(
        git, "The release can only be created when all changes are committed."
    )
    print(f"  {project.name} {project.version} on {project.branch}")


def set_version(project: Project, builder: BuildProvider, version: str) -> None:
    """Persist a new version and let the project reformat its manifest."""
    bump = project.update_version(version)
    builder.format_manifest()
    print(f"  {project.name}: {bump}")


def commit_version(git: Git, version: str) -> None:
    git.commit(
        MANIFEST_FILE, COMMIT_TYPE, f"updating {MANIFEST_FILE} set version to {version}"
    )


def build_package(builder: BuildProvider) -> None:
    """Run the build scripts in their fixed order."""
    step("Building package")
    builder.test()
    builder.verify()
    builder.package()


def tag_release(git: Git, version: str) -> None:
    step(f"Tagging release {version}")
    commit_version(git, version)
    git.create_tag(version, f"Release Version {version}")
    print(f"  {version}")


def run_release(
    project: Project,
    git: Git,
    builder: BuildProvider,
    publisher: NodePublisher,
) -> str:
    """Execute the full release sequence.

    Args:
        project: Project on a snapshot version; its manifest is rewritten.
        git: Git adapter for the checkout.
        builder: Runs the package scripts.
        publisher: Publishes the release and picks the distribution tag.

    Returns:
        The released version.
    """
    check_release_preconditions(project, git)

    release_version = project.next_release_version()
    step(f"Setting release version {release_version}")
    set_version(project, builder, release_version)

    build_package(builder)
    tag_release(git, release_version)
    publisher.publish()

    next_snapshot = project.next_snapshot_version()
    step(f"Setting next snapshot version {next_snapshot}")
    set_version(project, builder, next_snapshot)
    commit_version(git, next_snapshot)

    step("Pushing commits and tags")
    git.push()

    print(f"\n{'=' * 60}\nReleased {release_version}\n{'=' * 60}")
    return release_version


def parse_hotfix_line(tag: str) -> tuple[int, int]:
    """Parse "major.minor" (extra components are ignored): "2.1" → (2, 1).

    Raises:
        InvalidVersion: If major or minor is not a number.
    """
    parts = tag.strip().split(".")
    if len(parts) < 2 or not (parts[0].isdigit() and parts[1].isdigit()):
        raise InvalidVersion(tag)
    return int(parts[0]), int(parts[1])


def start_hotfix(project: Project, git: Git, builder: BuildProvider, tag: str) -> str:
    """Create a hotfix/<major>.<minor>.x branch from the last release of a line.

    Must be run on a checked-out release (a tag), not on a snapshot.

    Args:
        project: Project checked out at a release version.
        git: Git adapter for the checkout.
        builder: Used to reformat the manifest after the version change.
        tag: The release line to patch, e.g. "2.1".

    Returns:
        The hotfix snapshot version, e.g. "2.1.3-SNAPSHOT".

    Raises:
        NotARelease: If the current version is a snapshot.
        InvalidVersion: If tag is not "major.minor".
        NoPriorRelease: If the line has no release tags.
    """
    if not project.is_release():
        raise NotARelease(project.version)

    major, minor = parse_hotfix_line(tag)
    step(f"Starting hotfix for {major}.{minor}")

    releases = project.versions_from_minor(major, minor)
    if not releases:
        raise NoPriorRelease(f"{major}.{minor}")

    base_version = releases[-1]
    hotfix_version = increment_patch(base_version) + SNAPSHOT_MARKER
    hotfix_branch = f"{HOTFIX_PREFIX}{major}.{minor}.x"
    print(f"  Base release: {base_version}")
    print(f"  Hotfix snapshot version: {hotfix_version}")

    git.create_branch(hotfix_branch, base_version)
    # The checkout now holds the base release's package.json
    project.refresh()
    set_version(project, builder, hotfix_version)
    commit_version(git, hotfix_version)
    git.push_new_branch(hotfix_branch)

    print(f"  Pushed {hotfix_branch}")
    return hotfix_version


def clean(project: Project) -> None:
    """Delete the project's build directory."""
    build_path = project.build_path
    if not build_path.exists():
        print(f"  Nothing to clean at {build_path}")
        return
    shutil.rmtree(build_path)
    print(f"  Deleted: {build_path}")
