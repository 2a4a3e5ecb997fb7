"""Exceptions raised by the release and hotfix workflows.

Every error the workflows raise on purpose derives from ReleaseError, so
the CLI can render them uniformly. Precondition errors are raised before
anything is written to disk or git.
"""

from __future__ import annotations

from collections.abc import Sequence


class ReleaseError(Exception):
    """Base class for all snapshot-release errors."""


class ConfigError(ReleaseError):
    """The release configuration is missing or invalid."""


class ManifestError(ReleaseError):
    """The package manifest cannot be read or written."""


class InvalidVersion(ReleaseError):
    """A string is not a valid semantic version."""

    def __init__(self, version: str) -> None:
        super().__init__(f"'{version}' is not a valid semver version.")
        self.version = version


class NotSnapshot(ReleaseError):
    """A release was requested but the current version is not a snapshot."""

    def __init__(self, version: str) -> None:
        super().__init__(f"The current version is not a SNAPSHOT version: {version}")
        self.version = version


class NotARelease(ReleaseError):
    """A hotfix was requested but the checkout is not a release version."""

    def __init__(self, version: str) -> None:
        super().__init__(
            "A hotfix can only be created on the basis of a release. "
            "The current Git state is not a checked out tag. "
            f"Current version: {version}"
        )
        self.version = version


class IneligibleBranch(ReleaseError):
    """Releases are only allowed from main, support/* and hotfix/*."""

    def __init__(self, branch: str) -> None:
        super().__init__(f"No release can be created with branch '{branch}'.")
        self.branch = branch


class UncommittedChanges(ReleaseError):
    """The working tree has modified tracked files."""

    def __init__(self, message: str, files: Sequence[str]) -> None:
        self.files = list(files)
        super().__init__(message + "\nUncommitted changes:\n" + "\n".join(self.files))


class NoPriorRelease(ReleaseError):
    """No release tag exists for the requested hotfix line."""

    def __init__(self, line: str) -> None:
        super().__init__(
            f"There is no release yet for which a hotfix can be created ({line})."
        )
        self.line = line


class BuildStepFailed(ReleaseError):
    """A package-manager script failed, could not be started, or is missing."""

    def __init__(
        self, script: str, returncode: int | None = None, error: str | None = None
    ) -> None:
        if error is not None:
            msg = f'Script "{script}" could not be run: {error}'
        elif returncode is None:
            msg = f'Required script "{script}" is not defined in package.json'
        else:
            msg = f'Script "{script}" failed with exit code {returncode}'
        super().__init__(msg)
        self.script = script
        self.returncode = returncode


class PublishFailed(ReleaseError):
    """The registry rejected the publish or the package manager could not start."""

    def __init__(
        self, version: str, returncode: int | None = None, error: str | None = None
    ) -> None:
        if error is not None:
            msg = f"Publishing {version} failed: {error}"
        else:
            msg = f"Publishing {version} failed with exit code {returncode}"
        super().__init__(msg)
        self.version = version
        self.returncode = returncode


class NotAGitRepository(ReleaseError):
    """The project directory is not inside a git working tree."""

    def __init__(self, path: object) -> None:
        super().__init__(f"Not a git repository: {path}")
        self.path = path
