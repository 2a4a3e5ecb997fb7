"""Data models for snapshot-release.

These Pydantic models represent the small value objects passed between the
project, the verification report and the workflows.
"""

from __future__ import annotations

from pydantic import BaseModel


class DependencyInfo(BaseModel):
    """A dependency entry from package.json.

    Attributes:
        name: Package name as declared in the manifest.
        version_range: The declared range (e.g. "^1.2.0-SNAPSHOT").
    """

    name: str
    version_range: str


class VersionBump(BaseModel):
    """Records a version change written to the manifest.

    Used to render commit messages and console output for each bump.

    Attributes:
        old: The version before bumping.
        new: The version after bumping.
    """

    old: str
    new: str

    def __str__(self) -> str:
        return f"{self.old} → {self.new}"
