"""Release verification report.

Answers "could this project be released right now?": it needs a
publishConfig with a registry and no dependency pinned to a snapshot.
Nothing is cached; every call looks at the project as it is.
"""

from __future__ import annotations

import json

from .models import DependencyInfo
from .project import Project

REPORTED_TYPES = ("dependencies", "devDependencies", "peerDependencies")


class VerificationReport:
    """Releasability of a project, derived from its current manifest.

    Attributes:
        project: The project being checked; read on every call.
    """

    def __init__(self, project: Project) -> None:
        self.project = project

    def dependency_info(self) -> dict[str, list[DependencyInfo]]:
        """Snapshot dependencies keyed by package.json section."""
        return {
            dep_type: self.project.snapshot_dependencies(dep_type)
            for dep_type in REPORTED_TYPES
        }

    def has_snapshot_dependencies(self) -> bool:
        return any(self.dependency_info().values())

    def is_publishable(self) -> bool:
        return self.project.has_publish_config()

    def is_releasable(self) -> bool:
        return self.is_publishable() and not self.has_snapshot_dependencies()

    def to_json(self) -> str:
        data: dict[str, object] = {
            dep_type: [
                {"name": dep.name, "versionRange": dep.version_range} for dep in deps
            ]
            for dep_type, deps in self.dependency_info().items()
        }
        data["isPublishable"] = self.is_publishable()
        data["isReleasable"] = self.is_releasable()
        return json.dumps(data, indent=2)

    def __str__(self) -> str:
        if not self.is_publishable():
            return "Project is missing a publishConfig. Please define a registry."

        if self.has_snapshot_dependencies():
            sections: list[str] = []
            for dep_type, deps in self.dependency_info().items():
                if not deps:
                    continue
                entries = "\n".join(f"\t{d.name} - {d.version_range}" for d in deps)
                sections.append(f"{dep_type}:\n{entries}")
            return "Snapshot-Version detected:\n\n" + "\n".join(sections)

        return "Project is releasable."
