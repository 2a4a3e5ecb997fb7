"""package.json reading and writing.

The manifest is kept as a plain dict so fields this tool does not know
about survive a rewrite untouched, in their original order.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .errors import ManifestError

MANIFEST_FILE = "package.json"


class PackageJsonStore:
    """Loads and saves a package.json file.

    write() returns only after the file is on disk; later release steps
    (tagging, publishing) read the version back from it.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    @classmethod
    def for_dir(cls, root: Path) -> PackageJsonStore:
        return cls(root / MANIFEST_FILE)

    def read(self) -> dict[str, Any]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ManifestError(f"No {self.path.name} found at {self.path}") from exc
        except json.JSONDecodeError as exc:
            raise ManifestError(f"Invalid JSON in {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ManifestError(f"{self.path} must contain a JSON object")
        return data

    def write(self, manifest: dict[str, Any]) -> None:
        # Two-space indent plus trailing newline, as npm writes it
        content = json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"
        self.path.write_text(content, encoding="utf-8")
