"""Release configuration.

Configuration is resolved once per invocation and passed explicitly to the
build and publish adapters. Sources, lowest to highest precedence:

1. ``snapshot-release.toml`` in the project root (read with tomlkit)
2. ``SNAPSHOT_RELEASE_*`` environment variables
3. explicit overrides, usually CLI flags
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import tomlkit
from pydantic import BaseModel, Field, ValidationError
from tomlkit.exceptions import ParseError

from .errors import ConfigError

CONFIG_FILE = "snapshot-release.toml"
DEFAULT_BUILD_DIR = "build"

PackageManager = Literal["npm", "yarn", "pnpm"]
PACKAGE_MANAGERS: tuple[str, ...] = ("npm", "yarn", "pnpm")

# Environment variable → config field
ENV_VARS: dict[str, str] = {
    "SNAPSHOT_RELEASE_PACKAGE_MANAGER": "package_manager",
    "SNAPSHOT_RELEASE_REGISTRY": "release_registry",
    "SNAPSHOT_RELEASE_SNAPSHOT_REGISTRY": "snapshot_registry",
}


class ReleaseConfig(BaseModel):
    """Settings for building and publishing a package.

    Attributes:
        package_manager: Binary used to run scripts and publish.
        release_registry: Registry URL for release versions.
        snapshot_registry: Registry URL for snapshot versions.
        required_scripts: Scripts that must exist in package.json; a
            missing one fails the build instead of being skipped.
        build_dir: Directory removed by `clean`, relative to the project.
    """

    package_manager: PackageManager
    release_registry: str | None = None
    snapshot_registry: str | None = None
    required_scripts: list[str] = Field(default_factory=list)
    build_dir: str = DEFAULT_BUILD_DIR

    def registry_for(self, snapshot: bool) -> str | None:
        """Pick the registry for a snapshot or a release publish."""
        return self.snapshot_registry if snapshot else self.release_registry


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a snapshot-release.toml file into plain Python values.

    Keys may be written with dashes (``package-manager``); they are mapped
    onto the model's field names. A missing file yields an empty dict.
    """
    if not path.exists():
        return {}
    try:
        doc = tomlkit.parse(path.read_text())
    except ParseError as exc:
        raise ConfigError(f"Invalid {path.name}: {exc}") from exc
    return {key.replace("-", "_"): value for key, value in doc.unwrap().items()}


def load_build_dir(root: Path) -> str:
    """build_dir from the config file alone; cleaning needs no package manager."""
    return load_config_file(root / CONFIG_FILE).get("build_dir", DEFAULT_BUILD_DIR)


def load_config(
    root: Path,
    env: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ReleaseConfig:
    """Resolve the release configuration for a project.

    Args:
        root: Project root containing package.json.
        env: Environment mapping; pass os.environ from the CLI. Defaults to
             an empty mapping so nothing process-global leaks into tests.
        **overrides: Highest-precedence values. None values are ignored.

    Raises:
        ConfigError: If no package manager is configured or a value is invalid.
    """
    values = load_config_file(root / CONFIG_FILE)

    for var, field in ENV_VARS.items():
        if env and env.get(var):
            values[field] = env[var]

    values.update({k: v for k, v in overrides.items() if v is not None})

    if not values.get("package_manager"):
        raise ConfigError(
            "No package manager configured. Pass --package-manager or set "
            "SNAPSHOT_RELEASE_PACKAGE_MANAGER "
            f"(one of: {', '.join(PACKAGE_MANAGERS)})."
        )

    try:
        return ReleaseConfig(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid release configuration:\n{exc}") from exc
