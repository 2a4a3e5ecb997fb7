"""Version parsing and bumping utilities.

All versions are semver strings of the form
``major.minor.patch[-SNAPSHOT[.suffix]]``. A version is a *snapshot* when
its pre-release identifiers contain the exact token ``SNAPSHOT``; anything
else (``alpha``, ``rc.1``, a bare triple) is treated as a release.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

import semver

from .errors import InvalidVersion

SNAPSHOT = "SNAPSHOT"
SNAPSHOT_MARKER = f"-{SNAPSHOT}"

_SNAPSHOT_SUFFIX_RE = re.compile(r"-SNAPSHOT\..*")
_SNAPSHOT_TAIL_RE = re.compile(r"-SNAPSHOT.*")
_NON_IDENTIFIER_RE = re.compile(r"[^0-9A-Za-z]+")


def parse_version(version_str: str) -> semver.Version:
    """Parse a version string into a semver.Version object.

    Raises:
        InvalidVersion: If the string is not a valid semantic version.
    """
    try:
        return semver.Version.parse(version_str)
    except (TypeError, ValueError) as exc:
        raise InvalidVersion(version_str) from exc


def _try_parse(version_str: str) -> semver.Version | None:
    if not isinstance(version_str, str) or not semver.Version.is_valid(version_str):
        return None
    return semver.Version.parse(version_str)


def is_snapshot(version_str: str) -> bool:
    """Check whether a version carries the SNAPSHOT qualifier.

    Examples:
        "1.0.0-SNAPSHOT" → True
        "1.0.0-SNAPSHOT.20240101" → True
        "1.0.0-rc.1" → False
        "not-a-version" → False
    """
    version = _try_parse(version_str)
    if version is None or not version.prerelease:
        return False
    return SNAPSHOT in version.prerelease.split(".")


def normalize_snapshot_version(version_str: str) -> str:
    """Collapse any suffix after the SNAPSHOT marker.

    Examples:
        "1.0.0-SNAPSHOT.20240101" → "1.0.0-SNAPSHOT"
        "1.0.0-SNAPSHOT" → "1.0.0-SNAPSHOT"
    """
    return _SNAPSHOT_SUFFIX_RE.sub(SNAPSHOT_MARKER, version_str)


def release_version(version_str: str) -> str:
    """Strip the SNAPSHOT marker and everything after it.

    Examples:
        "1.0.0-SNAPSHOT.20240101" → "1.0.0"
        "1.0.0" → "1.0.0"
    """
    return _SNAPSHOT_TAIL_RE.sub("", version_str)


def snapshot_suffix(version_str: str, *tokens: str) -> str:
    """Append opaque identifiers after the SNAPSHOT marker.

    Any suffix already present is dropped first, so the result is always
    ``<normalized>.<token>.<token>...``. Empty tokens are skipped.

    Examples:
        snapshot_suffix("1.0.0-SNAPSHOT", "20240101120000000")
            → "1.0.0-SNAPSHOT.20240101120000000"
        snapshot_suffix("1.0.0-SNAPSHOT.old", "feature-x", "2024")
            → "1.0.0-SNAPSHOT.feature-x.2024"
    """
    parts = [normalize_snapshot_version(version_str), *(t for t in tokens if t)]
    return ".".join(parts)


def escape_identifier(text: str) -> str:
    """Make text usable as a semver pre-release identifier.

    Runs of characters outside [0-9A-Za-z] become a single "-", and leading
    or trailing dashes are removed: "feature/JIRA-12_x" → "feature-JIRA-12-x".
    Numeric identifiers may not have leading zeros, so a digits-only result
    loses them: "0815" → "815".
    """
    identifier = _NON_IDENTIFIER_RE.sub("-", text).strip("-")
    if identifier.isdigit():
        return identifier.lstrip("0") or "0"
    return identifier


def sort_versions(versions: Iterable[str]) -> list[str]:
    """Sort version strings by semver precedence, lowest first.

    Strings that are not valid semver are dropped. Unlike
    ``git tag --sort=v:refname``, pre-releases sort before their release:
    ["1.2.0", "1.2.0-rc.1", "1.10.0", "v2"] → ["1.2.0-rc.1", "1.2.0", "1.10.0"]
    """
    valid = [v for v in versions if _try_parse(v) is not None]
    return sorted(valid, key=semver.Version.parse)


def increment_minor(version_str: str) -> str:
    """Increment the minor version, dropping patch and any qualifier.

    Unparsable input falls back to major 1 / minor 0, so the result is
    "1.1.0". This mirrors how snapshot lines have always been advanced and
    is kept on purpose; comparisons never fall back (see compare_gte).

    Examples:
        "1.5.3" → "1.6.0"
        "1.5.0-SNAPSHOT" → "1.6.0"
        "garbage" → "1.1.0"
    """
    version = _try_parse(version_str)
    if version is None:
        return "1.1.0"
    return str(version.bump_minor())


def increment_patch(version_str: str) -> str:
    """Increment the patch version, dropping any qualifier.

    Unparsable input falls back to "1.0.1" (see increment_minor).

    Examples:
        "1.5.3" → "1.5.4"
        "2.1.2" → "2.1.3"
    """
    version = _try_parse(version_str)
    if version is None:
        return "1.0.1"
    return str(version.bump_patch())


def compare_gte(version_a: str, version_b: str) -> bool:
    """Return True if version_a >= version_b by semver precedence.

    Raises:
        InvalidVersion: If either side cannot be parsed.
    """
    return parse_version(version_a) >= parse_version(version_b)


def compare_gt(version_a: str, version_b: str) -> bool:
    """Return True if version_a > version_b by semver precedence.

    Raises:
        InvalidVersion: If either side cannot be parsed.
    """
    return parse_version(version_a) > parse_version(version_b)
