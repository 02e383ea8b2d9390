"""
Version grammar for GitFlow version strings.

Three grammars are recognised, tried in this order:

1. Release candidate: ``MAJOR.MINOR.PATCH-RC.N`` (N starts at 1)
2. Snapshot: ``MAJOR.MINOR.PATCH-SNAPSHOT``
3. Stable: ``MAJOR.MINOR.PATCH``

The stable grammar is tried last and every pattern is anchored at both ends, so a
stable-looking prefix never matches inside a suffixed string. Numbers with leading
zeros are rejected so that ``format_version(parse_version(text)) == text`` holds for
every accepted ``text``.
"""

import re
from dataclasses import dataclass, replace
from typing import Optional, Union

from gitflow_version.constants import RC_MARKER, SNAPSHOT_SUFFIX

from .exceptions import VersionParseError

_NUMBER = r"(0|[1-9]\d*)"
_CORE = rf"{_NUMBER}\.{_NUMBER}\.{_NUMBER}"

_RC_PATTERN = re.compile(rf"{_CORE}{re.escape(RC_MARKER)}([1-9]\d*)")
_SNAPSHOT_PATTERN = re.compile(rf"{_CORE}{re.escape(SNAPSHOT_SUFFIX)}")
_STABLE_PATTERN = re.compile(_CORE)


@dataclass(frozen=True)
class Snapshot:
    """Unstable, in-progress build qualifier."""

    def __str__(self) -> str:
        return SNAPSHOT_SUFFIX


@dataclass(frozen=True)
class ReleaseCandidate:
    """Numbered pre-release qualifier."""

    number: int

    def __post_init__(self):
        if self.number < 1:
            raise ValueError(f"Release candidate index must be >= 1: {self.number}")

    def __str__(self) -> str:
        return f"{RC_MARKER}{self.number}"


Qualifier = Union[Snapshot, ReleaseCandidate]


@dataclass(frozen=True)
class SemanticVersion:
    """
    A MAJOR.MINOR.PATCH version with an optional qualifier.

    Instances are immutable; the helper methods return new versions.
    """

    major: int
    minor: int
    patch: int
    qualifier: Optional[Qualifier] = None

    def __post_init__(self):
        for name in ("major", "minor", "patch"):
            if getattr(self, name) < 0:
                raise ValueError(f"Version component {name} must be non-negative")

    @property
    def is_stable(self) -> bool:
        return self.qualifier is None

    @property
    def is_snapshot(self) -> bool:
        return isinstance(self.qualifier, Snapshot)

    @property
    def is_release_candidate(self) -> bool:
        return isinstance(self.qualifier, ReleaseCandidate)

    @property
    def rc_number(self) -> Optional[int]:
        if isinstance(self.qualifier, ReleaseCandidate):
            return self.qualifier.number
        return None

    def stable(self) -> "SemanticVersion":
        """Return this version with its qualifier removed."""
        return replace(self, qualifier=None)

    def __str__(self) -> str:
        return format_version(self)


def parse_version(version_string: str) -> SemanticVersion:
    """
    Parse a version string into a SemanticVersion.

    Args:
        version_string: Version text, e.g. "1.5.0-RC.2"

    Returns:
        The parsed SemanticVersion

    Raises:
        VersionParseError: If the text matches none of the grammars
    """
    text = str(version_string)

    match = _RC_PATTERN.fullmatch(text)
    if match:
        major, minor, patch, rc = (int(g) for g in match.groups())
        return SemanticVersion(major, minor, patch, ReleaseCandidate(rc))

    match = _SNAPSHOT_PATTERN.fullmatch(text)
    if match:
        major, minor, patch = (int(g) for g in match.groups())
        return SemanticVersion(major, minor, patch, Snapshot())

    match = _STABLE_PATTERN.fullmatch(text)
    if match:
        major, minor, patch = (int(g) for g in match.groups())
        return SemanticVersion(major, minor, patch)

    raise VersionParseError(text)


def format_version(version: SemanticVersion) -> str:
    """Render a SemanticVersion in its canonical textual form."""
    core = f"{version.major}.{version.minor}.{version.patch}"
    if version.qualifier is None:
        return core
    return f"{core}{version.qualifier}"


def strip_snapshot(version_string: str) -> str:
    """Remove a trailing snapshot suffix from a version string, if present."""
    if version_string.endswith(SNAPSHOT_SUFFIX):
        return version_string[: -len(SNAPSHOT_SUFFIX)]
    return version_string
