"""
Version artifact storage.

A VersionStore reads the version field of one artifact file, writes a new value and
immediately re-reads the file to verify that exactly the requested value was stored.

Two artifact kinds are supported:

- PomRevisionStore: the ``<revision>`` property of a Maven ``pom.xml``. Writing is
  delegated to a revision writer, by default Maven's own ``versions:set-property``.
- PackageJsonStore: the top-level ``"version"`` field of an npm ``package.json``,
  rewritten in place.

Only the first occurrence of a field is ever read or replaced.
"""

import json
import logging
import re
import shlex
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from gitflow_version.constants import (
    LOGGER_NAME,
    PACKAGE_VERSION_FIELD,
    REVISION_FIELD,
)

from .exceptions import (
    ArtifactNotFoundError,
    BuildToolError,
    NotFoundFailure,
    VersioningError,
    VersionParseError,
    WriteVerificationError,
)
from .version import SemanticVersion, format_version, parse_version

logger = logging.getLogger(LOGGER_NAME)


class ArtifactKind(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class FieldLocation:
    """Position of a field value inside an artifact's text."""

    value: str
    start: int
    end: int
    line_number: int


def _line_number(content: str, offset: int) -> int:
    return content.count("\n", 0, offset) + 1


def _write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise VersioningError(f"Could not write {path}: {e}") from e


def _nesting_depth(content: str, offset: int) -> int:
    """
    Count the open objects and arrays enclosing ``offset`` in JSON text.

    Returns -1 if ``offset`` lies inside a string literal.
    """
    depth = 0
    in_string = False
    escaped = False
    for char in content[:offset]:
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
    return -1 if in_string else depth


class VersionStore(ABC):
    """
    Base class for reading and writing the version field of an artifact file.

    Args:
        path: Path of the artifact file
    """

    kind: ArtifactKind
    field: str

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read_text(self) -> str:
        if not self.path.is_file():
            raise ArtifactNotFoundError(self.path, NotFoundFailure.MISSING_ARTIFACT)
        try:
            return self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise VersioningError(f"Could not read {self.path}: {e}") from e

    @abstractmethod
    def locate(self, content: str) -> Optional[FieldLocation]:
        """Find the version field in ``content``, or None if absent."""

    def read_location(self) -> FieldLocation:
        location = self.locate(self.read_text())
        if location is None:
            raise ArtifactNotFoundError(
                self.path, NotFoundFailure.MISSING_FIELD, field=self.field
            )
        return location

    def read_raw(self) -> str:
        """
        Read the raw text of the version field.

        Raises:
            ArtifactNotFoundError: If the file or the field is missing
        """
        return self.read_location().value

    def read(self) -> SemanticVersion:
        """
        Read and parse the version field.

        Raises:
            ArtifactNotFoundError: If the file or the field is missing
            VersionParseError: If the stored value is not a valid version
        """
        location = self.read_location()
        try:
            return parse_version(location.value)
        except VersionParseError as e:
            raise VersionParseError(
                e.version_string, source=self.path, line_number=location.line_number
            ) from None

    @abstractmethod
    def persist(self, new_value: str) -> None:
        """Store ``new_value`` in the artifact without verification."""

    @abstractmethod
    def describe_write(self, old_value: str, new_value: str) -> str:
        """Describe what ``write`` would do, for dry runs."""

    def write(self, new_version: SemanticVersion) -> str:
        """
        Write a new version and verify it by reading it back.

        Args:
            new_version: Version to store

        Returns:
            The value read back from the artifact

        Raises:
            WriteVerificationError: If the stored value differs from the requested one
        """
        expected = format_version(new_version)
        self.persist(expected)

        try:
            actual: Optional[str] = self.read_raw()
        except ArtifactNotFoundError:
            actual = None
        if actual != expected:
            raise WriteVerificationError(self.path, expected, actual)
        return actual


class RevisionWriter(ABC):
    """Strategy that stores a new revision value in a pom file."""

    @abstractmethod
    def write(self, pom: Path, new_value: str) -> None:
        pass

    @abstractmethod
    def describe(self, pom: Path, new_value: str) -> str:
        pass


class MavenRevisionWriter(RevisionWriter):
    """
    Sets the revision property with the Maven versions plugin.

    Args:
        quiet: Run Maven in quiet batch mode and capture its output
        executable: Maven executable name or path
    """

    def __init__(self, quiet: bool = False, executable: str = "mvn"):
        self.quiet = quiet
        self.executable = executable

    def command(self, pom: Path, new_value: str) -> List[str]:
        cmd = [
            self.executable,
            "-f",
            str(pom),
            "versions:set-property",
            f"-Dproperty={REVISION_FIELD}",
            f"-DnewVersion={new_value}",
            "-DgenerateBackupPoms=false",
        ]
        if self.quiet:
            cmd += ["-q", "-B"]
        return cmd

    def describe(self, pom: Path, new_value: str) -> str:
        return f"Command: {shlex.join(self.command(pom, new_value))}"

    def write(self, pom: Path, new_value: str) -> None:
        cmd = self.command(pom, new_value)
        logger.debug(f"🔍 Running: {shlex.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=pom.parent,
                stdout=subprocess.PIPE if self.quiet else None,
                stderr=subprocess.STDOUT if self.quiet else None,
                text=True,
            )
        except FileNotFoundError as e:
            raise BuildToolError(cmd, 127, str(e)) from e

        if result.returncode != 0:
            raise BuildToolError(cmd, result.returncode, result.stdout or "")


class InPlaceRevisionWriter(RevisionWriter):
    """Rewrites the first ``<revision>`` element directly."""

    def describe(self, pom: Path, new_value: str) -> str:
        return f"Rewrite <{REVISION_FIELD}> in {pom} to {new_value}"

    def write(self, pom: Path, new_value: str) -> None:
        store = PomRevisionStore(pom)
        content = store.read_text()
        location = store.locate(content)
        if location is None:
            raise ArtifactNotFoundError(
                pom, NotFoundFailure.MISSING_FIELD, field=REVISION_FIELD
            )
        updated = content[: location.start] + new_value + content[location.end :]
        _write_text(pom, updated)


_REVISION_PATTERN = re.compile(
    rf"<{REVISION_FIELD}>([^<]*)</{REVISION_FIELD}>"
)


class PomRevisionStore(VersionStore):
    """
    The ``<revision>`` property of a Maven build descriptor.

    Args:
        path: Path of the pom file
        writer: Strategy used to store new values (defaults to Maven)
    """

    kind = ArtifactKind.PRIMARY
    field = REVISION_FIELD

    def __init__(
        self, path: Union[str, Path], writer: Optional[RevisionWriter] = None
    ):
        super().__init__(path)
        self.writer = writer

    def _writer(self) -> RevisionWriter:
        return self.writer if self.writer is not None else MavenRevisionWriter()

    def locate(self, content: str) -> Optional[FieldLocation]:
        match = _REVISION_PATTERN.search(content)
        if not match:
            return None
        return FieldLocation(
            value=match.group(1),
            start=match.start(1),
            end=match.end(1),
            line_number=_line_number(content, match.start()),
        )

    def persist(self, new_value: str) -> None:
        self._writer().write(self.path, new_value)

    def describe_write(self, old_value: str, new_value: str) -> str:
        return self._writer().describe(self.path, new_value)


_PACKAGE_VERSION_PATTERN = re.compile(
    rf'"{PACKAGE_VERSION_FIELD}"\s*:\s*"([^"\\]*)"'
)


class PackageJsonStore(VersionStore):
    """The top-level ``"version"`` field of an npm package descriptor."""

    kind = ArtifactKind.SECONDARY
    field = PACKAGE_VERSION_FIELD

    def locate(self, content: str) -> Optional[FieldLocation]:
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise VersioningError(f"Invalid JSON in {self.path}: {e}") from e

        if not isinstance(data, dict) or not isinstance(
            data.get(PACKAGE_VERSION_FIELD), str
        ):
            return None
        value = data[PACKAGE_VERSION_FIELD]

        # the top-level key sits directly inside the root object
        for match in _PACKAGE_VERSION_PATTERN.finditer(content):
            if (
                match.group(1) == value
                and _nesting_depth(content, match.start()) == 1
            ):
                return FieldLocation(
                    value=value,
                    start=match.start(1),
                    end=match.end(1),
                    line_number=_line_number(content, match.start()),
                )
        return FieldLocation(value=value, start=-1, end=-1, line_number=0)

    def persist(self, new_value: str) -> None:
        content = self.read_text()
        location = self.locate(content)
        if location is None or location.start < 0:
            raise ArtifactNotFoundError(
                self.path, NotFoundFailure.MISSING_FIELD, field=self.field
            )
        updated = content[: location.start] + new_value + content[location.end :]
        _write_text(self.path, updated)

    def describe_write(self, old_value: str, new_value: str) -> str:
        return (
            f"Would update {self.path.name} version from "
            f"'{old_value}' to '{new_value}'"
        )
