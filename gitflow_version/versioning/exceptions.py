"""
Exception classes for the versioning module.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Sequence, Union


class ParseFailure(str, Enum):
    UNRECOGNIZED_GRAMMAR = "UnrecognizedGrammar"


class ClassificationFailure(str, Enum):
    MALFORMED_RELEASE_BRANCH = "MalformedReleaseBranch"
    MALFORMED_HOTFIX_BRANCH = "MalformedHotfixBranch"


class NotFoundFailure(str, Enum):
    MISSING_ARTIFACT = "MissingArtifact"
    MISSING_FIELD = "MissingField"


class VerificationFailure(str, Enum):
    VALUE_MISMATCH = "ValueMismatch"


class VersioningError(Exception):
    """Base exception for all versioning-related errors."""

    pass


class VersionParseError(VersioningError):
    """Raised when a version string matches none of the supported grammars."""

    def __init__(
        self,
        version_string: str,
        source: Optional[Union[str, Path]] = None,
        line_number: Optional[int] = None,
    ):
        self.version_string = version_string
        self.reason = ParseFailure.UNRECOGNIZED_GRAMMAR
        self.source = source
        self.line_number = line_number
        super().__init__(
            f"Invalid version format: '{version_string}'. "
            "Expected MAJOR.MINOR.PATCH, MAJOR.MINOR.PATCH-SNAPSHOT "
            "or MAJOR.MINOR.PATCH-RC.N"
        )


class BranchClassificationError(VersioningError):
    """Raised when a release or hotfix branch name lacks its version suffix."""

    def __init__(self, branch: str, reason: ClassificationFailure):
        self.branch = branch
        self.reason = reason
        if reason is ClassificationFailure.MALFORMED_RELEASE_BRANCH:
            expected = "release/MAJOR.MINOR"
        else:
            expected = "hotfix/MAJOR.MINOR.PATCH"
        super().__init__(
            f"Invalid branch name: '{branch}'. Expected format: {expected}"
        )


class BranchDetectionError(VersioningError):
    """Raised when the current branch cannot be determined."""

    def __init__(self, workspace: Union[str, Path], message: str = ""):
        self.workspace = workspace
        detail = f": {message}" if message else ""
        super().__init__(
            f"Could not determine the current branch in {workspace}{detail}. "
            "Pass --branch explicitly."
        )


class ArtifactNotFoundError(VersioningError):
    """Raised when a version artifact or its version field is missing."""

    def __init__(
        self,
        path: Union[str, Path],
        reason: NotFoundFailure,
        field: Optional[str] = None,
    ):
        self.path = path
        self.reason = reason
        self.field = field
        if reason is NotFoundFailure.MISSING_ARTIFACT:
            message = f"{Path(path).name} not found in {Path(path).parent}"
        else:
            message = f"Could not extract {field or 'version'} from {path}"
        super().__init__(message)


class WriteVerificationError(VersioningError):
    """Raised when the stored value differs from the value that was written."""

    def __init__(
        self, path: Union[str, Path], expected: str, actual: Optional[str]
    ):
        self.path = path
        self.expected = expected
        self.actual = actual
        self.reason = VerificationFailure.VALUE_MISMATCH
        super().__init__(
            f"Version update failed for {path}. Expected: {expected}, Got: {actual}"
        )


class BuildToolError(VersioningError):
    """Raised when the delegated build tool exits unsuccessfully."""

    def __init__(self, command: Sequence[str], returncode: int, output: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        super().__init__(
            f"Failed to set version using {self.command[0]} "
            f"(exit code {returncode})"
        )


class ProbeUnavailable(VersioningError):
    """Raised by a commit history that cannot be queried.

    Never fatal: the merge signal probe turns it into an unavailable signal.
    """

    pass
