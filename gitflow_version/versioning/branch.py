"""
GitFlow branch classification.

Rules, in priority order:

- ``main`` -> MAIN
- ``develop`` -> DEVELOP
- ``release/MAJOR.MINOR`` -> RELEASE (a trailing ``.PATCH`` is tolerated and ignored)
- ``hotfix/MAJOR.MINOR.PATCH`` -> HOTFIX
- ``feature/...`` -> FEATURE
- anything else -> OTHER

Release and hotfix branches without the numeric suffix are errors, never OTHER.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .exceptions import BranchClassificationError, ClassificationFailure

RELEASE_PREFIX = "release/"
HOTFIX_PREFIX = "hotfix/"
FEATURE_PREFIX = "feature/"

_RELEASE_SUFFIX = re.compile(r"(\d+)\.(\d+)(?:\.\d+)?")
_HOTFIX_SUFFIX = re.compile(r"(\d+)\.(\d+)\.(\d+)")


class BranchKind(str, Enum):
    MAIN = "main"
    DEVELOP = "develop"
    RELEASE = "release"
    HOTFIX = "hotfix"
    FEATURE = "feature"
    OTHER = "other"


@dataclass(frozen=True)
class BranchCategory:
    """
    A classified branch.

    ``major``/``minor`` are set for RELEASE and HOTFIX, ``patch`` only for HOTFIX.
    The numbers come from the branch name, not from any version artifact.
    """

    kind: BranchKind
    major: Optional[int] = None
    minor: Optional[int] = None
    patch: Optional[int] = None

    @classmethod
    def main(cls) -> "BranchCategory":
        return cls(BranchKind.MAIN)

    @classmethod
    def develop(cls) -> "BranchCategory":
        return cls(BranchKind.DEVELOP)

    @classmethod
    def release(cls, major: int, minor: int) -> "BranchCategory":
        return cls(BranchKind.RELEASE, major, minor)

    @classmethod
    def hotfix(cls, major: int, minor: int, patch: int) -> "BranchCategory":
        return cls(BranchKind.HOTFIX, major, minor, patch)

    @classmethod
    def feature(cls) -> "BranchCategory":
        return cls(BranchKind.FEATURE)

    @classmethod
    def other(cls) -> "BranchCategory":
        return cls(BranchKind.OTHER)

    def __str__(self) -> str:
        if self.kind is BranchKind.RELEASE:
            return f"release {self.major}.{self.minor}"
        if self.kind is BranchKind.HOTFIX:
            return f"hotfix {self.major}.{self.minor}.{self.patch}"
        return self.kind.value


def classify_branch(branch: str) -> BranchCategory:
    """
    Map a branch name to its GitFlow category.

    Args:
        branch: Branch name, e.g. "release/1.5"

    Returns:
        The BranchCategory for the branch

    Raises:
        BranchClassificationError: If a release or hotfix branch lacks its version suffix
    """
    if branch == "main":
        return BranchCategory.main()
    if branch == "develop":
        return BranchCategory.develop()

    if branch.startswith(RELEASE_PREFIX):
        match = _RELEASE_SUFFIX.fullmatch(branch[len(RELEASE_PREFIX) :])
        if not match:
            raise BranchClassificationError(
                branch, ClassificationFailure.MALFORMED_RELEASE_BRANCH
            )
        return BranchCategory.release(int(match.group(1)), int(match.group(2)))

    if branch.startswith(HOTFIX_PREFIX):
        match = _HOTFIX_SUFFIX.fullmatch(branch[len(HOTFIX_PREFIX) :])
        if not match:
            raise BranchClassificationError(
                branch, ClassificationFailure.MALFORMED_HOTFIX_BRANCH
            )
        major, minor, patch = (int(g) for g in match.groups())
        return BranchCategory.hotfix(major, minor, patch)

    if branch.startswith(FEATURE_PREFIX):
        return BranchCategory.feature()

    return BranchCategory.other()
