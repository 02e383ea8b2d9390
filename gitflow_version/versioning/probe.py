"""
Merge signal probe.

Answers "did a release or hotfix branch just get merged into this branch?" by
matching commit subjects from a bounded, recent slice of history against a set of
patterns. The slice is the ``max_count`` most recent commits, further cut to those
committed after ``now - since``; whichever bound is narrower wins.

The history is injected through :class:`CommitHistory`, so the probe can run against
a real repository (``GitRepository``) or a synthetic one (``StaticCommitHistory``).
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from gitflow_version.constants import (
    DEVELOP_MAX_COUNT,
    DEVELOP_MERGE_PATTERNS,
    LOGGER_NAME,
    MAIN_MAX_COUNT,
    MAIN_MERGE_PATTERNS,
    SINCE_DAYS,
)

from .branch import BranchCategory, BranchKind
from .exceptions import ProbeUnavailable

logger = logging.getLogger(LOGGER_NAME)


class MergeSignal(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    UNAVAILABLE = "unavailable"

    @property
    def detected(self) -> bool:
        """Only PRESENT counts; ABSENT and UNAVAILABLE are treated alike."""
        return self is MergeSignal.PRESENT


@dataclass(frozen=True)
class LookbackWindow:
    """Bounds for the history query: a commit count and a recency cutoff."""

    max_count: int
    since: timedelta

    def __post_init__(self):
        if self.max_count < 1:
            raise ValueError(f"max_count must be positive: {self.max_count}")

    def cutoff(self, now: datetime) -> datetime:
        return now - self.since


DEFAULT_WINDOWS: Dict[BranchKind, LookbackWindow] = {
    BranchKind.DEVELOP: LookbackWindow(DEVELOP_MAX_COUNT, timedelta(days=SINCE_DAYS)),
    BranchKind.MAIN: LookbackWindow(MAIN_MAX_COUNT, timedelta(days=SINCE_DAYS)),
}

DEFAULT_PATTERNS: Dict[BranchKind, Sequence[str]] = {
    BranchKind.DEVELOP: DEVELOP_MERGE_PATTERNS,
    BranchKind.MAIN: MAIN_MERGE_PATTERNS,
}


@dataclass(frozen=True)
class CommitRecord:
    subject: str
    committed_at: datetime


class CommitHistory(ABC):
    """Read-only access to the most recent commits of the checked-out branch."""

    @abstractmethod
    def recent_commits(self, max_count: int) -> List[CommitRecord]:
        """
        Return up to ``max_count`` commits, newest first.

        Raises:
            ProbeUnavailable: If the history cannot be queried
        """


class StaticCommitHistory(CommitHistory):
    """An in-memory history, newest commit first."""

    def __init__(
        self, commits: Iterable[CommitRecord] = (), available: bool = True
    ):
        self.commits = list(commits)
        self.available = available

    def recent_commits(self, max_count: int) -> List[CommitRecord]:
        if not self.available:
            raise ProbeUnavailable("No commit history available")
        return self.commits[:max_count]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MergeSignalProbe:
    """
    Detects recent release/hotfix merges from commit subjects.

    Args:
        history: Source of recent commits
        patterns: Regular expressions per branch kind; kinds without patterns
            always yield ABSENT
        clock: Returns the current time (timezone-aware)
    """

    def __init__(
        self,
        history: CommitHistory,
        patterns: Optional[Dict[BranchKind, Sequence[str]]] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.history = history
        self.patterns = {
            kind: [re.compile(p) for p in pats]
            for kind, pats in (patterns or DEFAULT_PATTERNS).items()
        }
        self.clock = clock

    def detect(self, category: BranchCategory, window: LookbackWindow) -> MergeSignal:
        patterns = self.patterns.get(category.kind)
        if not patterns:
            return MergeSignal.ABSENT

        try:
            commits = self.history.recent_commits(window.max_count)
        except ProbeUnavailable as e:
            logger.warning(f"⚠️  Commit history unavailable, assuming no recent merge: {e}")
            return MergeSignal.UNAVAILABLE

        cutoff = window.cutoff(self.clock())
        for commit in commits[: window.max_count]:
            if commit.committed_at < cutoff:
                continue
            if any(p.search(commit.subject) for p in patterns):
                logger.debug(f"🔍 Merge commit detected: {commit.subject}")
                return MergeSignal.PRESENT

        logger.debug(
            f"🔍 No merge commit in the last {window.max_count} commits "
            f"since {cutoff.isoformat()}"
        )
        return MergeSignal.ABSENT
