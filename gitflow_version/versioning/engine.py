"""
Version transition engine.

Computes the next version from the current persisted version, the branch category
and, for ``main`` and ``develop`` only, the merge signal. The engine keeps no state
between runs; calling it again with the same inputs yields the same result.

=========  ===================================================  ========================
Category   Condition                                            Next version
=========  ===================================================  ========================
main       merge signal present and current is an RC            current without RC
main       otherwise                                            unchanged
develop    merge signal present, or current is RC or stable     MAJOR.(MINOR+1).0-SNAPSHOT
develop    otherwise                                            unchanged
release    current is M.m.0-RC.k for the branch's M.m           M.m.0-RC.(k+1)
release    otherwise                                            M.m.0-RC.1
hotfix     always (numbers from current, not the branch)        MAJOR.MINOR.(PATCH+1)
feature    always                                               unchanged
other      always                                               unchanged
=========  ===================================================  ========================
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from gitflow_version.constants import LOGGER_NAME

from .branch import BranchCategory, BranchKind, classify_branch
from .probe import DEFAULT_WINDOWS, LookbackWindow, MergeSignal, MergeSignalProbe
from .version import ReleaseCandidate, SemanticVersion, Snapshot, parse_version

logger = logging.getLogger(LOGGER_NAME)


@dataclass(frozen=True)
class CalculationContext:
    """Immutable inputs of one calculation run."""

    branch: str
    category: BranchCategory
    current: SemanticVersion

    @classmethod
    def create(cls, branch: str, current_version: str) -> "CalculationContext":
        """
        Parse the current version, then classify the branch.

        Raises:
            VersionParseError: If the current version is not valid
            BranchClassificationError: If the branch name is malformed
        """
        current = parse_version(current_version)
        category = classify_branch(branch)
        return cls(branch=branch, category=category, current=current)


@dataclass(frozen=True)
class Transition:
    """Result of a calculation: the next version and how it was reached."""

    context: CalculationContext
    next_version: SemanticVersion
    rule: str
    signal: Optional[MergeSignal] = None

    @property
    def current_version(self) -> SemanticVersion:
        return self.context.current

    @property
    def changed(self) -> bool:
        return self.next_version != self.context.current


class TransitionEngine:
    """
    GitFlow version state machine.

    Args:
        probe: Merge signal probe consulted for main and develop. Without one the
            signal is always UNAVAILABLE.
        windows: Lookback window per branch kind
    """

    def __init__(
        self,
        probe: Optional[MergeSignalProbe] = None,
        windows: Optional[Dict[BranchKind, LookbackWindow]] = None,
    ):
        self.probe = probe
        self.windows = dict(DEFAULT_WINDOWS)
        if windows:
            self.windows.update(windows)

    def merge_signal(self, category: BranchCategory) -> MergeSignal:
        if self.probe is None:
            return MergeSignal.UNAVAILABLE
        return self.probe.detect(category, self.windows[category.kind])

    def next_version(self, context: CalculationContext) -> Transition:
        """
        Compute the transition for a calculation context.

        Args:
            context: Branch category and current version

        Returns:
            The Transition describing the next version
        """
        kind = context.category.kind
        logger.debug(f"🔍 Calculating version for branch: {context.branch} ({kind.value})")

        if kind is BranchKind.MAIN:
            transition = self._main(context)
        elif kind is BranchKind.DEVELOP:
            transition = self._develop(context)
        elif kind is BranchKind.RELEASE:
            transition = self._release(context)
        elif kind is BranchKind.HOTFIX:
            transition = self._hotfix(context)
        elif kind in (BranchKind.FEATURE, BranchKind.OTHER):
            transition = Transition(
                context, context.current, "inheriting current version"
            )
        else:
            raise ValueError(f"Unhandled branch kind: {kind}")

        logger.debug(f"🔍 {transition.rule}: {transition.next_version}")
        return transition

    def _main(self, context: CalculationContext) -> Transition:
        current = context.current
        signal = self.merge_signal(context.category)
        if signal.detected and current.is_release_candidate:
            return Transition(
                context,
                current.stable(),
                "release merge detected, converting RC version to stable",
                signal,
            )
        return Transition(context, current, "keeping current version", signal)

    def _develop(self, context: CalculationContext) -> Transition:
        current = context.current
        signal = self.merge_signal(context.category)
        if signal.detected or current.is_release_candidate or current.is_stable:
            return Transition(
                context,
                SemanticVersion(current.major, current.minor + 1, 0, Snapshot()),
                "bumping to next minor snapshot",
                signal,
            )
        return Transition(context, current, "keeping current snapshot", signal)

    def _release(self, context: CalculationContext) -> Transition:
        category = context.category
        current = context.current
        if category.major is None or category.minor is None:
            raise ValueError(f"Release category without version: {category}")

        same_line = (current.major, current.minor, current.patch) == (
            category.major,
            category.minor,
            0,
        )
        if same_line and current.rc_number is not None:
            rc = current.rc_number + 1
            rule = f"incrementing RC from {current.rc_number} to {rc}"
        else:
            rc = 1
            rule = "first RC"
        return Transition(
            context,
            SemanticVersion(category.major, category.minor, 0, ReleaseCandidate(rc)),
            rule,
        )

    def _hotfix(self, context: CalculationContext) -> Transition:
        current = context.current
        return Transition(
            context,
            SemanticVersion(current.major, current.minor, current.patch + 1),
            "bumping patch version",
        )
