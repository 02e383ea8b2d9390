"""
Calculation runs for the two version artifacts.

A run reads the artifact once, computes the next version, writes it at most once
(never when unchanged, never in dry-run mode) and verifies the write. Runs share no
state; everything they need is passed in.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from git.exc import GitCommandError

from gitflow_version.constants import LOGGER_NAME

from .branch import classify_branch
from .engine import CalculationContext, TransitionEngine
from .exceptions import BranchDetectionError, VersionParseError
from .git import GitRepository
from .store import PomRevisionStore, VersionStore
from .version import SemanticVersion, format_version, parse_version, strip_snapshot

logger = logging.getLogger(LOGGER_NAME)


@dataclass(frozen=True)
class RunResult:
    old_version: str
    new_version: str
    branch: str
    written: bool = False
    maven_version: Optional[str] = None
    sync_with_maven: bool = False

    @property
    def changed(self) -> bool:
        return self.old_version != self.new_version


def resolve_branch(
    workspace: Union[str, Path],
    branch: Optional[str] = None,
    repository: Optional[GitRepository] = None,
) -> str:
    """
    Return the explicit branch, or the branch checked out in the workspace.

    Raises:
        BranchDetectionError: If no branch was given and the workspace is not a git checkout
    """
    if branch:
        return branch
    repository = repository or GitRepository(workspace)
    detected = repository.current_branch()
    if detected is None:
        raise BranchDetectionError(workspace, "not a git repository")
    return detected


def apply_version(
    store: VersionStore,
    current: SemanticVersion,
    target: SemanticVersion,
    dry_run: bool = False,
) -> bool:
    """
    Persist ``target`` unless it equals ``current`` or this is a dry run.

    Returns:
        True if the artifact was written
    """
    old_value = format_version(current)
    new_value = format_version(target)

    if target == current:
        logger.info(f"ℹ️  No version change needed for {store.path.name}")
        return False

    logger.info(f"ℹ️  Version change detected: {old_value} → {new_value}")
    if dry_run:
        logger.info(f"ℹ️  DRY RUN: Would set version to: {new_value}")
        logger.info(f"ℹ️  {store.describe_write(old_value, new_value)}")
        return False

    logger.info(f"ℹ️  Setting version to: {new_value}")
    actual = store.write(target)
    logger.info(f"✅ Version successfully updated to: {actual}")
    return True


def log_diff(repository: Optional[GitRepository], path: Path) -> None:
    if repository is None:
        return
    try:
        diff = repository.diff(path)
    except GitCommandError as e:
        logger.debug(f"🔍 Could not show changes: {e}")
        return
    if diff:
        logger.info("ℹ️  Changes made:")
        logger.info(diff)


def calculate_primary_version(
    store: PomRevisionStore,
    branch: str,
    engine: TransitionEngine,
    dry_run: bool = False,
    repository: Optional[GitRepository] = None,
    show_diff: bool = False,
) -> RunResult:
    """
    Compute and persist the build-descriptor revision for a branch.

    Args:
        store: The primary artifact
        branch: Branch name driving the transition
        engine: Transition engine, with its merge signal probe
        dry_run: Compute and report only
        repository: Repository used for the verbose diff
        show_diff: Log the artifact diff after a write

    Returns:
        The RunResult of the calculation

    Raises:
        VersioningError: On any parse, classification, lookup or write failure
    """
    current = store.read()
    logger.info(f"ℹ️  Current version: {current}")

    context = CalculationContext(
        branch=branch, category=classify_branch(branch), current=current
    )
    logger.info(
        f"ℹ️  Version components: MAJOR={current.major}, "
        f"MINOR={current.minor}, PATCH={current.patch}"
    )

    transition = engine.next_version(context)
    logger.info(f"ℹ️  Calculated next version: {transition.next_version}")

    written = apply_version(store, current, transition.next_version, dry_run)
    if written and show_diff:
        log_diff(repository, store.path)

    return RunResult(
        old_version=format_version(current),
        new_version=format_version(transition.next_version),
        branch=branch,
        written=written,
    )


def read_sync_source(maven_store: PomRevisionStore) -> SemanticVersion:
    """
    Read the primary revision as a secondary target, without its snapshot suffix.

    Raises:
        ArtifactNotFoundError: If the pom or its revision field is missing
        VersionParseError: If the stripped value is not a valid version
    """
    location = maven_store.read_location()
    try:
        return parse_version(strip_snapshot(location.value))
    except VersionParseError as e:
        raise VersionParseError(
            e.version_string,
            source=maven_store.path,
            line_number=location.line_number,
        ) from None


def sync_secondary_version(
    store: VersionStore,
    branch: str,
    engine: TransitionEngine,
    maven_store: Optional[PomRevisionStore] = None,
    dry_run: bool = False,
    repository: Optional[GitRepository] = None,
    show_diff: bool = False,
) -> RunResult:
    """
    Compute and persist the package-descriptor version.

    With ``maven_store`` the primary revision (minus ``-SNAPSHOT``) is mirrored and
    the transition engine is bypassed; otherwise the branch rules apply as for the
    primary artifact.

    Raises:
        VersioningError: On any parse, classification, lookup or write failure
    """
    current = store.read()
    logger.info(f"ℹ️  Current NPM version: {current}")

    maven_version = None
    if maven_store is not None:
        maven_version = maven_store.read_raw()
        logger.info(f"ℹ️  Maven version (extracted): {maven_version}")
        target = read_sync_source(maven_store)
        logger.debug(f"🔍 Syncing with Maven version: {target}")
    else:
        context = CalculationContext(
            branch=branch, category=classify_branch(branch), current=current
        )
        target = engine.next_version(context).next_version

    logger.info(f"ℹ️  Target version: {target}")

    written = apply_version(store, current, target, dry_run)
    if written and show_diff:
        log_diff(repository, store.path)

    return RunResult(
        old_version=format_version(current),
        new_version=format_version(target),
        branch=branch,
        written=written,
        maven_version=maven_version,
        sync_with_maven=maven_store is not None,
    )
