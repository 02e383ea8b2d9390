"""
Versioning module for gitflow-version.

All version calculation logic lives in this package. The CLI only wires options,
configuration and output around it.

ARCHITECTURAL LAYERS:
====================

1. **Version Grammar** (version.py):
   - SemanticVersion: immutable MAJOR.MINOR.PATCH with an optional Snapshot or
     ReleaseCandidate qualifier
   - parse_version / format_version, with the round-trip law
     ``format_version(parse_version(text)) == text``

2. **Branch Classification** (branch.py):
   - classify_branch maps a branch name to a BranchCategory
     (main, develop, release, hotfix, feature, other)

3. **Merge Signal Probe** (probe.py, git.py):
   - MergeSignalProbe matches recent commit subjects against merge patterns
   - CommitHistory is injected: GitRepository (GitPython) in production,
     StaticCommitHistory for synthetic histories

4. **Transition Engine** (engine.py):
   - TransitionEngine: the GitFlow state machine, stateless across runs

5. **Version Stores** (store.py):
   - PomRevisionStore (primary) and PackageJsonStore (secondary)
   - Write-then-read verification on every write

6. **Reporting and Runs** (report.py, calculator.py):
   - ResultReporter renders text or a single JSON record
   - calculate_primary_version / sync_secondary_version orchestrate one run

7. **Exception Hierarchy** (exceptions.py):
   - Every failure derives from VersioningError; only ProbeUnavailable is non-fatal
"""

from .branch import BranchCategory, BranchKind, classify_branch
from .calculator import (
    RunResult,
    calculate_primary_version,
    resolve_branch,
    sync_secondary_version,
)
from .engine import CalculationContext, Transition, TransitionEngine
from .exceptions import (
    ArtifactNotFoundError,
    BranchClassificationError,
    BranchDetectionError,
    BuildToolError,
    ProbeUnavailable,
    VersioningError,
    VersionParseError,
    WriteVerificationError,
)
from .git import GitRepository
from .probe import (
    CommitHistory,
    CommitRecord,
    LookbackWindow,
    MergeSignal,
    MergeSignalProbe,
    StaticCommitHistory,
)
from .report import OutputFormat, ResultReporter, SyncVersionReport, VersionReport
from .store import (
    InPlaceRevisionWriter,
    MavenRevisionWriter,
    PackageJsonStore,
    PomRevisionStore,
    VersionStore,
)
from .version import (
    ReleaseCandidate,
    SemanticVersion,
    Snapshot,
    format_version,
    parse_version,
)

__all__ = [
    # Grammar
    "SemanticVersion",
    "Snapshot",
    "ReleaseCandidate",
    "parse_version",
    "format_version",
    # Branches
    "BranchCategory",
    "BranchKind",
    "classify_branch",
    # Merge signal
    "CommitHistory",
    "CommitRecord",
    "GitRepository",
    "LookbackWindow",
    "MergeSignal",
    "MergeSignalProbe",
    "StaticCommitHistory",
    # Engine
    "CalculationContext",
    "Transition",
    "TransitionEngine",
    # Stores
    "VersionStore",
    "PomRevisionStore",
    "PackageJsonStore",
    "MavenRevisionWriter",
    "InPlaceRevisionWriter",
    # Runs and output
    "RunResult",
    "calculate_primary_version",
    "sync_secondary_version",
    "resolve_branch",
    "OutputFormat",
    "ResultReporter",
    "VersionReport",
    "SyncVersionReport",
    # Exceptions
    "VersioningError",
    "VersionParseError",
    "BranchClassificationError",
    "BranchDetectionError",
    "ArtifactNotFoundError",
    "WriteVerificationError",
    "BuildToolError",
    "ProbeUnavailable",
]
