"""Options and helpers shared by the version commands."""

from functools import wraps
from pathlib import Path
from typing import Optional, Union

import click

from gitflow_version.constants import WORKSPACE_ENVVAR
from gitflow_version.versioning.exceptions import VersioningError
from gitflow_version.versioning.report import OutputFormat, ResultReporter
from gitflow_version.versioning.store import (
    InPlaceRevisionWriter,
    MavenRevisionWriter,
    RevisionWriter,
)

from .error_formatting import format_versioning_error
from .utils.logging import logger


def add_common_options(cmd):
    """Decorator adding the options every version command accepts."""

    @click.option(
        "--dry-run",
        is_flag=True,
        default=False,
        help="Show what would be done without making changes.",
    )
    @click.option(
        "--verbose",
        is_flag=True,
        default=False,
        help="Enable verbose logging.",
    )
    @click.option(
        "--output-format",
        type=click.Choice([f.value for f in OutputFormat]),
        default=OutputFormat.TEXT.value,
        show_default=True,
        help="Output format.",
    )
    @click.option(
        "--workspace",
        type=click.Path(exists=True, file_okay=False),
        envvar=WORKSPACE_ENVVAR,
        default=".",
        help=f"Workspace directory (default: {WORKSPACE_ENVVAR} or current dir).",
    )
    @click.option(
        "--branch",
        default=None,
        help="Branch name to calculate for (default: the checked-out branch).",
    )
    @wraps(cmd)
    def wrapper(*args, **kwargs):
        return cmd(*args, **kwargs)

    return wrapper


def resolve_artifact(workspace: Path, path: Union[str, Path]) -> Path:
    """Resolve an artifact path relative to the workspace."""
    path = Path(path)
    return path if path.is_absolute() else workspace / path


def build_revision_writer(name: str, quiet: bool) -> RevisionWriter:
    if name == "inplace":
        return InPlaceRevisionWriter()
    return MavenRevisionWriter(quiet=quiet)


def log_banner(title: str, **fields) -> None:
    logger.info(f"ℹ️  === {title} ===")
    for name, value in fields.items():
        logger.info(f"ℹ️  {name}: {value}")


def fail(
    ctx: click.Context,
    reporter: ResultReporter,
    error: VersioningError,
    branch: Optional[str] = None,
    old_version: Optional[str] = None,
    **extra,
) -> None:
    """Report a fatal error on the diagnostic channel and exit non-zero."""
    logger.error(f"❌ {format_versioning_error(error)}")
    reporter.emit_failure(error, reporter.build(old_version, None, branch, **extra))
    ctx.exit(1)
