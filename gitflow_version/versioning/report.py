"""
Rendering of calculation results.

JSON mode writes exactly one record to stdout; every diagnostic goes through the
logger, which the CLI points at stderr in that mode. Text mode logs a short summary.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

import click
from pydantic import BaseModel

from gitflow_version.constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


class OutputFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


class VersionReport(BaseModel):
    success: bool = True
    old_version: Optional[str] = None
    new_version: Optional[str] = None
    branch: Optional[str] = None
    version_changed: bool = False
    timestamp: str
    error: Optional[str] = None


class SyncVersionReport(VersionReport):
    maven_version: Optional[str] = None
    sync_with_maven: bool = False


class ResultReporter:
    """
    Emits a VersionReport in the selected output format.

    Args:
        output_format: TEXT or JSON
        clock: Returns the ISO-8601 timestamp stamped on records
    """

    def __init__(
        self,
        output_format: OutputFormat = OutputFormat.TEXT,
        clock: Callable[[], str] = utc_timestamp,
    ):
        self.output_format = OutputFormat(output_format)
        self.clock = clock

    @property
    def structured(self) -> bool:
        return self.output_format is OutputFormat.JSON

    def build(
        self,
        old_version: Optional[str],
        new_version: Optional[str],
        branch: Optional[str],
        **extra,
    ) -> VersionReport:
        model = SyncVersionReport if "sync_with_maven" in extra else VersionReport
        return model(
            old_version=old_version,
            new_version=new_version,
            branch=branch,
            version_changed=(
                old_version is not None
                and new_version is not None
                and old_version != new_version
            ),
            timestamp=self.clock(),
            **extra,
        )

    def render_json(self, report: VersionReport) -> str:
        exclude = set() if report.error is not None else {"error"}
        return report.model_dump_json(indent=2, exclude=exclude)

    def emit(self, report: VersionReport) -> None:
        if self.structured:
            click.echo(self.render_json(report))
            return

        if report.version_changed:
            logger.info(f"✅ Version change: {report.old_version} → {report.new_version}")
        else:
            logger.info("ℹ️  No version change needed")

        if isinstance(report, SyncVersionReport) and report.maven_version:
            logger.info(f"ℹ️  Maven version: {report.maven_version}")

    def emit_failure(self, error: Exception, report: VersionReport) -> None:
        """Emit a failure record in JSON mode; text mode relies on the error log."""
        if not self.structured:
            return
        failed = report.model_copy(
            update={"success": False, "error": str(error), "version_changed": False}
        )
        click.echo(self.render_json(failed))
