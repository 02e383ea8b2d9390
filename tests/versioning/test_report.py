"""Tests for result rendering."""

import json
import re

import pytest

from gitflow_version.versioning.exceptions import VersioningError
from gitflow_version.versioning.report import (
    OutputFormat,
    ResultReporter,
    SyncVersionReport,
    VersionReport,
    utc_timestamp,
)


def fixed_timestamp() -> str:
    return "2026-10-16T12:00:00Z"


@pytest.mark.short
class TestResultReporter:
    def test_build_primary(self):
        reporter = ResultReporter(OutputFormat.JSON, clock=fixed_timestamp)
        report = reporter.build("1.4.0", "1.5.0-SNAPSHOT", "develop")
        assert isinstance(report, VersionReport)
        assert not isinstance(report, SyncVersionReport)
        assert report.version_changed is True
        assert report.timestamp == "2026-10-16T12:00:00Z"

    def test_build_unchanged(self):
        report = ResultReporter().build("1.4.0", "1.4.0", "main")
        assert report.version_changed is False

    def test_json_schema(self, capsys):
        reporter = ResultReporter("json", clock=fixed_timestamp)
        reporter.emit(reporter.build("1.5.0-RC.3", "1.5.0-RC.4", "release/1.5"))

        record = json.loads(capsys.readouterr().out)
        assert record == {
            "success": True,
            "old_version": "1.5.0-RC.3",
            "new_version": "1.5.0-RC.4",
            "branch": "release/1.5",
            "version_changed": True,
            "timestamp": "2026-10-16T12:00:00Z",
        }

    def test_json_sync_schema(self, capsys):
        reporter = ResultReporter("json", clock=fixed_timestamp)
        reporter.emit(
            reporter.build(
                "1.4.0",
                "1.5.0",
                "develop",
                maven_version="1.5.0-SNAPSHOT",
                sync_with_maven=True,
            )
        )

        record = json.loads(capsys.readouterr().out)
        assert record["maven_version"] == "1.5.0-SNAPSHOT"
        assert record["sync_with_maven"] is True
        assert "error" not in record

    def test_json_failure_record(self, capsys):
        reporter = ResultReporter("json", clock=fixed_timestamp)
        reporter.emit_failure(
            VersioningError("boom"), reporter.build(None, None, "release/abc")
        )

        record = json.loads(capsys.readouterr().out)
        assert record["success"] is False
        assert record["error"] == "boom"
        assert record["old_version"] is None
        assert record["branch"] == "release/abc"
        assert record["version_changed"] is False

    def test_text_failure_writes_nothing(self, capsys):
        reporter = ResultReporter("text")
        reporter.emit_failure(VersioningError("boom"), reporter.build(None, None, "x"))
        assert capsys.readouterr().out == ""

    def test_text_change(self, capture_logs, capsys):
        reporter = ResultReporter("text")
        reporter.emit(reporter.build("1.4.0", "1.5.0-SNAPSHOT", "develop"))
        assert "Version change: 1.4.0 → 1.5.0-SNAPSHOT" in capture_logs.getvalue()
        assert capsys.readouterr().out == ""

    def test_text_no_change(self, capture_logs):
        reporter = ResultReporter("text")
        reporter.emit(reporter.build("1.4.0", "1.4.0", "main"))
        assert "No version change needed" in capture_logs.getvalue()

    def test_text_sync_mentions_maven(self, capture_logs):
        reporter = ResultReporter("text")
        reporter.emit(
            reporter.build(
                "1.5.0", "1.5.0", "develop", maven_version="1.5.0", sync_with_maven=True
            )
        )
        assert "Maven version: 1.5.0" in capture_logs.getvalue()


@pytest.mark.short
def test_utc_timestamp_format():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", utc_timestamp())
