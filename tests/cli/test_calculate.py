"""Tests for the calculate command."""

import json

import pytest

from gitflow_version.cli.main import cli

from ..factories import make_pom


def invoke(runner, workspace, *args):
    return runner.invoke(cli, ["calculate", "--workspace", str(workspace), *args])


@pytest.mark.short
class TestCalculateCommand:
    def test_develop_bumps_stable(self, runner, make_workspace):
        workspace = make_workspace(revision="1.4.0")

        result = invoke(runner, workspace, "--branch", "develop")

        assert result.exit_code == 0, result.output
        assert "<revision>1.5.0-SNAPSHOT</revision>" in (workspace / "pom.xml").read_text()
        assert "Version change: 1.4.0 → 1.5.0-SNAPSHOT" in result.stdout

    def test_release_increments_rc(self, runner, make_workspace):
        workspace = make_workspace(revision="1.5.0-RC.3")

        result = invoke(runner, workspace, "--branch", "release/1.5")

        assert result.exit_code == 0, result.output
        assert "<revision>1.5.0-RC.4</revision>" in (workspace / "pom.xml").read_text()

    def test_json_output(self, runner, make_workspace):
        workspace = make_workspace(revision="3.2.1")

        result = invoke(
            runner, workspace, "--branch", "hotfix/3.2.2", "--output-format", "json"
        )

        assert result.exit_code == 0, result.output
        record = json.loads(result.stdout)
        assert record["success"] is True
        assert record["old_version"] == "3.2.1"
        assert record["new_version"] == "3.2.2"
        assert record["branch"] == "hotfix/3.2.2"
        assert record["version_changed"] is True
        assert record["timestamp"].endswith("Z")
        # diagnostics never reach stdout in JSON mode
        assert "Version Calculator" in result.stderr

    def test_dry_run_leaves_pom_untouched(self, runner, make_workspace):
        workspace = make_workspace(revision="1.5.0-RC.3")
        before = (workspace / "pom.xml").read_text()

        result = invoke(
            runner,
            workspace,
            "--branch",
            "release/1.5",
            "--dry-run",
            "--output-format",
            "json",
        )

        assert result.exit_code == 0, result.output
        assert (workspace / "pom.xml").read_text() == before
        record = json.loads(result.stdout)
        assert record["new_version"] == "1.5.0-RC.4"
        assert "DRY RUN" in result.stderr

    def test_feature_branch_unchanged(self, runner, make_workspace):
        workspace = make_workspace(revision="1.4.0-SNAPSHOT")

        result = invoke(runner, workspace, "--branch", "feature/login")

        assert result.exit_code == 0, result.output
        assert "No version change needed" in result.stdout

    def test_main_without_history_keeps_rc(self, runner, make_workspace):
        workspace = make_workspace(revision="2.1.0-RC.2")

        result = invoke(runner, workspace, "--branch", "main")

        assert result.exit_code == 0, result.output
        assert "<revision>2.1.0-RC.2</revision>" in (workspace / "pom.xml").read_text()

    def test_malformed_branch_fails_without_write(self, runner, make_workspace):
        workspace = make_workspace(revision="1.0.0")

        result = invoke(
            runner, workspace, "--branch", "release/abc", "--output-format", "json"
        )

        assert result.exit_code == 1
        assert "<revision>1.0.0</revision>" in (workspace / "pom.xml").read_text()
        record = json.loads(result.stdout)
        assert record["success"] is False
        assert "release/abc" in record["error"]
        assert "Invalid branch name" in result.stderr

    def test_invalid_version_reports_location(self, runner, make_workspace):
        workspace = make_workspace(revision="1.5")

        result = invoke(runner, workspace, "--branch", "develop")

        assert result.exit_code == 1
        assert "Invalid version format: '1.5'" in result.stderr
        assert "pom.xml:9" in result.stderr

    def test_missing_pom(self, runner, workspace):
        result = invoke(runner, workspace, "--branch", "develop")

        assert result.exit_code == 1
        assert "pom.xml not found" in result.stderr

    def test_custom_pom_path(self, runner, make_workspace):
        workspace = make_workspace()
        (workspace / "backend").mkdir()
        pom = workspace / "backend" / "pom.xml"
        pom.write_text(make_pom("1.4.0"))

        result = invoke(
            runner, workspace, "--branch", "develop", "--pom", "backend/pom.xml"
        )

        assert result.exit_code == 0, result.output
        assert "<revision>1.5.0-SNAPSHOT</revision>" in pom.read_text()

    def test_branch_detection_requires_git(self, runner, make_workspace):
        workspace = make_workspace(revision="1.4.0")

        result = invoke(runner, workspace)

        assert result.exit_code == 1
        assert "Could not determine the current branch" in result.stderr

    def test_workspace_from_environment(self, runner, make_workspace):
        workspace = make_workspace(revision="1.4.0")

        result = runner.invoke(
            cli,
            ["calculate", "--branch", "develop"],
            env={"GITHUB_WORKSPACE": str(workspace)},
        )

        assert result.exit_code == 0, result.output
        assert "1.5.0-SNAPSHOT" in (workspace / "pom.xml").read_text()

    def test_merge_detected_from_git_history(self, runner, git_workspace):
        result = runner.invoke(
            cli,
            ["calculate", "--workspace", str(git_workspace), "--output-format", "json"],
        )

        assert result.exit_code == 0, result.output
        record = json.loads(result.stdout)
        assert record["branch"] == "develop"
        assert record["new_version"] == "1.5.0-SNAPSHOT"


@pytest.mark.short
def test_version_option(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "gitflow-version" in result.output


@pytest.mark.short
def test_unreadable_pom_reports_failure(runner, workspace):
    (workspace / "pom.xml").write_bytes(b"<revision>1.0.0</revision>\xff\n")

    result = invoke(
        runner, workspace, "--branch", "develop", "--output-format", "json"
    )

    assert result.exit_code == 1
    record = json.loads(result.stdout)
    assert record["success"] is False
    assert "Could not read" in record["error"]
