"""Tests for the sync-npm command."""

import json

import pytest

from gitflow_version.cli.main import cli


def invoke(runner, workspace, *args):
    return runner.invoke(cli, ["sync-npm", "--workspace", str(workspace), *args])


def npm_version(workspace):
    return json.loads((workspace / "package.json").read_text())["version"]


@pytest.mark.short
class TestSyncNpmCommand:
    def test_branch_rules(self, runner, make_workspace):
        workspace = make_workspace(npm_version="1.4.0")

        result = invoke(runner, workspace, "--branch", "develop")

        assert result.exit_code == 0, result.output
        assert npm_version(workspace) == "1.5.0-SNAPSHOT"

    def test_sync_with_maven_json(self, runner, make_workspace):
        workspace = make_workspace(revision="1.5.0-SNAPSHOT", npm_version="1.4.0")

        result = invoke(
            runner,
            workspace,
            "--branch",
            "develop",
            "--sync-with-maven",
            "--output-format",
            "json",
        )

        assert result.exit_code == 0, result.output
        record = json.loads(result.stdout)
        assert record["success"] is True
        assert record["old_version"] == "1.4.0"
        assert record["new_version"] == "1.5.0"
        assert record["maven_version"] == "1.5.0-SNAPSHOT"
        assert record["sync_with_maven"] is True
        assert npm_version(workspace) == "1.5.0"

    def test_json_without_sync(self, runner, make_workspace):
        workspace = make_workspace(npm_version="1.5.0-RC.1")

        result = invoke(
            runner, workspace, "--branch", "release/1.5", "--output-format", "json"
        )

        assert result.exit_code == 0, result.output
        record = json.loads(result.stdout)
        assert record["new_version"] == "1.5.0-RC.2"
        assert record["maven_version"] is None
        assert record["sync_with_maven"] is False

    def test_preserves_other_fields(self, runner, make_workspace):
        workspace = make_workspace(npm_version="3.2.1")

        result = invoke(runner, workspace, "--branch", "hotfix/3.2.2")

        assert result.exit_code == 0, result.output
        data = json.loads((workspace / "package.json").read_text())
        assert data["version"] == "3.2.2"
        assert data["name"] == "demo-frontend"
        assert data["dependencies"] == {"react": "^18.2.0"}

    def test_dry_run(self, runner, make_workspace):
        workspace = make_workspace(revision="2.0.0", npm_version="1.9.0")
        before = (workspace / "package.json").read_text()

        result = invoke(
            runner, workspace, "--branch", "main", "--sync-with-maven", "--dry-run"
        )

        assert result.exit_code == 0, result.output
        assert (workspace / "package.json").read_text() == before
        assert "Would update package.json version from '1.9.0' to '2.0.0'" in (
            result.stdout
        )

    def test_custom_maven_pom(self, runner, make_workspace):
        workspace = make_workspace(revision="1.0.0", npm_version="1.0.0")
        (workspace / "pom.xml").rename(workspace / "parent-pom.xml")

        result = invoke(
            runner,
            workspace,
            "--branch",
            "develop",
            "--sync-with-maven",
            "--maven-pom",
            "parent-pom.xml",
        )

        assert result.exit_code == 0, result.output
        assert "No version change needed" in result.stdout

    def test_missing_maven_pom_is_fatal(self, runner, make_workspace):
        workspace = make_workspace(npm_version="1.4.0")

        result = invoke(
            runner,
            workspace,
            "--branch",
            "develop",
            "--sync-with-maven",
            "--output-format",
            "json",
        )

        assert result.exit_code == 1
        record = json.loads(result.stdout)
        assert record["success"] is False
        assert record["sync_with_maven"] is True
        assert npm_version(workspace) == "1.4.0"

    def test_missing_package_json(self, runner, workspace):
        result = invoke(runner, workspace, "--branch", "develop")

        assert result.exit_code == 1
        assert "package.json not found" in result.stderr

    def test_malformed_hotfix_branch(self, runner, make_workspace):
        workspace = make_workspace(npm_version="1.4.0")

        result = invoke(runner, workspace, "--branch", "hotfix/1.4")

        assert result.exit_code == 1
        assert "hotfix/MAJOR.MINOR.PATCH" in result.stderr
        assert npm_version(workspace) == "1.4.0"

    def test_text_summary(self, runner, make_workspace):
        workspace = make_workspace(npm_version="3.2.1")

        result = invoke(runner, workspace, "--branch", "hotfix/3.2.2")

        assert result.exit_code == 0, result.output
        summary = result.stdout.splitlines()[-3:]
        assert "Previous: 3.2.1" in summary[0]
        assert "Current:  3.2.2" in summary[1]
        assert "Branch:   hotfix/3.2.2" in summary[2]

    def test_unreadable_package_json_reports_failure(self, runner, workspace):
        (workspace / "package.json").write_bytes(b'{"version": "1.4.0", "x": "\xff"}\n')

        result = invoke(
            runner, workspace, "--branch", "develop", "--output-format", "json"
        )

        assert result.exit_code == 1
        record = json.loads(result.stdout)
        assert record["success"] is False
        assert "Could not read" in record["error"]
