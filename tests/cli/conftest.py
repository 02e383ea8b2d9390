import pytest
from click.testing import CliRunner
from git import Actor, Repo

from gitflow_version.constants import WORKSPACE_CONFIG_FILE

from ..factories import make_package_json, make_pom


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def workspace(tmp_path):
    """A workspace that rewrites pom.xml in place instead of calling Maven."""
    (tmp_path / WORKSPACE_CONFIG_FILE).write_text(
        "[artifacts]\nrevision_writer = inplace\n"
    )
    return tmp_path


@pytest.fixture
def make_workspace(workspace):
    def _make(revision=None, npm_version=None):
        if revision is not None:
            (workspace / "pom.xml").write_text(make_pom(revision))
        if npm_version is not None:
            (workspace / "package.json").write_text(make_package_json(npm_version))
        return workspace

    return _make


@pytest.fixture
def git_workspace(make_workspace):
    """A develop checkout whose last commit merged a release branch."""
    path = make_workspace(revision="1.4.0-SNAPSHOT")
    repo = Repo.init(path)
    author = Actor("Test User", "test@example.com")
    repo.index.add(["pom.xml"])
    repo.index.commit("Initial commit", author=author, committer=author)
    repo.git.branch("-M", "develop")
    (path / "CHANGELOG").write_text("1.3.0\n")
    repo.index.add(["CHANGELOG"])
    repo.index.commit(
        "Merge branch 'release/1.3' into develop", author=author, committer=author
    )
    return path
