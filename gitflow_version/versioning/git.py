"""
Git integration for version calculation.

GitRepository wraps a GitPython ``Repo`` to provide the current branch name, the
recent commit history consumed by the merge signal probe, and artifact diffs for
verbose output. A workspace that is not a git repository is tolerated: history
queries then raise ProbeUnavailable.
"""

from pathlib import Path
from typing import List, Optional, Union

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from .exceptions import ProbeUnavailable
from .probe import CommitHistory, CommitRecord

DETACHED_HEAD = "HEAD"


class GitRepository(CommitHistory):
    """
    Read-only view of the git working copy that holds the version artifacts.

    Args:
        path: Path of the working copy root
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

        self.git_available = False
        self.repo: Optional[Repo] = None
        try:
            self.repo = Repo(self.path)
            self.git_available = True
        except (InvalidGitRepositoryError, NoSuchPathError):
            # Not a git repo, that's OK
            pass

    def current_branch(self) -> Optional[str]:
        """
        Get the checked-out branch name.

        Returns:
            The branch name, ``"HEAD"`` when detached, or None without a repository
        """
        if not self.git_available or self.repo is None:
            return None
        if self.repo.head.is_detached:
            return DETACHED_HEAD
        return self.repo.active_branch.name

    def recent_commits(self, max_count: int) -> List[CommitRecord]:
        if not self.git_available or self.repo is None:
            raise ProbeUnavailable(f"{self.path} is not a git repository")
        if not self.repo.head.is_valid():
            raise ProbeUnavailable(f"{self.path} has no commits")

        try:
            return [
                CommitRecord(
                    subject=str(commit.summary),
                    committed_at=commit.committed_datetime,
                )
                for commit in self.repo.iter_commits("HEAD", max_count=max_count)
            ]
        except (GitCommandError, ValueError) as e:
            raise ProbeUnavailable(f"git log failed: {e}") from e

    def diff(self, path: Union[str, Path]) -> str:
        """
        Get the working-tree diff of a single file.

        Raises:
            GitCommandError: If git cannot produce the diff
        """
        if not self.git_available or self.repo is None:
            return ""
        return self.repo.git.diff("--", str(path))
