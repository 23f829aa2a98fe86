"""Repository collaborator bound to one module checkout.

The release pipeline talks to git only through GitRepository, so gate
ordering can be tested with a stand-in object honouring the same methods.
"""

from pathlib import Path

from modrelease.git import operations, queries
from modrelease.git.queries import TrackingBranch


class GitRepository:
    """Git operations scoped to a module checkout."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def is_git_checkout(self) -> bool:
        # .git may be a gitlink file for submodules and linked worktrees
        return (self.path / ".git").exists()

    def current_branch(self) -> str:
        return queries.get_current_branch(cwd=self.path)

    def tracking_branch(self) -> TrackingBranch:
        return queries.get_tracking_branch(self.current_branch(), cwd=self.path)

    def remote_url(self, remote: str) -> str:
        return queries.get_remote_url(remote, cwd=self.path)

    def is_clean(self) -> bool:
        return queries.is_clean(cwd=self.path)

    def uncommitted_files(self) -> list[str]:
        return queries.get_uncommitted_files(cwd=self.path)

    def top_commit_diff(self) -> str:
        return queries.get_top_commit_diff(cwd=self.path)

    def commit_sha(self, ref: str = "HEAD") -> str:
        return queries.get_commit_sha(ref, cwd=self.path)

    def find_commit_sha(self, ref: str) -> str | None:
        return queries.find_commit_sha(ref, cwd=self.path)

    def describe(self, sha: str) -> str:
        return queries.describe_commit(sha, cwd=self.path)

    def previous_tag(self) -> str | None:
        return queries.get_previous_tag(cwd=self.path)

    def shortlog(self, revision_range: str) -> str:
        return queries.get_shortlog(revision_range, cwd=self.path)

    def create_tag(self, name: str, sign: bool = True, key: str | None = None) -> None:
        operations.tag(name, message=name, sign=sign, key=key, cwd=self.path)

    def push_tag(self, name: str, remote: str) -> None:
        operations.push_tag(name, remote=remote, cwd=self.path)

    def add_worktree(self, path: Path) -> None:
        operations.add_worktree(path, cwd=self.path)
