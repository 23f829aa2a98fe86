"""Git state query operations.

This module provides read-only git operations for inspecting a module
checkout. All functions use modrelease.utils.shell.run() for command
execution and raise GitError on failures.
"""

from dataclasses import dataclass
from pathlib import Path

from modrelease.exceptions import GitError
from modrelease.utils.shell import ShellError, run


@dataclass(frozen=True)
class TrackingBranch:
    """Remote branch tracked by the checked-out local branch."""

    remote: str
    branch: str

    @property
    def ref(self) -> str:
        return f"{self.remote}/{self.branch}"


def is_clean(cwd: Path | None = None) -> bool:
    """Check for uncommitted differences against the checked-out commit.

    Args:
        cwd: Working directory (defaults to current directory)

    Returns:
        True if neither the index nor the working tree differ from HEAD

    Raises:
        GitError: If git diff cannot be run
    """
    result = run(["git", "diff", "--quiet", "HEAD"], cwd=cwd, check=False)
    if result.returncode == 0:
        return True
    if result.returncode == 1:
        return False
    raise GitError(
        "Failed to check for uncommitted changes",
        details=result.stderr.strip() or f"git diff exited {result.returncode}",
        fix_hint="Ensure this is a git repository with at least one commit",
    )


def get_uncommitted_files(cwd: Path | None = None) -> list[str]:
    """List files differing from HEAD.

    Raises:
        GitError: If git command fails
    """
    try:
        result = run(["git", "diff", "--name-only", "HEAD"], cwd=cwd)
    except ShellError as e:
        raise GitError(
            "Failed to list uncommitted files",
            details=str(e),
            fix_hint="git status",
        ) from e
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def get_current_branch(cwd: Path | None = None) -> str:
    """Get the name of the checked-out branch.

    Raises:
        GitError: If HEAD is detached or git fails
    """
    try:
        result = run(["git", "symbolic-ref", "--short", "-q", "HEAD"], cwd=cwd)
    except ShellError as e:
        raise GitError(
            "Failed to get current branch name",
            details=str(e),
            fix_hint="Check out the branch to release; a detached HEAD cannot be released",
        ) from e
    return result.stdout.strip()


def get_config_value(key: str, cwd: Path | None = None) -> str | None:
    """Read a git configuration value, None when unset."""
    result = run(["git", "config", "--get", key], cwd=cwd, check=False)
    if result.returncode == 0:
        return result.stdout.strip()
    if result.returncode == 1:
        return None
    raise GitError(
        f"Failed to read git configuration '{key}'",
        details=result.stderr.strip(),
    )


def get_tracking_branch(branch: str, cwd: Path | None = None) -> TrackingBranch:
    """Resolve the remote and remote branch tracked by a local branch.

    Args:
        branch: Local branch name
        cwd: Working directory (defaults to current directory)

    Returns:
        TrackingBranch for the branch

    Raises:
        GitError: If the branch has no upstream configured
    """
    remote = get_config_value(f"branch.{branch}.remote", cwd=cwd)
    merge = get_config_value(f"branch.{branch}.merge", cwd=cwd)
    if not remote or not merge:
        raise GitError(
            f"Branch '{branch}' is not tracking a remote branch",
            fix_hint=f"git branch --set-upstream-to=origin/{branch} {branch}",
        )
    return TrackingBranch(remote=remote, branch=merge.removeprefix("refs/heads/"))


def get_remote_url(remote: str = "origin", cwd: Path | None = None) -> str:
    """Get the configured url of a git remote.

    Raises:
        GitError: If the remote has no url
    """
    url = get_config_value(f"remote.{remote}.url", cwd=cwd)
    if not url:
        raise GitError(
            f"Unable to obtain git url for remote '{remote}'",
            fix_hint="git remote -v",
        )
    return url


def find_commit_sha(ref: str, cwd: Path | None = None) -> str | None:
    """Resolve a reference to the commit it points at, None if it doesn't exist."""
    result = run(["git", "rev-list", "--max-count=1", ref, "--"], cwd=cwd, check=False)
    sha = result.stdout.strip()
    if result.returncode != 0 or not sha:
        return None
    return sha


def get_commit_sha(ref: str = "HEAD", cwd: Path | None = None) -> str:
    """Get the full SHA of the commit a reference points at.

    Raises:
        GitError: If the reference cannot be resolved
    """
    sha = find_commit_sha(ref, cwd=cwd)
    if sha is None:
        raise GitError(
            f"Unable to resolve git reference '{ref}'",
            fix_hint="Ensure the reference exists; run 'git fetch' for remote branches",
        )
    return sha


def describe_commit(sha: str, cwd: Path | None = None) -> str:
    """One-line description of a commit, or the bare sha if git fails."""
    result = run(["git", "log", "--oneline", "--max-count=1", sha], cwd=cwd, check=False)
    return result.stdout.strip() if result.returncode == 0 else sha


def get_top_commit_diff(cwd: Path | None = None) -> str:
    """Unified diff without context between HEAD's parent and HEAD.

    Raises:
        GitError: If HEAD has no parent or git fails
    """
    try:
        result = run(["git", "diff", "--unified=0", "HEAD^", "HEAD"], cwd=cwd)
    except ShellError as e:
        raise GitError(
            "Failed to diff the top commit against its parent",
            details=str(e),
        ) from e
    return result.stdout


def get_previous_tag(cwd: Path | None = None) -> str | None:
    """Nearest tag reachable from HEAD's parent, None if there is none."""
    result = run(["git", "describe", "--abbrev=0", "HEAD^"], cwd=cwd, check=False)
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def get_shortlog(revision_range: str, cwd: Path | None = None) -> str:
    """Summarise non-merge commits in a range by author.

    Raises:
        GitError: If the range is invalid
    """
    try:
        result = run(["git", "shortlog", "--no-merges", revision_range], cwd=cwd)
    except ShellError as e:
        raise GitError(
            f"Failed to summarise commits in '{revision_range}'",
            details=str(e),
        ) from e
    return result.stdout.rstrip()
