"""Git state modification operations.

This module provides git operations that modify repository state:
release tags, tag pushes and build worktrees. All functions raise GitError
on failures.
"""

from pathlib import Path

from modrelease.exceptions import GitError
from modrelease.utils.shell import ShellError, run


def tag(
    name: str,
    message: str | None = None,
    sign: bool = True,
    key: str | None = None,
    cwd: Path | None = None,
) -> None:
    """Create a tag at HEAD.

    Args:
        name: Tag name (e.g., "libXfoo-1.0.2")
        message: Tag annotation message (defaults to tag name)
        sign: Whether to GPG sign the tag
        key: GPG key to sign with (default key when None)
        cwd: Working directory (defaults to current directory)

    Raises:
        GitError: If tag creation fails
    """
    cmd = ["git", "tag"]
    if key:
        cmd.extend(["-u", key])
    cmd.append("-s" if sign else "-a")
    cmd.extend(["-m", message if message is not None else name, name])

    try:
        run(cmd, cwd=cwd)
    except ShellError as e:
        raise GitError(
            f"Unable to tag module with '{name}'",
            details=str(e),
            fix_hint="Check that your GPG key is usable: gpg --list-secret-keys",
        ) from e


def push_tag(tag: str, remote: str = "origin", cwd: Path | None = None) -> None:
    """Push a single tag to a remote.

    Raises:
        GitError: If push fails
    """
    try:
        run(["git", "push", remote, f"refs/tags/{tag}"], cwd=cwd)
    except ShellError as e:
        raise GitError(
            f"Failed to push tag '{tag}' to remote '{remote}'",
            details=str(e),
        ) from e


def add_worktree(path: Path, cwd: Path | None = None) -> None:
    """Check out HEAD into a new linked worktree at path.

    Raises:
        GitError: If the worktree cannot be created
    """
    try:
        run(["git", "worktree", "add", str(path)], cwd=cwd)
    except ShellError as e:
        raise GitError(
            "Failed to create a git worktree",
            details=str(e),
            fix_hint="git worktree prune",
        ) from e
