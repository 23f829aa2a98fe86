"""Git operations and utilities.

This module provides a clean API for the git operations used by the
release pipeline. All operations use modrelease.utils.shell.run() for
command execution and raise GitError on failures.
"""

from modrelease.git.operations import add_worktree, push_tag, tag
from modrelease.git.queries import (
    TrackingBranch,
    describe_commit,
    find_commit_sha,
    get_commit_sha,
    get_config_value,
    get_current_branch,
    get_previous_tag,
    get_remote_url,
    get_shortlog,
    get_top_commit_diff,
    get_tracking_branch,
    get_uncommitted_files,
    is_clean,
)
from modrelease.git.repository import GitRepository

__all__ = [
    "GitRepository",
    "TrackingBranch",
    # Query operations
    "is_clean",
    "get_uncommitted_files",
    "get_current_branch",
    "get_config_value",
    "get_tracking_branch",
    "get_remote_url",
    "find_commit_sha",
    "get_commit_sha",
    "describe_commit",
    "get_top_commit_diff",
    "get_previous_tag",
    "get_shortlog",
    # Modification operations
    "tag",
    "push_tag",
    "add_worktree",
]
