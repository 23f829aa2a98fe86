"""Tests for the git query layer against real throw-away repositories."""

from collections.abc import Callable
from pathlib import Path

import pytest

from modrelease.exceptions import GitError
from modrelease.git import (
    TrackingBranch,
    find_commit_sha,
    get_config_value,
    get_current_branch,
    get_previous_tag,
    is_clean,
)
from modrelease.git.repository import GitRepository


class TestQueries:
    """Tests for read-only queries."""

    def test_clean_repository(self, git_repo: Path) -> None:
        assert is_clean(cwd=git_repo) is True

    def test_modified_file(self, git_repo: Path) -> None:
        (git_repo / "configure.ac").write_text("changed\n")

        repo = GitRepository(git_repo)
        assert repo.is_clean() is False
        assert repo.uncommitted_files() == ["configure.ac"]

    def test_staged_change_is_not_clean(self, git_repo: Path, run_git: Callable[..., str]) -> None:
        """Staged but uncommitted changes make the tree dirty."""
        (git_repo / "configure.ac").write_text("changed\n")
        run_git("add", "configure.ac", cwd=git_repo)

        assert is_clean(cwd=git_repo) is False

    def test_not_a_repository(self, temp_dir: Path) -> None:
        plain = temp_dir / "plain"
        plain.mkdir()
        with pytest.raises(GitError):
            is_clean(cwd=plain)

    def test_current_branch(self, git_repo: Path) -> None:
        assert get_current_branch(cwd=git_repo) == "main"

    def test_config_value_missing(self, git_repo: Path) -> None:
        assert get_config_value("branch.main.remote", cwd=git_repo) is None

    def test_untracked_branch(self, git_repo: Path) -> None:
        with pytest.raises(GitError) as exc_info:
            GitRepository(git_repo).tracking_branch()
        assert "not tracking" in str(exc_info.value)

    def test_tracking_branch(self, tracked_repo: Path, temp_dir: Path) -> None:
        repo = GitRepository(tracked_repo)

        tracking = repo.tracking_branch()
        assert tracking == TrackingBranch(remote="origin", branch="main")
        assert tracking.ref == "origin/main"
        assert repo.remote_url("origin") == str(temp_dir / "remote.git")

    def test_remote_top_matches_local(self, tracked_repo: Path) -> None:
        repo = GitRepository(tracked_repo)
        assert repo.commit_sha("origin/main") == repo.commit_sha("HEAD")

    def test_find_commit_sha_missing_ref(self, git_repo: Path) -> None:
        assert find_commit_sha("libfoo-9.9.9", cwd=git_repo) is None

    def test_top_commit_diff(self, git_repo: Path, commit: Callable[..., str]) -> None:
        commit(git_repo, "configure.ac", "AC_INIT([libfoo], [1.0.1])\n", "libfoo 1.0.1")

        diff = GitRepository(git_repo).top_commit_diff()
        assert "+AC_INIT([libfoo], [1.0.1])" in diff

    def test_describe(self, git_repo: Path) -> None:
        repo = GitRepository(git_repo)
        assert "Initial commit" in repo.describe(repo.commit_sha())


class TestTagsAndHistory:
    """Tests for tags, history ranges and shortlog."""

    def test_create_annotated_tag(self, git_repo: Path) -> None:
        repo = GitRepository(git_repo)

        repo.create_tag("libfoo-1.0.0", sign=False)

        assert repo.find_commit_sha("libfoo-1.0.0") == repo.commit_sha()

    def test_duplicate_tag_fails(self, git_repo: Path) -> None:
        repo = GitRepository(git_repo)
        repo.create_tag("libfoo-1.0.0", sign=False)

        with pytest.raises(GitError) as exc_info:
            repo.create_tag("libfoo-1.0.0", sign=False)
        assert "libfoo-1.0.0" in str(exc_info.value)

    def test_previous_tag(self, git_repo: Path, commit: Callable[..., str]) -> None:
        """The previous tag is the nearest tag before HEAD."""
        repo = GitRepository(git_repo)
        repo.create_tag("libfoo-1.0.0", sign=False)
        commit(git_repo, "NEWS", "fixes\n", "Fix a crash")
        commit(git_repo, "configure.ac", "AC_INIT([libfoo], [1.0.1])\n", "libfoo 1.0.1")

        assert repo.previous_tag() == "libfoo-1.0.0"

    def test_no_previous_tag(self, git_repo: Path, commit: Callable[..., str]) -> None:
        commit(git_repo, "NEWS", "fixes\n", "Fix a crash")
        assert get_previous_tag(cwd=git_repo) is None

    def test_shortlog_groups_by_author(self, git_repo: Path, commit: Callable[..., str]) -> None:
        repo = GitRepository(git_repo)
        repo.create_tag("libfoo-1.0.0", sign=False)
        commit(git_repo, "NEWS", "fixes\n", "Fix a crash")

        shortlog = repo.shortlog(f"libfoo-1.0.0..{repo.commit_sha()}")

        assert "Test User (1):" in shortlog
        assert "Fix a crash" in shortlog
        assert "Initial commit" not in shortlog

    def test_push_tag(
        self, tracked_repo: Path, run_git: Callable[..., str], temp_dir: Path
    ) -> None:
        repo = GitRepository(tracked_repo)
        repo.create_tag("libfoo-1.0.0", sign=False)

        repo.push_tag("libfoo-1.0.0", "origin")

        remote_tags = run_git("tag", "--list", cwd=temp_dir / "remote.git")
        assert "libfoo-1.0.0" in remote_tags

    def test_add_worktree(self, git_repo: Path) -> None:
        build_dir = git_repo / "release" / "lib" / "build.test"
        build_dir.mkdir(parents=True)

        GitRepository(git_repo).add_worktree(build_dir)

        assert (build_dir / "configure.ac").is_file()
