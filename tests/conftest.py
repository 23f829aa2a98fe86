"""Pytest fixtures for modrelease tests.

Provides common fixtures for:
- Temporary module directories
- Git repositories, with and without a tracked remote
- Built tarballs
- Environment isolation
"""

import os
import subprocess
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
import yaml

from modrelease.build import BuildKind, BuildResult


def git(*args: str, cwd: Path) -> str:
    """Run a git command in a test repository and return its output."""
    result = subprocess.run(
        ["git", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def commit_file(repo: Path, name: str, content: str, message: str) -> str:
    """Write a file, commit it and return the new commit sha."""
    (repo / name).write_text(content)
    git("add", name, cwd=repo)
    git("commit", "-m", message, cwd=repo)
    return git("rev-parse", "HEAD", cwd=repo)


@pytest.fixture
def temp_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary directory for tests.

    Yields:
        Path to temporary directory
    """
    yield tmp_path
    # Cleanup handled by pytest's tmp_path


@pytest.fixture
def module_dir(temp_dir: Path) -> Path:
    """Create a temporary module directory.

    Returns:
        Path to module directory
    """
    module = temp_dir / "libfoo"
    module.mkdir()
    return module


@pytest.fixture
def git_repo(module_dir: Path) -> Path:
    """Create a git repository with one commit on 'main'.

    Returns:
        Path to git repository
    """
    git("init", "-b", "main", cwd=module_dir)
    git("config", "user.email", "test@test.com", cwd=module_dir)
    git("config", "user.name", "Test User", cwd=module_dir)
    git("config", "commit.gpgsign", "false", cwd=module_dir)
    git("config", "tag.gpgsign", "false", cwd=module_dir)
    commit_file(module_dir, "configure.ac", "AC_INIT([libfoo], [1.0.0])\n", "Initial commit")
    return module_dir


@pytest.fixture
def tracked_repo(git_repo: Path, temp_dir: Path) -> Path:
    """A repository whose 'main' branch tracks origin/main in a bare remote.

    Returns:
        Path to the local repository
    """
    remote = temp_dir / "remote.git"
    subprocess.run(
        ["git", "init", "--bare", str(remote)],
        capture_output=True,
        check=True,
    )
    git("remote", "add", "origin", str(remote), cwd=git_repo)
    git("push", "-u", "origin", "main", cwd=git_repo)
    return git_repo


@pytest.fixture
def build_result(temp_dir: Path) -> BuildResult:
    """Two small tarballs as produced by a build.

    Returns:
        BuildResult for libfoo 1.0.1
    """
    root = temp_dir / "dist"
    root.mkdir()
    artifacts = []
    for suffix in (".tar.gz", ".tar.xz"):
        tarball = root / f"libfoo-1.0.1{suffix}"
        tarball.write_bytes(b"tarball content " + suffix.encode())
        artifacts.append(tarball)
    return BuildResult(
        kind=BuildKind.LEGACY,
        package_name="libfoo",
        package_version="1.0.1",
        artifacts=tuple(artifacts),
        artifact_root=root,
    )


@pytest.fixture
def config_file(temp_dir: Path) -> Path:
    """Create a configuration file overriding a few defaults.

    Returns:
        Path to config file
    """
    config = {
        "hosts": {"upload": "upload.example.org", "xorg": "www.example.org"},
        "lists": {"announce": "announce@example.org"},
        "git": {"sign_tags": False},
        "build": {"dist_target": "dist"},
    }
    config_path = temp_dir / "modrelease.yml"
    config_path.write_text(yaml.safe_dump(config))
    return config_path


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Temporarily clean environment variables.

    Removes MODRELEASE_* environment variables during test.
    """
    old_env = {}
    for key in list(os.environ.keys()):
        if key.startswith("MODRELEASE_"):
            old_env[key] = os.environ.pop(key)

    yield

    os.environ.update(old_env)


@pytest.fixture
def commit() -> Callable[..., str]:
    """Helper committing a file: commit(repo, name, content, message) -> sha."""
    return commit_file


@pytest.fixture
def run_git() -> Callable[..., str]:
    """Helper running git: run_git(*args, cwd=repo) -> stdout."""
    return git
