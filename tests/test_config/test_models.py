"""Unit tests for Pydantic configuration models.

Tests cover:
- Default value behavior
- Model validation with invalid inputs
- Field validators
- Environment variable override support (ReleaseConfig)
"""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from modrelease.config.models import (
    BuildConfig,
    HostsConfig,
    ListsConfig,
    ReleaseConfig,
    ReleaseOptions,
    ToolsConfig,
)


class TestHostsAndLists:
    """Tests for host and mailing list defaults."""

    def test_default_hosts(self) -> None:
        """HostsConfig defaults to the freedesktop.org hosts."""
        hosts = HostsConfig()
        assert hosts.upload == "annarchy.freedesktop.org"
        assert hosts.xorg == "xorg.freedesktop.org"
        assert hosts.wayland == "wayland.freedesktop.org"

    def test_default_lists(self) -> None:
        """ListsConfig defaults to the announce and project lists."""
        lists = ListsConfig()
        assert lists.announce == "xorg-announce@lists.x.org"
        assert lists.mesa_announce == "mesa-announce@lists.freedesktop.org"


class TestToolsConfig:
    """Tests for ToolsConfig environment-derived defaults."""

    def test_make_honours_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """ToolsConfig picks make and its flags from $MAKE and $MAKEFLAGS."""
        monkeypatch.setenv("MAKE", "gmake")
        monkeypatch.setenv("MAKEFLAGS", "-j4")

        tools = ToolsConfig()
        assert tools.make == "gmake"
        assert tools.makeflags == "-j4"

    def test_make_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """ToolsConfig falls back to plain make without flags."""
        monkeypatch.delenv("MAKE", raising=False)
        monkeypatch.delenv("MAKEFLAGS", raising=False)

        tools = ToolsConfig()
        assert tools.make == "make"
        assert tools.makeflags == ""
        assert tools.gpg is None


class TestBuildConfig:
    """Tests for BuildConfig validation."""

    def test_default_dist_target(self) -> None:
        """BuildConfig packages with distcheck by default."""
        assert BuildConfig().dist_target == "distcheck"

    def test_invalid_dist_target(self) -> None:
        """BuildConfig rejects make targets other than dist and distcheck."""
        with pytest.raises(ValidationError):
            BuildConfig(dist_target="install")  # type: ignore[arg-type]


class TestReleaseConfig:
    """Tests for root ReleaseConfig model with environment variable support."""

    def test_defaults(self, clean_env: None) -> None:
        """ReleaseConfig needs no explicit values."""
        config = ReleaseConfig()
        assert config.git.sign_tags is True
        assert config.build.workspace_dir == "release"
        assert config.tools.moduleset_script == "util/modular/update-moduleset.sh"

    def test_environment_variable_override(self, clean_env: None) -> None:
        """ReleaseConfig supports MODRELEASE_ prefixed environment variables."""
        os.environ["MODRELEASE_HOSTS__UPLOAD"] = "shell.example.org"

        try:
            config = ReleaseConfig()
            assert config.hosts.upload == "shell.example.org"
            assert config.hosts.xorg == "xorg.freedesktop.org"
        finally:
            os.environ.pop("MODRELEASE_HOSTS__UPLOAD", None)

    def test_config_is_frozen(self, clean_env: None) -> None:
        """ReleaseConfig cannot be modified after loading."""
        config = ReleaseConfig()
        with pytest.raises(ValidationError):
            config.hosts = HostsConfig(upload="other")  # type: ignore[misc]


class TestReleaseOptions:
    """Tests for ReleaseOptions command line flags."""

    def test_defaults(self) -> None:
        """ReleaseOptions defaults to a real, stop-on-error release."""
        options = ReleaseOptions()
        assert options.dry_run is False
        assert options.force is False
        assert options.continue_on_error is False
        assert options.dist_target is None
        assert options.user == ""

    @pytest.mark.parametrize(
        ("user", "expected"),
        [("jdoe", "jdoe@"), ("jdoe@", "jdoe@"), ("", "")],
    )
    def test_user_gets_at_suffix(self, user: str, expected: str) -> None:
        """ReleaseOptions normalises the upload account to 'name@'."""
        assert ReleaseOptions(user=user).user == expected

    def test_moduleset_path(self, temp_dir: Path) -> None:
        """ReleaseOptions keeps the moduleset path as given."""
        moduleset = temp_dir / "xorg.modules"
        assert ReleaseOptions(moduleset=moduleset).moduleset == moduleset
