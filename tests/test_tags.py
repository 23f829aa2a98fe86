"""Tests for release tag naming and classification."""

import pytest

from modrelease.tags import ReleaseTag, TagState, classify_tag, tag_name_for


class TestTagNameFor:
    """Tests for tag_name_for."""

    @pytest.mark.parametrize("section", ["app", "lib", "driver", "xcb", "drm", "mesa"])
    def test_default_is_name_dash_version(self, section: str) -> None:
        assert tag_name_for(section, "libfoo", "1.2.3") == "libfoo-1.2.3"

    @pytest.mark.parametrize("section", ["wayland", "weston", "libinput"])
    def test_bare_version_sections(self, section: str) -> None:
        assert tag_name_for(section, section, "1.22.0") == "1.22.0"

    def test_evemu_uses_v_prefix(self) -> None:
        assert tag_name_for("evemu", "evemu", "2.7.0") == "v2.7.0"


class TestClassifyTag:
    """Tests for classify_tag."""

    def test_absent(self) -> None:
        assert classify_tag(None, "abc123") is TagState.ABSENT

    def test_consistent(self) -> None:
        assert classify_tag("abc123", "abc123") is TagState.CONSISTENT

    def test_inconsistent(self) -> None:
        """A tag with the right name on another commit is inconsistent."""
        assert classify_tag("def456", "abc123") is TagState.INCONSISTENT


class TestReleaseTag:
    """Tests for ReleaseTag.classify."""

    def test_classify_against_target(self) -> None:
        tag = ReleaseTag("libfoo-1.0.1", "abc123")

        assert tag.classify(None) is TagState.ABSENT
        assert tag.classify("abc123") is TagState.CONSISTENT
        assert tag.classify("def456") is TagState.INCONSISTENT
