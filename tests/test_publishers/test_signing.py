"""Tests for detached tarball signatures."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from modrelease.build import BuildResult
from modrelease.config.models import ReleaseConfig, ToolsConfig
from modrelease.exceptions import ConfigurationError, SigningError
from modrelease.publishers.base import Signer
from modrelease.publishers.signing import (
    GpgSigner,
    check_gpg_key,
    default_gpg_program,
    sign_artifacts,
    signature_path,
)
from modrelease.utils.shell import ShellError


class TestGpgSigner:
    """Tests for GpgSigner command construction."""

    def test_signs_with_default_key(self, build_result: BuildResult) -> None:
        artifact = build_result.artifacts[0]

        with patch("modrelease.publishers.signing.run") as mock_run:
            sig = GpgSigner("gpg").sign(artifact)

        mock_run.assert_called_once_with(["gpg", "-b", str(artifact)], cwd=artifact.parent)
        assert sig == artifact.with_name("libfoo-1.0.1.tar.gz.sig")

    def test_signs_with_explicit_key(self, build_result: BuildResult) -> None:
        artifact = build_result.artifacts[0]

        with patch("modrelease.publishers.signing.run") as mock_run:
            GpgSigner("gpg2", key="0xDEADBEEF").sign(artifact)

        assert mock_run.call_args.args[0] == ["gpg2", "-b", "-u", "0xDEADBEEF", str(artifact)]

    def test_removes_stale_signature(self, build_result: BuildResult) -> None:
        """A signature left from an earlier run is removed before signing."""
        artifact = build_result.artifacts[0]
        stale = signature_path(artifact)
        stale.write_text("old")

        with patch("modrelease.publishers.signing.run"):
            GpgSigner().sign(artifact)

        assert not stale.exists()

    def test_failure_raises_signing_error(self, build_result: BuildResult) -> None:
        artifact = build_result.artifacts[0]
        error = ShellError("gpg -b", 2, "", "gpg: no default secret key")

        with patch("modrelease.publishers.signing.run", side_effect=error):
            with pytest.raises(SigningError) as exc_info:
                GpgSigner().sign(artifact)

        assert "no default secret key" in (exc_info.value.details or "")


class TestSignArtifacts:
    """Tests for sign_artifacts."""

    def test_signs_every_artifact(self, build_result: BuildResult) -> None:
        signer = MagicMock(spec=Signer)
        signer.sign.side_effect = signature_path

        signatures = sign_artifacts(signer, build_result.artifacts)

        assert list(signatures.signatures) == list(build_result.artifacts)
        assert [s.name for s in signatures.files()] == [
            "libfoo-1.0.1.tar.gz.sig",
            "libfoo-1.0.1.tar.xz.sig",
        ]

    def test_attempts_all_and_reports_all_failures(self, build_result: BuildResult) -> None:
        """Every artifact is attempted; all failures end up in one error."""
        signer = MagicMock(spec=Signer)
        signer.sign.side_effect = [
            SigningError("Failed to sign", details="key expired"),
            SigningError("Failed to sign", details="card removed"),
        ]

        with pytest.raises(SigningError) as exc_info:
            sign_artifacts(signer, build_result.artifacts)

        assert signer.sign.call_count == 2
        details = exc_info.value.details or ""
        assert "libfoo-1.0.1.tar.gz: key expired" in details
        assert "libfoo-1.0.1.tar.xz: card removed" in details

    def test_one_failure_fails_the_set(self, build_result: BuildResult) -> None:
        signer = MagicMock(spec=Signer)
        signer.sign.side_effect = [Path("ok.sig"), SigningError("Failed to sign")]

        with pytest.raises(SigningError):
            sign_artifacts(signer, build_result.artifacts)
        assert signer.sign.call_count == 2


class TestGpgProgram:
    """Tests for GnuPG program and key selection."""

    def test_configured_program(self, clean_env: None) -> None:
        config = ReleaseConfig(tools=ToolsConfig(gpg="/opt/gnupg/bin/gpg"))
        assert default_gpg_program(config) == "/opt/gnupg/bin/gpg"

    def test_prefers_gpg2(self, clean_env: None) -> None:
        with patch("modrelease.publishers.signing.which", return_value=Path("/usr/bin/gpg2")):
            assert default_gpg_program(ReleaseConfig()) == "gpg2"

    def test_falls_back_to_gpg(self, clean_env: None) -> None:
        with patch("modrelease.publishers.signing.which", return_value=None):
            assert default_gpg_program(ReleaseConfig()) == "gpg"

    def test_unknown_key(self) -> None:
        with patch("modrelease.publishers.signing.run_silent", return_value=False) as check:
            with pytest.raises(ConfigurationError) as exc_info:
                check_gpg_key("gpg", "nobody@example.org")

        check.assert_called_once_with(["gpg", "--list-keys", "nobody@example.org"])
        assert "not a known gpg key" in str(exc_info.value)

    def test_known_key(self) -> None:
        with patch("modrelease.publishers.signing.run_silent", return_value=True):
            check_gpg_key("gpg", "release@example.org")
