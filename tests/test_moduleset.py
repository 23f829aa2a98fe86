"""Tests for the jhbuild moduleset update."""

import hashlib
from pathlib import Path
from unittest.mock import patch

from modrelease.build import BuildResult
from modrelease.moduleset import update_moduleset
from modrelease.utils.shell import ShellError

SCRIPT = Path("/src/util/modular/update-moduleset.sh")


class TestUpdateModuleset:
    """Tests for update_moduleset."""

    def test_runs_update_script_for_first_tarball(
        self, temp_dir: Path, build_result: BuildResult
    ) -> None:
        moduleset = temp_dir / "xorg.modules"
        gz = build_result.artifacts[0]

        with patch("modrelease.moduleset.run") as mock_run:
            assert update_moduleset(moduleset, build_result, SCRIPT) is True

        sha1 = hashlib.sha1(gz.read_bytes()).hexdigest()
        mock_run.assert_called_once_with(
            [str(SCRIPT), str(moduleset), sha1, str(gz)], cwd=gz.parent
        )

    def test_dry_run_skips_update(self, temp_dir: Path, build_result: BuildResult) -> None:
        moduleset = temp_dir / "xorg.modules"

        with patch("modrelease.moduleset.run") as mock_run:
            assert update_moduleset(moduleset, build_result, SCRIPT, dry_run=True) is False
        mock_run.assert_not_called()

    def test_failure_is_a_warning(self, temp_dir: Path, build_result: BuildResult) -> None:
        error = ShellError(str(SCRIPT), 127, "", "No such file or directory")
        with patch("modrelease.moduleset.run", side_effect=error):
            assert update_moduleset(temp_dir / "xorg.modules", build_result, SCRIPT) is False
