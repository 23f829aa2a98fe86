"""jhbuild moduleset update after a release.

Runs the update script shipped with the modular tree (by default
util/modular/update-moduleset.sh, relative to the directory the release was
started from) with the moduleset file, the sha1 of the released tarball and
the tarball path. Only the first tarball is recorded.
"""

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from modrelease.announce import file_digest
from modrelease.build import BuildResult
from modrelease.utils.shell import ShellError, run

console = Console()


def update_moduleset(
    moduleset: Path,
    build: BuildResult,
    script: Path,
    dry_run: bool = False,
) -> bool:
    """Record the new tarball in a jhbuild moduleset.

    Failures are reported as warnings.

    Returns:
        True if the moduleset was updated
    """
    if not build.artifacts:
        return False

    if dry_run:
        console.print(f'Info: skipping jh moduleset "{moduleset}" update in dry-run mode.')
        return False

    tarball = build.artifacts[0]
    try:
        sha1 = file_digest(tarball, "sha1")
        run([str(script), str(moduleset), sha1, str(tarball)], cwd=tarball.parent)
    except (ShellError, OSError) as e:
        console.print(f"[yellow]Warning:[/yellow] unable to update moduleset: {escape(str(e))}")
        return False

    console.print(f'Info: updated jh moduleset: "{moduleset}"')
    return True
