"""Tarball production for autotools and meson modules.

The build system is chosen by probing marker files in the module root,
autotools first:

- LEGACY (autogen.sh): a fresh git worktree is created under
  release/<section>/build.XXXXXXXXXX, configured with autogen.sh and
  packaged with 'make distcheck' (or 'make dist').
- MESON (meson.build): builddir is configured with 'meson setup' and
  packaged with 'ninja dist'; name and version come from
  'meson introspect --projectinfo'.

Both variants end by looking for <name>-<version>.tar.{gz,bz2,xz}.
Build directories and worktrees are left in place for inspection.
"""

import json
import re
import shlex
import tempfile
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from rich.console import Console

from modrelease.config.models import DistTarget, ReleaseConfig
from modrelease.exceptions import BuildError, MissingToolError
from modrelease.git.repository import GitRepository
from modrelease.utils.shell import ShellError, is_command_available, run

console = Console()

ARCHIVE_SUFFIXES = (".tar.gz", ".tar.bz2", ".tar.xz")


class BuildKind(Enum):
    """Build system of a module."""

    LEGACY = "autotools"
    MESON = "meson"


# Detection order matters: a module shipping both is built with autotools
BUILD_MARKERS: tuple[tuple[BuildKind, str], ...] = (
    (BuildKind.LEGACY, "autogen.sh"),
    (BuildKind.MESON, "meson.build"),
)


@dataclass(frozen=True)
class BuildResult:
    """Tarballs produced for one module.

    Attributes:
        kind: Build system used
        package_name: Package name reported by the build system
        package_version: Package version reported by the build system
        artifacts: Existing tarballs, in gz, bz2, xz order
        artifact_root: Directory holding the tarballs
    """

    kind: BuildKind
    package_name: str
    package_version: str
    artifacts: tuple[Path, ...]
    artifact_root: Path

    @property
    def tar_name(self) -> str:
        return f"{self.package_name}-{self.package_version}"


@dataclass(frozen=True)
class BuildRequest:
    """Inputs of a module build."""

    repo: GitRepository
    section: str
    config: ReleaseConfig
    dist_target: DistTarget = "distcheck"

    @property
    def module_root(self) -> Path:
        return self.repo.path


def detect_build_kind(module_root: Path) -> BuildKind:
    """Select the build system from marker files.

    Raises:
        BuildError: If no marker file is present
    """
    for kind, marker in BUILD_MARKERS:
        if (module_root / marker).is_file():
            return kind
    raise BuildError(
        "Cannot find autogen.sh or meson.build",
        details=f"Looked in {module_root}",
    )


def required_tools(kind: BuildKind, config: ReleaseConfig) -> list[str]:
    """Programs that must be on PATH before building a module of this kind."""
    if kind is BuildKind.MESON:
        return [config.tools.meson, config.tools.ninja]
    return []


def check_tools(kind: BuildKind, config: ReleaseConfig) -> None:
    """Raise MissingToolError if a required program is not installed."""
    missing = [tool for tool in required_tools(kind, config) if not is_command_available(tool)]
    if missing:
        raise MissingToolError(
            f"Cannot find required {', '.join(missing)} to build and introspect the project",
            fix_hint="Install the missing tools and make sure they are on PATH",
        )


def collect_artifacts(artifact_root: Path, tar_name: str) -> tuple[Path, ...]:
    """Return the tarballs present for tar_name, in gz, bz2, xz order."""
    candidates = (artifact_root / f"{tar_name}{suffix}" for suffix in ARCHIVE_SUFFIXES)
    return tuple(path for path in candidates if path.is_file())


def _run_step(cmd: Sequence[str], cwd: Path, what: str) -> str:
    try:
        return run(cmd, cwd=cwd).stdout
    except ShellError as e:
        # Build logs are long; keep the end where the error is
        tail = "\n".join((e.stderr or e.stdout).splitlines()[-20:])
        raise BuildError(
            f"{what} failed",
            details=f"{e.cmd} exited {e.returncode}\n{tail}".rstrip(),
        ) from e


def read_makefile_metadata(makefile: Path) -> tuple[str, str]:
    """Read PACKAGE and VERSION from a generated Makefile.

    Raises:
        BuildError: If the Makefile is missing or lacks either variable
    """
    try:
        text = makefile.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise BuildError(f"Unable to read {makefile}", details=str(e)) from e

    name = re.search(r"^PACKAGE = (.*)$", text, re.MULTILINE)
    version = re.search(r"^VERSION = (.*)$", text, re.MULTILINE)
    if not name or not version:
        raise BuildError(
            f"Unable to find PACKAGE and VERSION in {makefile}",
        )
    return name.group(1).strip(), version.group(1).strip()


def build_legacy(request: BuildRequest) -> BuildResult:
    """Build tarballs of an autotools module in a fresh worktree."""
    config = request.config
    # Keep the worktree out of reach of libtool's aux dir search, and give
    # every run a unique worktree (git names its branch after the last part)
    workspace = request.module_root / config.build.workspace_dir / request.section
    try:
        workspace.mkdir(parents=True, exist_ok=True)
        build_dir = Path(tempfile.mkdtemp(prefix="build.", dir=workspace))
    except OSError as e:
        raise BuildError(
            "Could not create a temporary directory for the release",
            details=str(e),
        ) from e

    console.print(f"Info: creating new git worktree in {build_dir}")
    request.repo.add_worktree(build_dir)

    console.print("Info: running autogen.sh")
    _run_step(["./autogen.sh"], build_dir, "Configuring the module")

    make_cmd = [
        config.tools.make,
        *shlex.split(config.tools.makeflags),
        request.dist_target,
    ]
    console.print(f'Info: running "{" ".join(make_cmd)}" to create tarballs')
    _run_step(make_cmd, build_dir, f"make {request.dist_target}")

    name, version = read_makefile_metadata(build_dir / "Makefile")
    return _result(BuildKind.LEGACY, name, version, build_dir)


def read_meson_projectinfo(config: ReleaseConfig, build_dir: Path, cwd: Path) -> tuple[str, str]:
    """Read the project name and version through meson introspection.

    Raises:
        BuildError: If introspection fails or returns unexpected data
    """
    output = _run_step(
        [config.tools.meson, "introspect", str(build_dir), "--projectinfo"],
        cwd,
        "meson introspect",
    )
    try:
        info = json.loads(output)
        name = info["descriptive_name"]
        version = info["version"]
    except (json.JSONDecodeError, KeyError, TypeError) as e:
        raise BuildError(
            "Unable to read project name and version from meson",
            details=f"{type(e).__name__}: {e}",
        ) from e
    if not isinstance(name, str) or not isinstance(version, str) or not name or not version:
        raise BuildError("meson reported an empty project name or version")
    return name, version


def build_meson(request: BuildRequest) -> BuildResult:
    """Build tarballs of a meson module with 'ninja dist'."""
    config = request.config
    root = request.module_root
    build_dir = root / config.build.meson_build_dir

    setup_cmd = [config.tools.meson, "setup", config.build.meson_build_dir]
    if (build_dir / "meson-private").is_dir():
        setup_cmd.append("--reconfigure")
    _run_step(setup_cmd, root, "Configuring the module")

    console.print('Info: running "ninja dist" to create tarball')
    _run_step([config.tools.ninja, "-C", config.build.meson_build_dir, "dist"], root, "ninja dist")

    name, version = read_meson_projectinfo(config, build_dir, root)
    return _result(BuildKind.MESON, name, version, build_dir / "meson-dist")


def _result(kind: BuildKind, name: str, version: str, artifact_root: Path) -> BuildResult:
    tar_name = f"{name}-{version}"
    artifacts = collect_artifacts(artifact_root, tar_name)
    if not artifacts:
        raise BuildError(
            "No compatible tarballs found",
            details=f"Expected {tar_name}{{{','.join(ARCHIVE_SUFFIXES)}}} in {artifact_root}",
        )
    for artifact in artifacts:
        console.print(f"Info: created {artifact} ({artifact.stat().st_size} bytes)")
    return BuildResult(
        kind=kind,
        package_name=name,
        package_version=version,
        artifacts=artifacts,
        artifact_root=artifact_root,
    )


BUILDERS: dict[BuildKind, Callable[[BuildRequest], BuildResult]] = {
    BuildKind.LEGACY: build_legacy,
    BuildKind.MESON: build_meson,
}


def build_module(request: BuildRequest) -> BuildResult:
    """Produce the release tarballs of a module.

    Raises:
        BuildError: If no build system is found, a required tool is missing,
            a build step fails or no tarball was produced
        GitError: If the release worktree cannot be created
    """
    kind = detect_build_kind(request.module_root)
    check_tools(kind, request.config)
    return BUILDERS[kind](request)
