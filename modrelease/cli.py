"""Command-line interface for the module release tool.

    modrelease [options] PATH...
    modrelease [options] --modfile FILE

Each PATH is a git checkout of a module. Modules are released in the
given order.
"""

import os
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from modrelease import __version__
from modrelease.config.loader import load_config
from modrelease.config.models import ReleaseConfig, ReleaseOptions
from modrelease.exceptions import ConfigurationError, ReleaseError
from modrelease.orchestrator import Orchestrator
from modrelease.publishers.signing import check_gpg_key, default_gpg_program
from modrelease.tasks import ModuleTask, read_module_list, tasks_from_paths
from modrelease.workflow import ModulePipeline

REQUIRED_UMASK = 0o022

# Create Typer app
app = typer.Typer(
    name="modrelease",
    help="Release modules: build, sign, upload, tag and announce tarballs",
    add_completion=False,
)

# Rich console for formatted output
console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"modrelease version {__version__}")
        raise typer.Exit()


def current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def select_tasks(paths: list[Path] | None, modfile: Path | None) -> list[ModuleTask]:
    """Modules from the command line or from a module-list file.

    Raises:
        ConfigurationError: If both or neither are given
    """
    if paths and modfile is not None:
        raise ConfigurationError("Specifying both modules and --modfile is not permitted")
    if modfile is not None:
        tasks = read_module_list(modfile)
    else:
        tasks = tasks_from_paths(paths or [])
    if not tasks:
        raise ConfigurationError(
            "No modules specified (blank command line)",
            fix_hint="Pass module paths or --modfile FILE",
        )
    return tasks


def check_environment(cfg: ReleaseConfig, options: ReleaseOptions) -> None:
    """Run-wide checks done before any module is touched.

    Raises:
        ConfigurationError: On a bad umask or unknown gpg key
    """
    mask = current_umask()
    if mask != REQUIRED_UMASK:
        raise ConfigurationError(
            f"umask is not 022 (it is {mask:03o})",
            details="Released files must be readable by everyone",
            fix_hint="umask 022",
        )
    if options.gpg_key:
        check_gpg_key(default_gpg_program(cfg), options.gpg_key)


@app.command()
def release(
    paths: list[Path] | None = typer.Argument(  # noqa: B008
        None,
        help="Module checkouts to release",
        show_default=False,
    ),
    dist: bool = typer.Option(  # noqa: B008
        False,
        "--dist",
        help="Package with 'make dist' (faster, no build check)",
    ),
    distcheck: bool = typer.Option(  # noqa: B008
        False,
        "--distcheck",
        help="Package with 'make distcheck' (the default)",
    ),
    dry_run: bool = typer.Option(  # noqa: B008
        False,
        "--dry-run",
        help="Build and check, but do not tag, upload or push",
    ),
    force: bool = typer.Option(  # noqa: B008
        False,
        "--force",
        help="Overwrite tarballs already on the server",
    ),
    gpgkey: str | None = typer.Option(  # noqa: B008
        None,
        "--gpgkey",
        help="Key used to sign the git tag and the tarballs",
    ),
    modfile: Path | None = typer.Option(  # noqa: B008
        None,
        "--modfile",
        help="File listing the modules to release, one per line",
    ),
    moduleset: Path | None = typer.Option(  # noqa: B008
        None,
        "--moduleset",
        help="jhbuild moduleset file to update with the new tarball",
    ),
    no_quit: bool = typer.Option(  # noqa: B008
        False,
        "--no-quit",
        help="Continue with the next module after a failure",
    ),
    user: str = typer.Option(  # noqa: B008
        "",
        "--user",
        help="Account on the upload host, as 'name@'",
    ),
    config: Path | None = typer.Option(  # noqa: B008
        None,
        "--config",
        "-c",
        help="Path to configuration file",
    ),
    version: bool = typer.Option(  # noqa: B008
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Release one or more modules.

    For each module: build the tarballs, check that the top commit is a
    pushed version bump, sign and upload the tarballs, tag and push the
    release, and write the announce e-mail template.

    Examples:
        modrelease lib/libX11
        modrelease --dry-run --modfile modules.txt
        modrelease --no-quit --user jdoe@ driver/xf86-video-intel app/xterm
    """
    try:
        cfg = load_config(config)
        tasks = select_tasks(paths, modfile)

        if dist and distcheck:
            raise ConfigurationError("--dist and --distcheck are mutually exclusive")
        dist_target = "dist" if dist else "distcheck" if distcheck else None
        options = ReleaseOptions(
            dry_run=dry_run,
            force=force,
            continue_on_error=no_quit,
            dist_target=dist_target,
            gpg_key=gpgkey,
            user=user,
            moduleset=moduleset.resolve() if moduleset else None,
        )
        check_environment(cfg, options)

    except ReleaseError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=e.exit_code) from None

    if dry_run:
        console.print(
            Panel("[yellow]DRY RUN MODE[/yellow] - Nothing will be tagged, uploaded or pushed")
        )

    top_src = Path.cwd()
    orchestrator = Orchestrator(
        tasks=tasks,
        pipeline_factory=lambda task: ModulePipeline(task, cfg, options, top_src=top_src),
        continue_on_error=options.continue_on_error,
    )
    report = orchestrator.run()
    if not report.success:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
