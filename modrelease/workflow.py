"""Per-module release pipeline.

Releases one module checkout:
1. Module checkout check
2. Section and destination resolution
3. Clean working tree gate
4. Tarball build
5. Release gates (version bump, local commit, remote convergence, tag)
6. Tarball signing
7. Upload destination and duplicate checks
8. Release tag creation
9. Upload
10. Tag push
11. Announcement (best effort)
12. Moduleset update (best effort, optional)

Steps run in order and the first failure stops the module. Destructive steps
(tagging, upload, tag push) are not rolled back.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from modrelease.announce import write_announcement
from modrelease.build import BuildRequest, BuildResult, build_module
from modrelease.config.models import ReleaseConfig, ReleaseOptions
from modrelease.exceptions import GitError, ReleaseError, ValidationError
from modrelease.git.repository import GitRepository
from modrelease.moduleset import update_moduleset
from modrelease.publishers.base import Signer, Transfer
from modrelease.publishers.signing import (
    GpgSigner,
    SignatureSet,
    default_gpg_program,
    sign_artifacts,
)
from modrelease.publishers.transfer import SshTransfer
from modrelease.publishers.upload import ArtifactPublisher, push_release_tag
from modrelease.sections import Destination, DestinationTable, resolve_section
from modrelease.tags import TagState, tag_name_for
from modrelease.tasks import ModuleTask
from modrelease.validators import ModuleContext, pre_build_gates, release_gates

console = Console()

Builder = Callable[[BuildRequest], BuildResult]


@dataclass
class StepResult:
    """Result of a pipeline step."""

    success: bool
    message: str
    details: str | None = None


@dataclass
class ModuleReport:
    """Outcome of releasing one module.

    Attributes:
        task: Module that was processed
        success: Whether every fatal step passed
        failed_step: Name of the step that failed
        error: Error that stopped the module
        tag_name: Release tag, once known
        announcement: Path of the generated announcement, if any
    """

    task: ModuleTask
    success: bool
    failed_step: str | None = None
    error: ReleaseError | None = None
    tag_name: str | None = None
    announcement: Path | None = None

    @property
    def reason(self) -> str:
        if self.error is None:
            return ""
        return self.error.message


@dataclass
class ModulePipeline:
    """Releases a single module.

    External services are injectable; by default git runs in the module
    checkout, tarballs are signed with GnuPG and uploaded with ssh/scp.
    """

    task: ModuleTask
    config: ReleaseConfig
    options: ReleaseOptions
    top_src: Path = field(default_factory=Path.cwd)
    repo: GitRepository | None = None
    builder: Builder = build_module
    signer: Signer | None = None
    transfer: Transfer | None = None
    destinations: DestinationTable | None = None

    # State tracking
    section: str = ""
    destination: Destination | None = None
    context: ModuleContext | None = None
    build: BuildResult | None = None
    signatures: SignatureSet | None = None
    publisher: ArtifactPublisher | None = None

    def __post_init__(self) -> None:
        """Initialize default collaborators."""
        module_root = self.task.path
        if not module_root.is_absolute():
            module_root = self.top_src / module_root
        if self.repo is None:
            self.repo = GitRepository(module_root)
        if self.signer is None:
            self.signer = GpgSigner(default_gpg_program(self.config), self.options.gpg_key)
        if self.transfer is None:
            tools = self.config.tools
            self.transfer = SshTransfer(
                self.config.hosts.upload, self.options.user, ssh=tools.ssh, scp=tools.scp
            )
        if self.destinations is None:
            self.destinations = DestinationTable.from_config(self.config)

    @property
    def tag_name(self) -> str | None:
        return self.context.tag_name if self.context else None

    def run(self) -> ModuleReport:
        """Execute the pipeline.

        Returns:
            ModuleReport; failures are reported, not raised
        """
        steps = [
            ("Checking module", self.check_module),
            ("Resolving section", self.resolve_destination),
            ("Checking working tree", self.check_working_tree),
            ("Building tarballs", self.build_tarballs),
            ("Checking release gates", self.check_release_gates),
            ("Signing tarballs", self.sign_tarballs),
            ("Checking upload destination", self.check_destination),
            ("Tagging release", self.create_tag),
            ("Uploading tarballs", self.upload_tarballs),
            ("Pushing tag", self.push_tag),
        ]

        console.print(f"\n[bold]======== Processing \"{self.task.name}\"[/bold]")
        for step_name, step_func in steps:
            console.print(f"\n[bold cyan]>[/bold cyan] {step_name}...")

            try:
                result = step_func()
            except ReleaseError as e:
                return self.fail(step_name, e)
            except Exception as e:
                error = ReleaseError(
                    f"{step_name} failed unexpectedly",
                    details=f"{type(e).__name__}: {e}",
                )
                return self.fail(step_name, error)

            console.print(f"[green]  {result.message}[/green]")

        announcement = self.announce()
        self.update_moduleset()
        return ModuleReport(
            self.task,
            success=True,
            tag_name=self.tag_name,
            announcement=announcement,
        )

    def fail(self, step_name: str, error: ReleaseError) -> ModuleReport:
        """Report a failed step; the module stops here."""
        console.print(f"[red]  Error: {escape(error.message)}[/red]")
        if error.details:
            console.print(f"[dim]  {escape(error.details)}[/dim]")
        if error.fix_hint:
            console.print(f"[dim]  Fix: {escape(error.fix_hint)}[/dim]")
        return ModuleReport(
            self.task,
            success=False,
            failed_step=step_name,
            error=error,
            tag_name=self.tag_name,
        )

    def check_module(self) -> StepResult:
        """Module path is a git checkout."""
        root = self.repo.path
        if not root.is_dir():
            raise ValidationError(f"{self.task.name} cannot be found under {self.top_src}")
        if not self.repo.is_git_checkout():
            raise GitError(f"There is no git module here: {root}")
        self.context = ModuleContext(repo=self.repo)
        return StepResult(True, f"Git checkout at {root}")

    def resolve_destination(self) -> StepResult:
        """Find the section from the tracked remote URL."""
        tracking = self.repo.tracking_branch()
        url = self.repo.remote_url(tracking.remote)
        self.context.tracking = tracking
        self.section = resolve_section(url)
        self.destination = self.destinations.lookup(self.section)
        self.publisher = ArtifactPublisher(
            transfer=self.transfer,
            destination=self.destination,
            dry_run=self.options.dry_run,
            force=self.options.force,
        )
        return StepResult(
            True,
            f"Section '{self.section}' -> {self.destination.host}/{self.destination.url_path}",
        )

    def check_working_tree(self) -> StepResult:
        pre_build_gates().enforce(self.context)
        return StepResult(True, "Working tree is clean")

    def build_tarballs(self) -> StepResult:
        """Build the release tarballs and derive the tag name."""
        dist_target = self.options.dist_target or self.config.build.dist_target
        self.build = self.builder(
            BuildRequest(
                repo=self.repo,
                section=self.section,
                config=self.config,
                dist_target=dist_target,
            )
        )
        self.context.package_version = self.build.package_version
        self.context.tag_name = tag_name_for(
            self.section, self.build.package_name, self.build.package_version
        )
        names = ", ".join(a.name for a in self.build.artifacts)
        return StepResult(True, f"Built {names}")

    def check_release_gates(self) -> StepResult:
        results = release_gates().enforce(self.context)
        return StepResult(True, results[-1].message)

    def sign_tarballs(self) -> StepResult:
        self.signatures = sign_artifacts(self.signer, self.build.artifacts)
        return StepResult(True, f"Signed {len(self.signatures.signatures)} tarball(s)")

    def check_destination(self) -> StepResult:
        """Upload directory exists and the tarballs are not released yet."""
        self.publisher.prepare(self.build.artifacts)
        return StepResult(True, f"Destination {self.destination.remote_path} checked")

    def create_tag(self) -> StepResult:
        """Tag the top commit unless the tag already points at it."""
        tag = self.context.release_tag
        if self.context.tag_state is TagState.CONSISTENT:
            return StepResult(True, f'Module already tagged with "{tag.name}"')
        if self.options.dry_run:
            return StepResult(True, f'Would tag {tag.target_sha[:12]} with "{tag.name}" (dry run)')

        self.repo.create_tag(tag.name, sign=self.config.git.sign_tags, key=self.options.gpg_key)
        return StepResult(True, f'Module tagged with "{tag.name}"')

    def upload_tarballs(self) -> StepResult:
        self.publisher.upload(self.build.artifacts, self.signatures)
        if self.options.dry_run:
            return StepResult(True, "Skipped tarballs uploading (dry run)")
        return StepResult(True, f"Uploaded to {self.destination.remote_path}")

    def push_tag(self) -> StepResult:
        tag = self.context.tag_name
        remote = self.context.tracking.remote
        push_release_tag(self.repo, tag, remote, dry_run=self.options.dry_run)
        if self.options.dry_run:
            return StepResult(True, "Skipped tag push (dry run)")
        return StepResult(True, f'Tag "{tag}" pushed to "{remote}"')

    def announce(self) -> Path | None:
        """Best effort: a failure is a warning, the release already happened."""
        console.print("\n[bold cyan]>[/bold cyan] Generating announcement...")
        try:
            return write_announcement(
                self.repo,
                self.build,
                self.destination,
                self.context.tag_name,
                self.context.local_sha,
            )
        except Exception as e:
            console.print(
                f"[yellow]Warning:[/yellow] unable to generate the announce: {escape(repr(e))}"
            )
            return None

    def update_moduleset(self) -> bool:
        if self.options.moduleset is None:
            return False
        console.print("\n[bold cyan]>[/bold cyan] Updating moduleset...")
        script = self.top_src / self.config.tools.moduleset_script
        try:
            return update_moduleset(
                self.options.moduleset, self.build, script, dry_run=self.options.dry_run
            )
        except Exception as e:
            console.print(
                f"[yellow]Warning:[/yellow] unable to update moduleset: {escape(repr(e))}"
            )
            return False
