"""Uploading signed tarballs and pushing the release tag."""

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console

from modrelease.exceptions import GitError, PublishError, TagPushError
from modrelease.git.repository import GitRepository
from modrelease.publishers.base import Transfer
from modrelease.publishers.signing import SignatureSet
from modrelease.sections import Destination

console = Console()


@dataclass
class ArtifactPublisher:
    """Publishes a module's tarballs to its destination.

    Attributes:
        transfer: Remote access to the upload host
        destination: Resolved destination of the module's section
        dry_run: Only print what would be uploaded
        force: Overwrite tarballs already present on the host
    """

    transfer: Transfer
    destination: Destination
    dry_run: bool = False
    force: bool = False

    def check_destination(self) -> bool:
        """Check that the remote directory exists.

        Returns:
            True if the directory exists. In dry-run mode a missing
            directory is only reported and False is returned.

        Raises:
            PublishError: If the directory is missing
        """
        remote_path = self.destination.remote_path
        if self.transfer.path_exists(remote_path):
            return True

        if self.dry_run:
            console.print(
                f"[yellow]Warning:[/yellow] The remote path {remote_path} does not "
                "appear to exist. The tarballs would fail to upload."
            )
            return False

        raise PublishError(
            f"The remote path {remote_path} does not appear to exist",
            fix_hint="Check the section of the module or create the directory",
        )

    def check_duplicates(self, artifacts: Sequence[Path]) -> list[str]:
        """Look for same-named tarballs on the host.

        Returns:
            Names of tarballs that already exist (only non-empty with force)

        Raises:
            PublishError: If a tarball exists and force is not set
        """
        existing: list[str] = []
        for artifact in artifacts:
            remote_file = f"{self.destination.remote_path}/{artifact.name}"
            if not self.transfer.path_exists(remote_file):
                continue
            if not self.force:
                raise PublishError(
                    f"{remote_file} already exists on the upload host",
                    details="The module appears to have been released already",
                    fix_hint="Bump the version, or pass --force to overwrite",
                )
            console.print(
                f"[yellow]Warning:[/yellow] overwriting {remote_file} (--force)"
            )
            existing.append(artifact.name)
        return existing

    def prepare(self, artifacts: Sequence[Path]) -> None:
        """Run the remote checks that must pass before tagging."""
        if self.check_destination():
            self.check_duplicates(artifacts)

    def upload(self, artifacts: Sequence[Path], signatures: SignatureSet) -> None:
        """Copy tarballs and signatures in one batch.

        Raises:
            TransferError: If the copy fails
        """
        files = [*artifacts, *signatures.files()]
        remote_path = self.destination.remote_path
        if self.dry_run:
            names = " ".join(f.name for f in files)
            console.print(f"Info: would upload {names} to {remote_path}")
            return

        console.print(f"Info: uploading tarballs to {remote_path}")
        self.transfer.copy(files, remote_path)
        console.print("[green]Info:[/green] tarballs uploaded")


def push_release_tag(repo: GitRepository, tag: str, remote: str, dry_run: bool = False) -> None:
    """Push the release tag to the tracked remote.

    Raises:
        TagPushError: If the push fails; the tarballs are already public
    """
    if dry_run:
        console.print(f"Info: would push tag '{tag}' to remote '{remote}'")
        return

    try:
        repo.push_tag(tag, remote)
    except GitError as e:
        raise TagPushError(
            f"Unable to push tag '{tag}' to remote '{remote}'",
            details=e.details or e.message,
            fix_hint=f"The tarballs are already uploaded; do not re-run the release. "
            f"Push the tag manually with: git push {remote} {tag}",
        ) from e
    console.print(f"[green]Info:[/green] pushed tag '{tag}' to '{remote}'")
