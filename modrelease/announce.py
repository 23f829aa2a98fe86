"""Release announcement e-mail template.

The announcement is written next to the tarballs as <name>-<version>.announce
for the release manager to review, sign and send. Generating it never fails a
release: errors are reported as warnings.
"""

import hashlib
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from modrelease.build import BuildResult
from modrelease.exceptions import ReleaseError
from modrelease.git.repository import GitRepository
from modrelease.sections import Destination

console = Console()

HASH_CHUNK_SIZE = 65536

# Tarballs are listed bz2 first, as in the historical announcements
ANNOUNCE_ORDER = (".tar.bz2", ".tar.gz", ".tar.xz")


def file_digest(path: Path, algorithm: str) -> str:
    """Hex digest of a file's content."""
    digest = hashlib.new(algorithm)
    with path.open("rb") as f:
        while chunk := f.read(HASH_CHUNK_SIZE):
            digest.update(chunk)
    return digest.hexdigest()


def announce_order(artifacts: Sequence[Path]) -> list[Path]:
    def rank(path: Path) -> int:
        for index, suffix in enumerate(ANNOUNCE_ORDER):
            if path.name.endswith(suffix):
                return index
        return len(ANNOUNCE_ORDER)

    return sorted(artifacts, key=rank)


@dataclass(frozen=True)
class Announcement:
    """Everything rendered into the announcement."""

    package_name: str
    package_version: str
    tag_name: str
    destination: Destination
    shortlog: str
    artifacts: Sequence[Path]

    def render(self) -> str:
        lines = [
            f"Subject: [ANNOUNCE] {self.package_name} {self.package_version}",
            f"To: {self.destination.list_to}",
        ]
        if self.destination.list_cc:
            lines.append(f"Cc: {self.destination.list_cc}")
        lines.extend(["", self.shortlog.rstrip(), "", f"git tag: {self.tag_name}", ""])

        for artifact in announce_order(self.artifacts):
            url = self.destination.url(artifact.name)
            lines.extend(
                [
                    url,
                    f"SHA256: {file_digest(artifact, 'sha256')}  {artifact.name}",
                    f"SHA512: {file_digest(artifact, 'sha512')}  {artifact.name}",
                    f"PGP:  {url}.sig",
                    "",
                ]
            )
        return "\n".join(lines)


def history_range(repo: GitRepository, tag_name: str, local_sha: str) -> str:
    """Commit range covered by this release.

    The range starts at the most recent tag before HEAD. On a branch without
    earlier tags the new tag name alone is used. The local commit is used
    rather than the tag because the tag does not exist in dry-run mode.
    """
    previous = repo.previous_tag()
    if previous is None:
        console.print(
            "[yellow]Warning:[/yellow] unable to find a previous tag, "
            "perhaps a first release on this branch.\n"
            "         Please check the commit history in the announce."
        )
        return tag_name
    return f"{previous}..{local_sha}"


def write_announcement(
    repo: GitRepository,
    build: BuildResult,
    destination: Destination,
    tag_name: str,
    local_sha: str,
) -> Path | None:
    """Generate <artifact_root>/<tar_name>.announce.

    Returns:
        Path of the written file, or None if generation failed
    """
    try:
        announcement = Announcement(
            package_name=build.package_name,
            package_version=build.package_version,
            tag_name=tag_name,
            destination=destination,
            shortlog=repo.shortlog(history_range(repo, tag_name, local_sha)),
            artifacts=build.artifacts,
        )
        path = build.artifact_root / f"{build.tar_name}.announce"
        path.write_text(announcement.render(), encoding="utf-8")
    except (ReleaseError, OSError, ValueError) as e:
        console.print(
            f"[yellow]Warning:[/yellow] unable to generate the announce: {escape(str(e))}"
        )
        return None

    console.print(f'Info: \\[ANNOUNCE] template generated in "{path}" file.')
    console.print("      Please pgp sign and send it.")
    return path
