"""Detached GnuPG signatures for release tarballs."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from modrelease.config.models import ReleaseConfig
from modrelease.exceptions import ConfigurationError, SigningError
from modrelease.publishers.base import Signer
from modrelease.utils.shell import ShellError, run, run_silent, which

console = Console()


def signature_path(artifact: Path) -> Path:
    return artifact.with_name(f"{artifact.name}.sig")


def default_gpg_program(config: ReleaseConfig) -> str:
    """Configured GnuPG program, else gpg2 when installed, else gpg."""
    if config.tools.gpg:
        return config.tools.gpg
    return "gpg2" if which("gpg2") else "gpg"


def check_gpg_key(program: str, key: str) -> None:
    """Make sure a signing key is known to GnuPG.

    Raises:
        ConfigurationError: If the key is not in the keyring
    """
    if not run_silent([program, "--list-keys", key]):
        raise ConfigurationError(
            f"The argument '{key}' is not a known gpg key",
            fix_hint=f"{program} --list-keys",
        )


class GpgSigner(Signer):
    """Signs files with 'gpg -b [-u KEY] FILE'."""

    def __init__(self, program: str = "gpg", key: str | None = None) -> None:
        self.program = program
        self.key = key

    def sign(self, artifact: Path) -> Path:
        sig = signature_path(artifact)
        sig.unlink(missing_ok=True)

        cmd = [self.program, "-b"]
        if self.key:
            cmd.extend(["-u", self.key])
        cmd.append(str(artifact))
        try:
            run(cmd, cwd=artifact.parent)
        except ShellError as e:
            raise SigningError(f"Failed to sign {artifact.name}", details=str(e)) from e
        return sig


@dataclass
class SignatureSet:
    """Detached signature of each signed tarball."""

    signatures: dict[Path, Path] = field(default_factory=dict)

    def files(self) -> list[Path]:
        return list(self.signatures.values())


def sign_artifacts(signer: Signer, artifacts: Sequence[Path]) -> SignatureSet:
    """Sign every tarball, reporting all failures together.

    Raises:
        SigningError: If at least one tarball could not be signed
    """
    signatures = SignatureSet()
    failures: list[str] = []
    for artifact in artifacts:
        try:
            signatures.signatures[artifact] = signer.sign(artifact)
        except SigningError as e:
            console.print(f"[red]Error:[/red] failed to sign {artifact}")
            failures.append(f"{artifact.name}: {e.details or e.message}")

    if failures:
        raise SigningError(
            "Unable to sign at least one of the tarballs",
            details="\n".join(failures),
            fix_hint="Check your GnuPG setup with 'gpg --list-secret-keys'",
        )
    return signatures
