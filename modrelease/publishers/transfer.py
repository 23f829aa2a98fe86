"""ssh/scp access to the upload host."""

from collections.abc import Sequence
from pathlib import Path

from modrelease.exceptions import TransferError
from modrelease.publishers.base import Transfer
from modrelease.utils.shell import ShellError, run, run_silent


class SshTransfer(Transfer):
    """Checks remote paths with 'ssh ls' and uploads with scp.

    Attributes:
        host: Upload host
        user: Account prefix including the trailing '@', or empty to use
            the ssh configuration
    """

    def __init__(self, host: str, user: str = "", ssh: str = "ssh", scp: str = "scp") -> None:
        self.host = host
        self.user = user
        self.ssh = ssh
        self.scp = scp

    @property
    def target(self) -> str:
        return f"{self.user}{self.host}"

    def path_exists(self, remote_path: str) -> bool:
        return run_silent([self.ssh, self.target, "ls", remote_path])

    def copy(self, files: Sequence[Path], remote_path: str) -> None:
        cmd = [self.scp, *(str(f) for f in files), f"{self.target}:{remote_path}"]
        try:
            run(cmd)
        except ShellError as e:
            raise TransferError(
                "The tarballs uploading failed",
                details=str(e),
                fix_hint="The release tag was already created locally; "
                "fix the upload manually before pushing the tag",
            ) from e
