"""Collaborator interfaces for publishing tarballs.

Publishing needs two external services:
- a Signer producing a detached signature next to each tarball
- a Transfer reaching the upload host over a remote shell

The pipeline only depends on these interfaces, so publication logic
(existence checks, overwrite policy, simulate-only mode) can be exercised
with in-memory stand-ins.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path


class Signer(ABC):
    """Produces detached signatures."""

    @abstractmethod
    def sign(self, artifact: Path) -> Path:
        """Sign a file.

        Args:
            artifact: File to sign

        Returns:
            Path of the detached signature (artifact path + ".sig")

        Raises:
            SigningError: If the signing tool fails
        """


class Transfer(ABC):
    """Remote file operations on the upload host."""

    @abstractmethod
    def path_exists(self, remote_path: str) -> bool:
        """Check whether a file or directory exists on the upload host."""

    @abstractmethod
    def copy(self, files: Sequence[Path], remote_path: str) -> None:
        """Copy local files into a remote directory in one batch.

        Raises:
            TransferError: If the copy fails
        """
