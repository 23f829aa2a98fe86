"""Signing, uploading and tag publishing."""

from modrelease.publishers.base import Signer, Transfer
from modrelease.publishers.signing import (
    GpgSigner,
    SignatureSet,
    check_gpg_key,
    default_gpg_program,
    sign_artifacts,
)
from modrelease.publishers.transfer import SshTransfer
from modrelease.publishers.upload import ArtifactPublisher, push_release_tag

__all__ = [
    "Signer",
    "Transfer",
    "GpgSigner",
    "SignatureSet",
    "check_gpg_key",
    "default_gpg_program",
    "sign_artifacts",
    "SshTransfer",
    "ArtifactPublisher",
    "push_release_tag",
]
