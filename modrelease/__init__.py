"""Release automation for independently versioned modules."""

__version__ = "0.1.0"

from modrelease.exceptions import (
    BuildError,
    ConfigurationError,
    GitError,
    MissingToolError,
    PublishError,
    ReleaseError,
    SectionError,
    SigningError,
    TagConflictError,
    TagPushError,
    TransferError,
    ValidationError,
)

__all__ = [
    "__version__",
    "ReleaseError",
    "ConfigurationError",
    "ValidationError",
    "TagConflictError",
    "GitError",
    "PublishError",
    "SigningError",
    "TransferError",
    "TagPushError",
    "SectionError",
    "BuildError",
    "MissingToolError",
]
