"""Custom exception hierarchy for the module release tool.

Exit codes follow Unix conventions:
- 1: General error
- 2: Configuration error
- 3: Validation error
- 4: Git error
- 5: Publish error
- 6: Section resolution error
- 9: Build error
"""


class ReleaseError(Exception):
    """Base exception for all release errors.

    All release-related exceptions inherit from this class.
    Each subclass defines an exit_code for CLI error reporting.
    """

    exit_code: int = 1

    def __init__(
        self,
        message: str,
        details: str | None = None,
        fix_hint: str | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Brief error message
            details: Detailed explanation of what went wrong
            fix_hint: Suggested command or action to fix the issue
        """
        super().__init__(message)
        self.message = message
        self.details = details
        self.fix_hint = fix_hint

    def __str__(self) -> str:
        parts = [self.message]
        if self.details:
            parts.append(f"\nDetails: {self.details}")
        if self.fix_hint:
            parts.append(f"\nFix: {self.fix_hint}")
        return "".join(parts)


class ConfigurationError(ReleaseError):
    """Configuration and argument errors.

    Raised when:
    - Config file has invalid syntax (YAML/TOML)
    - Config values fail validation
    - Module list file is unreadable
    - Command line arguments are inconsistent

    These abort the whole run before any module is processed.
    """

    exit_code = 2


class ValidationError(ReleaseError):
    """Release gate failures.

    Raised when:
    - Working tree has uncommitted changes
    - Top commit does not look like a version bump
    - Top commit has not been pushed to the tracked remote
    """

    exit_code = 3


class TagConflictError(ValidationError):
    """An existing release tag points at a different commit.

    The version string has already been used for another commit. This may
    mean a release was already (partially) published.
    """


class GitError(ReleaseError):
    """Git operation failures.

    Raised when:
    - Git commands fail
    - Tracking branch configuration is missing
    - Tag creation fails
    - Worktree creation fails
    """

    exit_code = 4


class PublishError(ReleaseError):
    """Publishing failures.

    Raised when:
    - Remote destination path does not exist
    - A tarball with the same name was already uploaded
    """

    exit_code = 5


class SigningError(PublishError):
    """One or more tarballs could not be signed."""


class TransferError(PublishError):
    """Copying tarballs and signatures to the web server failed."""


class TagPushError(PublishError):
    """Pushing the release tag failed after the upload succeeded.

    The tag exists locally and the tarballs are on the server, so running
    the release again is unsafe. Requires manual remediation.
    """


class SectionError(ReleaseError):
    """The module's remote url could not be mapped to a publication section."""

    exit_code = 6


class BuildError(ReleaseError):
    """Build tooling failures.

    Raised when:
    - Neither autogen.sh nor meson.build is present
    - Configure or dist target fails
    - Package name/version cannot be determined
    - No tarball was produced
    """

    exit_code = 9


class MissingToolError(BuildError):
    """A tool required by the selected build system is not installed."""
