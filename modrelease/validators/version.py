"""Version bump gate.

The top commit must look like a version bump: its diff against the parent
contains the package version, or touches version component macros such as
m4_define([wayland_major_version], [1]).
"""

import re
from typing import ClassVar

from modrelease.exceptions import GitError
from modrelease.validators.base import ModuleContext, ValidationResult, Validator

VERSION_MACRO_PATTERN = re.compile(r"(major|minor|micro)_version")


def looks_like_version_bump(diff: str, version: str) -> bool:
    """Check a unified diff for the version string or version macros."""
    if version and version in diff:
        return True
    return VERSION_MACRO_PATTERN.search(diff) is not None


class VersionBumpGate(Validator):
    """Top commit bumps the version being released."""

    name: ClassVar[str] = "version_bump"
    description: ClassVar[str] = "Version bump"

    def validate(self, context: ModuleContext) -> ValidationResult:
        version = context.package_version
        if not version:
            return ValidationResult.error(
                message="Cannot check version bump: package version unknown",
            )

        try:
            diff = context.repo.top_commit_diff()
        except GitError as e:
            return ValidationResult.error(
                message="Failed to read the top commit diff",
                details=str(e),
            )

        if looks_like_version_bump(diff, version):
            return ValidationResult.success(f"Top commit bumps version to {version}")

        return ValidationResult.error(
            message="The local top commit does not look like a version bump",
            details=(
                f'The diff does not contain the string "{version}".\n'
                f"The local top commit is: {context.repo.describe('HEAD')}"
            ),
            fix_command="Commit the version bump, push it, and release again",
        )
