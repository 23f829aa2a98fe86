"""Git state gates for module releases.

- Working tree is clean
- Top commit sha is known
- Top commit has been pushed to the tracked remote branch
- An existing release tag points at that commit
"""

from typing import ClassVar

from modrelease.exceptions import GitError, TagConflictError
from modrelease.tags import TagState
from modrelease.validators.base import ModuleContext, ValidationResult, Validator

STASH_HINT = (
    "You can perform a 'git stash' to save your local changes and a "
    "'git stash apply' to recover them after the tarball release. "
    "Alternatively, clone the module in another directory."
)


class CleanTreeGate(Validator):
    """No uncommitted differences versus the checked-out commit.

    Tarballs are built from the committed state; local edits would make
    them differ from what gets tagged.
    """

    name: ClassVar[str] = "clean_tree"
    description: ClassVar[str] = "Clean working tree"

    def validate(self, context: ModuleContext) -> ValidationResult:
        try:
            if context.repo.is_clean():
                return ValidationResult.success("Working tree is clean")

            files = context.repo.uncommitted_files()
        except GitError as e:
            return ValidationResult.error(
                message="Failed to check for uncommitted changes",
                details=str(e),
                fix_command="git status",
            )

        file_list = "\n".join(f"  - {f}" for f in files[:10])
        if len(files) > 10:
            file_list += f"\n  ... and {len(files) - 10} more"
        return ValidationResult.error(
            message="Uncommitted changes found. Did you forget to commit?",
            details=f"{file_list}\n{STASH_HINT}".lstrip(),
            fix_command="git stash",
        )


class LocalCommitGate(Validator):
    """Resolve the top commit of the checkout."""

    name: ClassVar[str] = "local_commit"
    description: ClassVar[str] = "Local top commit"

    def validate(self, context: ModuleContext) -> ValidationResult:
        try:
            context.local_sha = context.repo.commit_sha("HEAD")
        except GitError as e:
            return ValidationResult.error(
                message="Unable to obtain the local top commit id",
                details=str(e),
            )
        return ValidationResult.success(f"Local top commit is {context.local_sha}")


class RemoteConvergenceGate(Validator):
    """The local top commit is the top of the tracked remote branch.

    Unpushed work is never released.
    """

    name: ClassVar[str] = "remote_convergence"
    description: ClassVar[str] = "Top commit pushed"

    def validate(self, context: ModuleContext) -> ValidationResult:
        if context.tracking is None or context.local_sha is None:
            return ValidationResult.error(
                message="Cannot compare with remote: tracking branch or local commit unknown",
            )

        remote_ref = context.tracking.ref
        try:
            context.remote_sha = context.repo.commit_sha(remote_ref)
        except GitError as e:
            return ValidationResult.error(
                message=f"Unable to obtain top commit of '{remote_ref}'",
                details=str(e),
                fix_command=f"git fetch {context.tracking.remote}",
            )

        if context.remote_sha != context.local_sha:
            return ValidationResult.error(
                message="The local top commit has not been pushed to the remote",
                details=(
                    f"local top commit: {context.repo.describe(context.local_sha)}\n"
                    f"top of {remote_ref}: {context.repo.describe(context.remote_sha)}"
                ),
                fix_command=f"git push {context.tracking.remote} HEAD:{context.tracking.branch}",
            )
        return ValidationResult.success(f"Top commit matches {remote_ref}")


class TagConsistencyGate(Validator):
    """An existing release tag must point at the released commit.

    A tag on another commit means the version string was already used
    for a different release.
    """

    name: ClassVar[str] = "tag_consistency"
    description: ClassVar[str] = "Release tag"
    error_class = TagConflictError

    def validate(self, context: ModuleContext) -> ValidationResult:
        release_tag = context.release_tag
        if release_tag is None:
            return ValidationResult.error(
                message="Cannot check tag: tag name or remote top commit unknown",
            )

        tag_name = release_tag.name
        try:
            tagged_sha = context.repo.find_commit_sha(tag_name)
        except GitError as e:
            return ValidationResult.error(
                message=f"Failed to look up tag '{tag_name}'",
                details=str(e),
            )

        context.tag_state = release_tag.classify(tagged_sha)
        if context.tag_state is TagState.INCONSISTENT:
            return ValidationResult.error(
                message=f"Tag '{tag_name}' already exists and is not tagging the top commit",
                details=(
                    f"top commit: {context.repo.describe(context.remote_sha)}\n"
                    f"tag '{tag_name}' is tagging: {context.repo.describe(tagged_sha or '')}"
                ),
                fix_command="Bump the version, or inspect what was released under this tag",
            )
        if context.tag_state is TagState.CONSISTENT:
            return ValidationResult.success(f"Module already tagged with '{tag_name}'")
        return ValidationResult.success(f"Tag '{tag_name}' is available")
