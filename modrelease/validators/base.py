"""Base classes for release gates.

A gate checks one precondition of a release and reports it as a
ValidationResult. Gates run in a fixed order through a GateChain, which
stops at the first failure: every gate may rely on facts established by
the gates before it (recorded on the shared ModuleContext).
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from modrelease.exceptions import ValidationError
from modrelease.git.queries import TrackingBranch
from modrelease.git.repository import GitRepository
from modrelease.tags import ReleaseTag, TagState


class ValidationSeverity(Enum):
    """Severity level for validation results.

    - ERROR: Blocks the module release
    - INFO: Informational only
    """

    ERROR = "error"
    INFO = "info"


@dataclass
class ValidationResult:
    """Result of a gate check.

    Attributes:
        passed: Whether the gate passed
        message: Brief description of the result
        severity: How serious the issue is
        details: Extended explanation
        fix_command: Suggested command to fix the issue
    """

    passed: bool
    message: str
    severity: ValidationSeverity = ValidationSeverity.ERROR
    details: str | None = None
    fix_command: str | None = None

    @classmethod
    def success(cls, message: str = "Validation passed") -> "ValidationResult":
        return cls(passed=True, message=message, severity=ValidationSeverity.INFO)

    @classmethod
    def error(
        cls,
        message: str,
        details: str | None = None,
        fix_command: str | None = None,
    ) -> "ValidationResult":
        return cls(
            passed=False,
            message=message,
            severity=ValidationSeverity.ERROR,
            details=details,
            fix_command=fix_command,
        )


@dataclass
class ModuleContext:
    """Facts about the module under release, filled in as gates pass.

    Attributes:
        repo: Repository collaborator of the module checkout
        tracking: Remote branch tracked by the checked-out branch
        package_version: Version reported by the build system
        tag_name: Derived release tag name
        local_sha: Top commit of the checkout
        remote_sha: Top commit of the tracked remote branch
        tag_state: Whether the release tag exists and where it points
    """

    repo: GitRepository
    tracking: TrackingBranch | None = None
    package_version: str | None = None
    tag_name: str | None = None
    local_sha: str | None = None
    remote_sha: str | None = None
    tag_state: TagState | None = None

    @property
    def release_tag(self) -> ReleaseTag | None:
        """The tag to create, once its name and target commit are known."""
        if self.tag_name is None or self.remote_sha is None:
            return None
        return ReleaseTag(self.tag_name, self.remote_sha)


class Validator(ABC):
    """Abstract base class for release gates."""

    name: ClassVar[str]
    description: ClassVar[str]
    error_class: ClassVar[type[ValidationError]] = ValidationError

    @abstractmethod
    def validate(self, context: ModuleContext) -> ValidationResult:
        """Run the check and return its result.

        Args:
            context: Module facts established so far

        Returns:
            ValidationResult indicating pass/fail and details
        """


class GateChain:
    """Ordered, short-circuiting sequence of gates."""

    def __init__(self, gates: Sequence[Validator]) -> None:
        self.gates = list(gates)

    def run(self, context: ModuleContext) -> list[tuple[Validator, ValidationResult]]:
        """Run gates in order up to and including the first failure.

        Returns:
            (gate, result) pairs for every gate that ran
        """
        results = []
        for gate in self.gates:
            result = gate.validate(context)
            results.append((gate, result))
            if not result.passed:
                break
        return results

    def enforce(self, context: ModuleContext) -> list[ValidationResult]:
        """Run the gates and raise on the first failure.

        Returns:
            Results of all gates (all passed)

        Raises:
            ValidationError: The failing gate's error_class, carrying the
                gate's message, details and fix command
        """
        results = self.run(context)
        if results and not results[-1][1].passed:
            gate, last = results[-1]
            raise gate.error_class(
                f"{gate.description}: {last.message}",
                details=last.details,
                fix_hint=last.fix_command,
            )
        return [result for _, result in results]
