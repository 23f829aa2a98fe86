"""Release gates run before tagging and publishing."""

from modrelease.validators.base import (
    GateChain,
    ModuleContext,
    ValidationResult,
    ValidationSeverity,
    Validator,
)
from modrelease.validators.git import (
    CleanTreeGate,
    LocalCommitGate,
    RemoteConvergenceGate,
    TagConsistencyGate,
)
from modrelease.validators.version import VersionBumpGate


def pre_build_gates() -> GateChain:
    """Gates checked before anything is built."""
    return GateChain([CleanTreeGate()])


def release_gates() -> GateChain:
    """Gates checked once the package version is known, in order."""
    return GateChain(
        [
            VersionBumpGate(),
            LocalCommitGate(),
            RemoteConvergenceGate(),
            TagConsistencyGate(),
        ]
    )


__all__ = [
    "GateChain",
    "ModuleContext",
    "ValidationResult",
    "ValidationSeverity",
    "Validator",
    "CleanTreeGate",
    "VersionBumpGate",
    "LocalCommitGate",
    "RemoteConvergenceGate",
    "TagConsistencyGate",
    "pre_build_gates",
    "release_gates",
]
