"""Utility modules for the release tool."""

from modrelease.utils.shell import (
    ShellError,
    format_command,
    is_command_available,
    run,
    run_silent,
    strip_ansi,
    which,
)

__all__ = [
    "run",
    "run_silent",
    "strip_ansi",
    "format_command",
    "which",
    "is_command_available",
    "ShellError",
]
