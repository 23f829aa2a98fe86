"""Subprocess execution for the external release collaborators.

Every external tool (git, make, meson, ninja, gpg, ssh, scp) is invoked
through run(), which provides:
- shell=False execution from an argument list
- ANSI escape stripping of captured output (keeps versions and tag names clean)
- ShellError carrying the command, exit code and both output streams

No timeout is applied by default: a hung tool blocks the run.
"""

import re
import shlex
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path


class ShellError(Exception):
    """Exception raised when an external command exits non-zero.

    Attributes:
        cmd: The command that failed, shell-quoted
        returncode: Exit code of the failed command
        stdout: Standard output (ANSI stripped)
        stderr: Standard error (ANSI stripped)
    """

    def __init__(
        self,
        cmd: str,
        returncode: int,
        stdout: str,
        stderr: str,
    ) -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(f"Command failed with exit code {returncode}: {cmd}")

    def __str__(self) -> str:
        parts = [f"Command failed: {self.cmd}", f"Exit code: {self.returncode}"]
        if self.stderr:
            parts.append(f"Stderr: {self.stderr.strip()}")
        if self.stdout:
            parts.append(f"Stdout: {self.stdout.strip()}")
        return "\n".join(parts)


# ESC[...m, OSC ... BEL and DCS/PM/APC strings
ANSI_PATTERN = re.compile(
    r"\x1b\[[0-9;]*[a-zA-Z]|\x1b\][^\x07]*\x07|\x1b[PX^_][^\x1b]*\x1b\\"
)

CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences and stray control characters.

    Args:
        text: Input text potentially containing ANSI codes

    Returns:
        Clean text
    """
    if not text:
        return ""
    return CONTROL_CHARS_PATTERN.sub("", ANSI_PATTERN.sub("", text))


def format_command(cmd: Sequence[str]) -> str:
    """Render an argument list as a copy-pasteable shell command."""
    return shlex.join(str(part) for part in cmd)


def run(
    cmd: Sequence[str],
    cwd: Path | None = None,
    check: bool = True,
    timeout: float | None = None,
) -> subprocess.CompletedProcess[str]:
    """Execute an external command and capture its output.

    Output is decoded as UTF-8 with undecodable bytes replaced: old module
    histories carry Latin-1 author names and file contents.

    Args:
        cmd: Command as a list of arguments
        cwd: Working directory for the command
        check: Whether to raise ShellError on non-zero exit
        timeout: Maximum execution time in seconds (None waits forever)

    Returns:
        CompletedProcess with ANSI-stripped stdout/stderr

    Raises:
        ShellError: If the command fails and check=True, or the program
            cannot be started (127 when missing, 126 otherwise)
    """
    cmd_list = [str(c) for c in cmd]

    try:
        result = subprocess.run(
            cmd_list,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except OSError as e:
        raise ShellError(
            cmd=format_command(cmd_list),
            returncode=127 if isinstance(e, FileNotFoundError) else 126,
            stdout="",
            stderr=str(e),
        ) from e

    result.stdout = strip_ansi(result.stdout)
    result.stderr = strip_ansi(result.stderr)

    if check and result.returncode != 0:
        raise ShellError(
            cmd=format_command(cmd_list),
            returncode=result.returncode,
            stdout=result.stdout,
            stderr=result.stderr,
        )

    return result


def run_silent(cmd: Sequence[str], cwd: Path | None = None) -> bool:
    """Execute a command, returning only whether it exited 0.

    Used for existence checks (remote ls, gpg --list-keys) where the
    output is irrelevant.
    """
    try:
        result = run(cmd, cwd=cwd, check=False)
    except ShellError:
        return False
    return result.returncode == 0


def which(program: str) -> Path | None:
    """Find the full path to a program on PATH.

    Args:
        program: Name of the program to find

    Returns:
        Path to the program, or None if not found
    """
    path_str = shutil.which(program)
    return Path(path_str) if path_str else None


def is_command_available(cmd: str) -> bool:
    """Check if a command is available in PATH."""
    return shutil.which(cmd) is not None
