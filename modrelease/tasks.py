"""Module tasks and module-list files.

A module-list file names one module path per line. Blank lines and lines
whose first non-space character is '#' are ignored.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from modrelease.exceptions import ConfigurationError


@dataclass(frozen=True)
class ModuleTask:
    """One module checkout to release.

    Attributes:
        path: Path to the module's git checkout, as given by the user
    """

    path: Path

    @property
    def name(self) -> str:
        """Identifier used in progress output and the failure ledger."""
        return str(self.path)


def parse_module_list(text: str) -> list[str]:
    """Extract module paths from module-list text.

    Args:
        text: Contents of a module-list file

    Returns:
        Module paths in file order
    """
    modules = []
    for line in text.splitlines():
        entry = line.strip()
        if not entry or entry.startswith("#"):
            continue
        modules.append(entry)
    return modules


def read_module_list(path: Path) -> list[ModuleTask]:
    """Read a module-list file into tasks.

    Args:
        path: Module-list file

    Returns:
        One ModuleTask per listed module

    Raises:
        ConfigurationError: If the file is missing or unreadable
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Module file '{path}' is not readable or does not exist",
            details=str(e),
        ) from e
    return [ModuleTask(Path(entry)) for entry in parse_module_list(text)]


def tasks_from_paths(paths: Iterable[str | Path]) -> list[ModuleTask]:
    """Build tasks from module paths given on the command line."""
    return [ModuleTask(Path(p)) for p in paths]
