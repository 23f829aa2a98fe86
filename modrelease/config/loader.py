"""Configuration file loading utilities.

Supports loading configuration from YAML and TOML files with:
- Automatic format detection
- Error reporting with file location
- Defaults when no file is present
"""

import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from modrelease.config.models import ReleaseConfig
from modrelease.exceptions import ConfigurationError

# Import tomli for Python < 3.11, tomllib for 3.11+
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

SEARCH_PATHS = (
    "modrelease.yml",
    "modrelease.yaml",
    "modrelease.toml",
)


def load_yaml(path: Path) -> dict[str, Any]:
    """Load a YAML configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed YAML as dictionary

    Raises:
        ConfigurationError: If file cannot be read or parsed
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if data else {}
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {path}",
            fix_hint="Create the file or drop the --config option",
        ) from None
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in {path}",
            details=str(e),
            fix_hint="Check YAML syntax at the indicated line",
        ) from e


def load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML configuration file.

    Args:
        path: Path to the TOML file

    Returns:
        Parsed TOML as dictionary

    Raises:
        ConfigurationError: If file cannot be read or parsed
    """
    try:
        with open(path, "rb") as f:
            data: dict[str, Any] = tomllib.load(f)
            return data
    except FileNotFoundError:
        raise ConfigurationError(
            f"Configuration file not found: {path}",
            fix_hint="Create the file or drop the --config option",
        ) from None
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(
            f"Invalid TOML in {path}",
            details=str(e),
            fix_hint="Check TOML syntax at the indicated line",
        ) from e


def find_config(search_root: Path) -> Path | None:
    """Return the first configuration file found in search_root, if any."""
    for name in SEARCH_PATHS:
        candidate = search_root / name
        if candidate.exists():
            return candidate
    return None


def load_config(
    path: Path | None = None,
    search_root: Path | None = None,
) -> ReleaseConfig:
    """Load release configuration.

    An explicit path must exist. Without one, search_root (default: cwd)
    is searched for modrelease.yml, modrelease.yaml and modrelease.toml;
    when none exists the built-in defaults are used.

    Args:
        path: Explicit path to config file
        search_root: Directory searched when path is not given

    Returns:
        Validated ReleaseConfig instance

    Raises:
        ConfigurationError: If config is missing (explicit path) or invalid
    """
    config_path = path if path is not None else find_config(search_root or Path.cwd())

    if config_path is None:
        data: dict[str, Any] = {}
    elif config_path.suffix in (".yml", ".yaml"):
        data = load_yaml(config_path)
    elif config_path.suffix == ".toml":
        data = load_toml(config_path)
    else:
        raise ConfigurationError(
            f"Unsupported config format: {config_path.suffix}",
            fix_hint="Use .yml, .yaml, or .toml extension",
        )

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid configuration in {config_path}",
            details="Top level must be a mapping",
        )

    try:
        return ReleaseConfig(**data)
    except PydanticValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in {config_path}",
            details=str(e),
            fix_hint="Check the configuration values match expected types",
        ) from e
