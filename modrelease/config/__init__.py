"""Configuration management for the release tool."""

from modrelease.config.loader import load_config
from modrelease.config.models import (
    BuildConfig,
    GitConfig,
    HostsConfig,
    ListsConfig,
    ReleaseConfig,
    ReleaseOptions,
    ToolsConfig,
)

__all__ = [
    "load_config",
    "ReleaseConfig",
    "ReleaseOptions",
    "HostsConfig",
    "ListsConfig",
    "GitConfig",
    "ToolsConfig",
    "BuildConfig",
]
