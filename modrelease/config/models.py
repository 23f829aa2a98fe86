"""Pydantic v2 configuration models.

Two kinds of configuration feed the release pipeline:

- ReleaseConfig: process-wide, read-only settings (hosts, mailing lists,
  tool names, build layout). Loaded from an optional modrelease.yml /
  modrelease.toml and overridable with MODRELEASE_* environment variables.
- ReleaseOptions: per-invocation flags coming from the command line
  (dry run, force, continue on error, signing key, ...).
"""

import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

DistTarget = Literal["distcheck", "dist"]


class HostsConfig(BaseModel):
    """Web hosts releases are published to.

    Most hostnames double as /srv subdirectories on the upload host.
    """

    upload: str = Field(
        default="annarchy.freedesktop.org",
        description="Shell host used for ssh/scp uploads",
    )
    fdo: str = Field(default="www.freedesktop.org")
    xorg: str = Field(default="xorg.freedesktop.org")
    dri: str = Field(default="dri.freedesktop.org")
    mesa: str = Field(default="mesa.freedesktop.org")
    wayland: str = Field(default="wayland.freedesktop.org")


class ListsConfig(BaseModel):
    """Mailing lists used in release announcements."""

    announce: str = Field(
        default="xorg-announce@lists.x.org",
        description="Default list receiving every [ANNOUNCE] e-mail",
    )
    xorg_user: str = Field(default="xorg@lists.x.org")
    dri_devel: str = Field(default="dri-devel@lists.freedesktop.org")
    mesa_announce: str = Field(default="mesa-announce@lists.freedesktop.org")
    mesa_devel: str = Field(default="mesa-dev@lists.freedesktop.org")
    xkb: str = Field(default="xkb@listserv.bat.ru")
    xcb: str = Field(default="xcb@lists.freedesktop.org")
    nouveau: str = Field(default="nouveau@lists.freedesktop.org")
    wayland: str = Field(default="wayland-devel@lists.freedesktop.org")
    input: str = Field(default="input-tools@lists.freedesktop.org")


class GitConfig(BaseModel):
    """Git tagging configuration."""

    sign_tags: bool = Field(
        default=True,
        description="GPG sign release tags",
    )


class ToolsConfig(BaseModel):
    """Names of the external programs the pipeline drives."""

    make: str = Field(
        default_factory=lambda: os.environ.get("MAKE", "make"),
        description="make program (honours $MAKE)",
    )
    makeflags: str = Field(
        default_factory=lambda: os.environ.get("MAKEFLAGS", ""),
        description="Extra make arguments (honours $MAKEFLAGS)",
    )
    meson: str = Field(default="meson", description="meson program")
    ninja: str = Field(default="ninja", description="ninja program")
    gpg: str | None = Field(
        default=None,
        description="GnuPG program (gpg2 if installed, else gpg)",
    )
    ssh: str = Field(default="ssh")
    scp: str = Field(default="scp")
    moduleset_script: str = Field(
        default="util/modular/update-moduleset.sh",
        description="jhbuild moduleset updater, relative to the invocation directory",
    )


class BuildConfig(BaseModel):
    """Build layout configuration."""

    dist_target: DistTarget = Field(
        default="distcheck",
        description="make target producing tarballs for autotools modules",
    )
    workspace_dir: str = Field(
        default="release",
        description="Directory under the module root holding release worktrees",
    )
    meson_build_dir: str = Field(
        default="builddir",
        description="meson build directory under the module root",
    )


class ReleaseConfig(BaseSettings):
    """Root configuration model.

    Supports environment variable overrides with MODRELEASE_ prefix.
    Example: MODRELEASE_HOSTS__UPLOAD=shell.example.org
    """

    hosts: HostsConfig = Field(default_factory=HostsConfig)
    lists: ListsConfig = Field(default_factory=ListsConfig)
    git: GitConfig = Field(default_factory=GitConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)

    model_config = {
        "env_prefix": "MODRELEASE_",
        "env_nested_delimiter": "__",
        "frozen": True,
    }


class ReleaseOptions(BaseModel):
    """Command line flags for one invocation."""

    dry_run: bool = Field(
        default=False,
        description="Do everything except tagging, uploading and pushing",
    )
    force: bool = Field(
        default=False,
        description="Overwrite tarballs already present on the server",
    )
    continue_on_error: bool = Field(
        default=False,
        description="Keep processing modules after a failure",
    )
    dist_target: DistTarget | None = Field(
        default=None,
        description="Override of build.dist_target",
    )
    gpg_key: str | None = Field(
        default=None,
        description="Key used to sign tags and tarballs",
    )
    user: str = Field(
        default="",
        description="Account on the upload host, as 'name@'",
    )
    moduleset: Path | None = Field(
        default=None,
        description="jhbuild moduleset to update with the release",
    )

    model_config = {"frozen": True}

    @field_validator("user")
    @classmethod
    def validate_user(cls, v: str) -> str:
        if v and not v.endswith("@"):
            return f"{v}@"
        return v
