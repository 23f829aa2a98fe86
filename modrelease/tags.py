"""Release tag naming.

Tags are named "<package>-<version>" except for projects that tag with the
bare version (wayland, weston, libinput) or with a 'v' prefix (evemu).
"""

from dataclasses import dataclass
from enum import Enum

BARE_VERSION_SECTIONS = frozenset({"wayland", "weston", "libinput"})
V_PREFIX_SECTIONS = frozenset({"evemu"})


class TagState(Enum):
    """State of the release tag before tagging."""

    ABSENT = "absent"
    CONSISTENT = "consistent"
    INCONSISTENT = "inconsistent"


@dataclass(frozen=True)
class ReleaseTag:
    """Release tag and the commit it must point at."""

    name: str
    target_sha: str

    def classify(self, existing_sha: str | None) -> TagState:
        return classify_tag(existing_sha, self.target_sha)


def tag_name_for(section: str, package_name: str, package_version: str) -> str:
    """Derive the release tag name of a package in a section."""
    if section in BARE_VERSION_SECTIONS:
        return package_version
    if section in V_PREFIX_SECTIONS:
        return f"v{package_version}"
    return f"{package_name}-{package_version}"


def classify_tag(existing_sha: str | None, expected_sha: str) -> TagState:
    """Compare the commit an existing tag points at with the expected one."""
    if existing_sha is None:
        return TagState.ABSENT
    if existing_sha == expected_sha:
        return TagState.CONSISTENT
    return TagState.INCONSISTENT
