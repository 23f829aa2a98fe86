"""Publication sections and their destinations.

A module's section is derived from the url of the remote its checked-out
branch tracks. The section selects the web host, the upload directory and
the mailing lists of the release announcement.

Resolution evaluates an ordered rule table, first match wins. Each rule
extracts a relative module path such as "app/xfs" or "mesa/drm"; its first
segment is the candidate section. Container namespaces are resolved to
their second segment.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from modrelease.config.models import ReleaseConfig
from modrelease.exceptions import SectionError

# Containers whose sub-project is the section, restricted to an allow-list
CHECKED_CONTAINERS: Mapping[str, frozenset[str]] = MappingProxyType(
    {"mesa": frozenset({"drm", "mesa", "glu", "demos"})}
)

# Containers whose sub-project is always the section
OPEN_CONTAINERS = frozenset({"xorg", "wayland"})


def _last_segments(count: int) -> Callable[[str], str]:
    def extract(matched: str) -> str:
        return "/".join(matched.split("/")[-count:])

    return extract


def _first_segments(count: int) -> Callable[[str], str]:
    def extract(matched: str) -> str:
        return "/".join(matched.strip("/").split("/")[:count])

    return extract


@dataclass(frozen=True)
class SectionRule:
    """Maps a remote url pattern to a relative module path."""

    name: str
    pattern: re.Pattern[str]
    extract: Callable[[str], str]

    def match(self, url: str) -> str | None:
        found = self.pattern.search(url)
        if found is None:
            return None
        return self.extract(found.group(0))


SECTION_RULES: tuple[SectionRule, ...] = (
    SectionRule("xorg", re.compile(r"xorg/.*"), _last_segments(2)),
    SectionRule("mesa", re.compile(r"mesa/.*"), _first_segments(2)),
    SectionRule("xcb", re.compile(r"/xcb/.*"), _first_segments(2)),
    SectionRule("xkeyboard-config", re.compile(r"/xkeyboard-config"), _first_segments(2)),
    SectionRule("nouveau", re.compile(r"/nouveau/xf86-video-nouveau"), _first_segments(2)),
    # evemu lives in the libevdev namespace
    SectionRule("evemu", re.compile(r"/evemu"), _first_segments(2)),
    SectionRule("libevdev", re.compile(r"/libevdev"), _first_segments(2)),
    SectionRule("wayland", re.compile(r"/wayland/.*"), _first_segments(2)),
    SectionRule("libinput", re.compile(r"/libinput"), _first_segments(2)),
)


def strip_repository_suffix(url: str) -> str:
    return re.sub(r"\.git$", "", url.strip().rstrip("/"))


def relative_module_path(url: str, rules: tuple[SectionRule, ...] = SECTION_RULES) -> str:
    """Extract the two-segment module path from a remote url.

    Raises:
        SectionError: If no rule matches the url
    """
    stripped = strip_repository_suffix(url)
    for rule in rules:
        path = rule.match(stripped)
        if path:
            return path
    raise SectionError(
        f"Unable to locate a valid project url from '{url}'",
        details="Known namespaces: " + ", ".join(rule.name for rule in rules),
    )


def resolve_section(url: str) -> str:
    """Determine the publication section of a module from its remote url.

    Args:
        url: Url of the remote tracked by the module's branch

    Returns:
        Section name, e.g. "app", "driver", "drm", "weston"

    Raises:
        SectionError: If the url is not recognised or the sub-project of a
            checked container is not supported
    """
    path = relative_module_path(url)
    segments = path.split("/")
    section = segments[0]

    if section in CHECKED_CONTAINERS:
        allowed = CHECKED_CONTAINERS[section]
        if len(segments) < 2 or segments[1] not in allowed:
            sub_project = segments[1] if len(segments) > 1 else ""
            raise SectionError(
                f"Section '{sub_project}' is not supported in '{section}'",
                details=f"Only {', '.join(sorted(allowed))} are supported",
            )
        return segments[1]

    if section in OPEN_CONTAINERS:
        if len(segments) < 2 or not segments[1]:
            raise SectionError(
                f"Unable to extract section from '{path}' second field",
            )
        return segments[1]

    return section


@dataclass(frozen=True)
class Destination:
    """Where a section's tarballs go and who hears about them.

    Attributes:
        host: Public web host serving the tarballs
        url_path: Path of the tarballs below the web host root
        remote_path: Directory on the upload host
        list_to: Announcement recipient list
        list_cc: Announcement carbon copy list, if any
    """

    host: str
    url_path: str
    remote_path: str
    list_to: str
    list_cc: str | None = None

    def url(self, filename: str) -> str:
        return f"https://{self.host}/{self.url_path}/{filename}"


@dataclass(frozen=True)
class DestinationTable:
    """Immutable section -> destination lookup.

    Sections without an entry are published in the individual X.Org
    archive under their own name.
    """

    default_host: str
    default_to: str
    default_cc: str
    entries: Mapping[str, Destination] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: ReleaseConfig) -> "DestinationTable":
        hosts, lists = config.hosts, config.lists

        def srv(host: str, url_path: str) -> str:
            return f"/srv/{host}/www/{url_path}"

        def xorg(url_path: str, cc: str) -> Destination:
            return Destination(
                host=hosts.xorg,
                url_path=url_path,
                remote_path=f"/srv/{hosts.xorg}/{url_path}",
                list_to=lists.announce,
                list_cc=cc,
            )

        def www(host: str, url_path: str, to: str, cc: str | None = None) -> Destination:
            return Destination(
                host=host,
                url_path=url_path,
                remote_path=srv(host, url_path),
                list_to=to,
                list_cc=cc,
            )

        entries = {
            "nouveau": xorg("archive/individual/driver", lists.nouveau),
            "xcb": xorg("archive/individual/xcb", lists.xcb),
            "xkeyboard-config": xorg(
                "archive/individual/data/xkeyboard-config", lists.xkb
            ),
            "drm": www(hosts.dri, "libdrm", lists.announce, lists.dri_devel),
            "mesa": www(hosts.mesa, "archive", lists.mesa_announce, lists.mesa_devel),
            "demos": www(
                hosts.mesa, "archive/demos", lists.mesa_announce, lists.mesa_devel
            ),
            "glu": www(hosts.mesa, "archive/glu", lists.mesa_announce, lists.mesa_devel),
            "libevdev": www(hosts.fdo, "software/libevdev", lists.input),
            "wayland": www(hosts.wayland, "releases", lists.wayland),
            "weston": www(hosts.wayland, "releases", lists.wayland),
            "libinput": www(hosts.fdo, "software/libinput", lists.wayland),
            "evemu": www(hosts.fdo, "software/evemu", lists.input),
        }
        return cls(
            default_host=hosts.xorg,
            default_to=lists.announce,
            default_cc=lists.xorg_user,
            entries=MappingProxyType(entries),
        )

    def lookup(self, section: str) -> Destination:
        """Return the destination of a section."""
        entry = self.entries.get(section)
        if entry is not None:
            return entry
        url_path = f"archive/individual/{section}"
        return Destination(
            host=self.default_host,
            url_path=url_path,
            remote_path=f"/srv/{self.default_host}/{url_path}",
            list_to=self.default_to,
            list_cc=self.default_cc,
        )
