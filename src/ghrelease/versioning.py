"""Semantic version parsing of release tags."""

import re

from ghrelease.models import ReleaseType, VersionInfo

VERSION_PATTERN = re.compile(r"^v?(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:-(.+))?$")

UNKNOWN_VERSION = VersionInfo(major=None, minor=None, patch=None, release_type=ReleaseType.UNKNOWN)


def parse_version(tag_name: str) -> VersionInfo:
    """Parse a tag like "v1.2.3" or "1.2.3-beta.1" into version components.

    A hyphen suffix marks a pre-release regardless of how many numeric
    components precede it. Without a suffix the most specific component
    present decides the type: "v1" is major, "v1.2" minor, "v1.2.3" patch.
    Tags that do not match degrade to an unknown type instead of raising.

    Args:
        tag_name: Release tag string.

    Returns:
        VersionInfo with None for absent components.
    """
    match = VERSION_PATTERN.fullmatch(tag_name)
    if not match:
        return UNKNOWN_VERSION

    major, minor, patch, suffix = match.groups()

    if suffix:
        release_type = ReleaseType.PRE_RELEASE
    elif patch is None:
        release_type = ReleaseType.MAJOR if minor is None else ReleaseType.MINOR
    else:
        release_type = ReleaseType.PATCH

    return VersionInfo(
        major=int(major),
        minor=int(minor) if minor is not None else None,
        patch=int(patch) if patch is not None else None,
        release_type=release_type,
    )
