"""
Releases Module - Black Box Interface

Purpose: Determine the newest NGINX Service Mesh release
Interface: VersionResolver.resolve_latest_version(), normalize_version()
Hidden: GitHub API access, payload parsing

Can be replaced with any feed implementing get_latest_releases(limit).
"""

from .feed import GitHubReleaseFeed, Release, ReleaseFeed
from .resolver import VersionResolver, normalize_version

__all__ = [
    "GitHubReleaseFeed",
    "Release",
    "ReleaseFeed",
    "VersionResolver",
    "normalize_version",
]
