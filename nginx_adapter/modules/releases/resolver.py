"""Latest-version resolution on top of a release feed."""

import logging

from nginx_adapter.errors import FeedUnavailable

from .feed import ReleaseFeed

logger = logging.getLogger("nginx_adapter.releases")

VERSION_MARKER = "v"


def normalize_version(tag: str, marker: str = VERSION_MARKER) -> str:
    """
    Strip the version marker from a release tag.

    Only the first occurrence of the marker is removed, wherever it appears.
    Tags without the marker are returned unchanged.
    """
    return tag.replace(marker, "", 1)


class VersionResolver:
    """Resolves the newest mesh release to a bare semantic version."""

    def __init__(self, feed: ReleaseFeed, marker: str = VERSION_MARKER):
        self.feed = feed
        self.marker = marker

    async def resolve_latest_version(self, limit: int = 1) -> str:
        """
        Return the normalized version of the newest release.

        Raises:
            FeedUnavailable: If the feed errors or yields no tagged release
        """
        try:
            releases = await self.feed.get_latest_releases(limit)
        except FeedUnavailable:
            raise
        except Exception as e:
            raise FeedUnavailable(f"Could not get latest version: {e}") from e

        if not releases or not releases[0].tag:
            raise FeedUnavailable("Could not get latest version: no releases found")

        tag = releases[0].tag
        logger.info(f"Latest release tag is {tag}")
        version = normalize_version(tag, self.marker)
        if not version:
            raise FeedUnavailable(f"Could not get latest version: tag {tag!r} has no version")
        return version
