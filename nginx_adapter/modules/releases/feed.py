"""
Release feed for NGINX Service Mesh.

Reads published releases from the GitHub releases API. Only the newest
entries are requested; GitHub returns releases newest first.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import httpx

from nginx_adapter.errors import FeedUnavailable

logger = logging.getLogger("nginx_adapter.releases")

DEFAULT_RELEASES_URL = "https://api.github.com/repos/nginxinc/nginx-service-mesh/releases"


@dataclass
class Release:
    """A single published release."""

    tag: str
    name: Optional[str] = None
    draft: bool = False
    prerelease: bool = False
    published_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Release":
        """Create from a GitHub release payload."""
        return cls(
            tag=data.get("tag_name") or "",
            name=data.get("name"),
            draft=bool(data.get("draft", False)),
            prerelease=bool(data.get("prerelease", False)),
            published_at=data.get("published_at"),
        )


class ReleaseFeed(Protocol):
    """Protocol for release feeds."""

    async def get_latest_releases(self, limit: int) -> List[Release]:
        """Return at most `limit` releases, newest first."""
        ...


class GitHubReleaseFeed:
    """Release feed backed by the GitHub REST API."""

    def __init__(
        self,
        releases_url: str = DEFAULT_RELEASES_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        """
        Initialize the feed.

        Args:
            releases_url: GitHub releases endpoint for the mesh repository
            client: Optional shared AsyncClient (a short-lived one is used otherwise)
            timeout: Request timeout in seconds
        """
        self.releases_url = releases_url
        self.client = client
        self.timeout = timeout

    async def get_latest_releases(self, limit: int) -> List[Release]:
        """
        Fetch the latest releases.

        Args:
            limit: Maximum number of releases to return

        Returns:
            Releases, newest first

        Raises:
            FeedUnavailable: If the request fails or the payload is malformed
        """
        params = {"per_page": limit}
        headers = {"Accept": "application/vnd.github+json"}

        try:
            if self.client is not None:
                response = await self.client.get(
                    self.releases_url, params=params, headers=headers
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(
                        self.releases_url, params=params, headers=headers
                    )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPError as e:
            raise FeedUnavailable(f"Release feed request failed: {e}") from e
        except ValueError as e:
            raise FeedUnavailable(f"Release feed returned invalid JSON: {e}") from e

        if not isinstance(payload, list):
            raise FeedUnavailable("Release feed returned an unexpected payload")

        releases = [Release.from_dict(item) for item in payload[:limit]]
        logger.debug(f"Fetched {len(releases)} release(s) from {self.releases_url}")
        return releases
