"""
Helm chart repository client.

Maps a mesh application version to the chart version that packages it by
reading the repository's index.yaml.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx
import yaml

from nginx_adapter.errors import ChartVersionResolutionFailed

logger = logging.getLogger("nginx_adapter.charts")


class ChartVersionResolver(Protocol):
    """Protocol for chart version resolution services."""

    async def resolve_chart_version(
        self, repo_url: str, chart_name: str, app_version: str
    ) -> str:
        """Return the chart version that packages `app_version`."""
        ...


def find_chart_version(
    index: Dict[str, Any], chart_name: str, app_version: str
) -> Optional[str]:
    """
    Look up a chart version in a parsed repository index.

    Entries are scanned in index order, which Helm keeps newest first, so the
    newest chart packaging the application version wins.
    """
    entries: List[Dict[str, Any]] = (index.get("entries") or {}).get(chart_name) or []
    for entry in entries:
        if str(entry.get("appVersion", "")) == app_version:
            version = entry.get("version")
            if version:
                return str(version)
    return None


class HelmChartResolver:
    """Chart version resolver backed by a Helm repository index."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        """
        Initialize resolver.

        Args:
            client: Optional shared AsyncClient
            timeout: Request timeout in seconds
        """
        self.client = client
        self.timeout = timeout

    async def _fetch_index(self, repo_url: str) -> Dict[str, Any]:
        url = f"{repo_url.rstrip('/')}/index.yaml"
        try:
            if self.client is not None:
                response = await self.client.get(url)
            else:
                async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
                    response = await client.get(url)
            response.raise_for_status()
            index = yaml.safe_load(response.text)
        except httpx.HTTPError as e:
            raise ChartVersionResolutionFailed(
                f"Failed to fetch chart index from {url}: {e}"
            ) from e
        except yaml.YAMLError as e:
            raise ChartVersionResolutionFailed(f"Invalid chart index at {url}: {e}") from e

        if not isinstance(index, dict):
            raise ChartVersionResolutionFailed(f"Invalid chart index at {url}")
        return index

    async def resolve_chart_version(
        self, repo_url: str, chart_name: str, app_version: str
    ) -> str:
        """
        Resolve the chart version packaging an application version.

        Raises:
            ChartVersionResolutionFailed: If the index is unreachable or has no match
        """
        index = await self._fetch_index(repo_url)
        chart_version = find_chart_version(index, chart_name, app_version)
        if chart_version is None:
            raise ChartVersionResolutionFailed(
                f"No {chart_name} chart found for app version {app_version}"
            )

        logger.debug(f"Resolved {chart_name} app version {app_version} to chart {chart_version}")
        return chart_version
