"""Bundle location: chart coordinates + mesh version -> downloadable archive."""

import logging
from dataclasses import dataclass

from nginx_adapter.errors import ChartVersionResolutionFailed

from .index import ChartVersionResolver

logger = logging.getLogger("nginx_adapter.charts")

DEFAULT_CHART_REPOSITORY = "https://helm.nginx.com/stable"
DEFAULT_CHART_NAME = "nginx-service-mesh"

# Archives are hosted in the helm-charts GitHub repository, not the Helm repo.
BUNDLE_URL_TEMPLATE = (
    "https://github.com/nginxinc/helm-charts/blob/master/stable/"
    "{chart_name}-{chart_version}.tgz?raw=true"
)


@dataclass(frozen=True)
class ChartCoordinates:
    """Where the mesh chart lives."""

    repository_url: str = DEFAULT_CHART_REPOSITORY
    chart_name: str = DEFAULT_CHART_NAME


@dataclass(frozen=True)
class BundleReference:
    """A resolved chart version and its archive URL."""

    chart_version: str
    download_url: str


def build_download_url(coordinates: ChartCoordinates, chart_version: str) -> str:
    """Substitute the chart version into the hosted archive path."""
    return BUNDLE_URL_TEMPLATE.format(
        chart_name=coordinates.chart_name, chart_version=chart_version
    )


class BundleLocator:
    """Resolves a mesh version to its packaged bundle. No caching."""

    def __init__(self, resolver: ChartVersionResolver):
        self.resolver = resolver

    async def locate_bundle(
        self, coordinates: ChartCoordinates, normalized_version: str
    ) -> BundleReference:
        """
        Locate the bundle for a normalized mesh version.

        Raises:
            ChartVersionResolutionFailed: If the chart repository has no match
        """
        try:
            chart_version = await self.resolver.resolve_chart_version(
                coordinates.repository_url, coordinates.chart_name, normalized_version
            )
        except ChartVersionResolutionFailed:
            raise
        except Exception as e:
            raise ChartVersionResolutionFailed(
                f"Could not resolve chart version for {normalized_version}: {e}"
            ) from e

        return BundleReference(
            chart_version=chart_version,
            download_url=build_download_url(coordinates, chart_version),
        )

    @staticmethod
    def fallback_bundle(coordinates: ChartCoordinates) -> BundleReference:
        """Best-effort reference used when the chart version is unknown."""
        return BundleReference(
            chart_version="", download_url=build_download_url(coordinates, "")
        )
