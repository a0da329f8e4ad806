"""
Charts Module - Black Box Interface

Purpose: Locate the packaged Helm chart for a mesh version
Interface: BundleLocator.locate_bundle(), build_download_url()
Hidden: Helm repository index parsing, archive hosting path

Can be replaced with any resolver implementing resolve_chart_version().
"""

from .index import ChartVersionResolver, HelmChartResolver, find_chart_version
from .locator import (
    BundleLocator,
    BundleReference,
    ChartCoordinates,
    build_download_url,
)

__all__ = [
    "BundleLocator",
    "BundleReference",
    "ChartCoordinates",
    "ChartVersionResolver",
    "HelmChartResolver",
    "build_download_url",
    "find_chart_version",
]
