"""
Dynamic capability registration.

One pass resolves the newest mesh release, locates its Helm chart, binds both
into an ExtractionRule and submits it. Any failing stage ends the pass; the
only exception is an unresolvable chart version, which is logged and replaced
by a best-effort bundle reference unless strict chart resolution is enabled.
"""

import logging
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from typing import Any, Dict, Optional, Protocol

from nginx_adapter.errors import (
    BundleLocationFailed,
    ChartVersionResolutionFailed,
    RegistrationError,
    RegistrationRejected,
)
from nginx_adapter.modules.charts.locator import BundleLocator, ChartCoordinates
from nginx_adapter.modules.releases.resolver import VersionResolver

from .models import NGINX_CRD_FILTER, ExtractionRule, FilterSpec, GenerationMethod

logger = logging.getLogger("nginx_adapter.registration")

MESH_NAME = "NGINX_SERVICE_MESH"
SUBMISSION_TIMEOUT_MINUTES = 60


class RegistrationSink(Protocol):
    """Protocol for the remote dynamic registration endpoint."""

    async def register_workloads_dynamically(
        self, server_address: str, self_address: str, rule: ExtractionRule
    ) -> None:
        ...


@dataclass
class RegistrationOutcome:
    """Result of one registration pass, kept for logging and health checks."""

    success: bool
    stage: str
    message: str
    mesh_version: Optional[str] = None
    finished_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)


class DynamicRegistrar:
    """Builds and submits the dynamic workload registration for the mesh."""

    def __init__(
        self,
        resolver: VersionResolver,
        locator: BundleLocator,
        sink: RegistrationSink,
        mesh_name: str = MESH_NAME,
        timeout_minutes: int = SUBMISSION_TIMEOUT_MINUTES,
        extraction_filter: FilterSpec = NGINX_CRD_FILTER,
        strict_chart_resolution: bool = False,
    ):
        """
        Initialize registrar.

        Args:
            resolver: Latest-version resolver
            locator: Chart bundle locator
            sink: Remote registration endpoint
            mesh_name: Mesh identifier sent with the rule
            timeout_minutes: Processing bound passed to the server
            extraction_filter: How the server should walk the chart's CRDs
            strict_chart_resolution: Abort the pass when no chart version matches
        """
        self.resolver = resolver
        self.locator = locator
        self.sink = sink
        self.mesh_name = mesh_name
        self.timeout_minutes = timeout_minutes
        self.extraction_filter = extraction_filter
        self.strict_chart_resolution = strict_chart_resolution

    def build_rule(self, mesh_version: str, source_url: str) -> ExtractionRule:
        """Assemble the extraction rule for a mesh version and bundle URL."""
        return ExtractionRule(
            name=self.mesh_name,
            mesh_version=mesh_version,
            filter=self.extraction_filter,
            generation_method=GenerationMethod.HELM_CHARTS,
            source_url=source_url,
            timeout_minutes=self.timeout_minutes,
        )

    async def register_dynamic(
        self, server_address: str, self_address: str, coordinates: ChartCoordinates
    ) -> str:
        """
        Run the full registration sequence once.

        Returns:
            The mesh version that was registered

        Raises:
            FeedUnavailable: Release feed failed; nothing else was attempted
            BundleLocationFailed: Chart lookup failed in strict mode
            RegistrationRejected: The server rejected the submission
        """
        version = await self.resolver.resolve_latest_version(limit=1)
        logger.info(f"Registering latest workload components for version {version}")

        try:
            bundle = await self.locator.locate_bundle(coordinates, version)
        except ChartVersionResolutionFailed as e:
            if self.strict_chart_resolution:
                raise BundleLocationFailed(str(e)) from e
            logger.warning(f"Could not resolve chart version, continuing: {e}")
            bundle = self.locator.fallback_bundle(coordinates)

        rule = self.build_rule(version, bundle.download_url)

        try:
            await self.sink.register_workloads_dynamically(server_address, self_address, rule)
        except RegistrationRejected:
            raise
        except Exception as e:
            raise RegistrationRejected(f"Registration submission failed: {e}") from e

        return version

    async def run_pass(
        self, server_address: str, self_address: str, coordinates: ChartCoordinates
    ) -> RegistrationOutcome:
        """
        Run one pass and convert its result into a logged outcome.

        Registration errors never propagate out of this method.
        """
        try:
            version = await self.register_dynamic(server_address, self_address, coordinates)
        except RegistrationError as e:
            logger.error(f"Dynamic registration failed at {e.stage} stage: {e}")
            return RegistrationOutcome(
                success=False,
                stage=e.stage,
                message=str(e),
                finished_at=datetime.now(UTC).isoformat(),
            )

        logger.info("Latest workload components successfully registered.")
        return RegistrationOutcome(
            success=True,
            stage="complete",
            message="registered",
            mesh_version=version,
            finished_at=datetime.now(UTC).isoformat(),
        )
