"""
Unit tests for DynamicRegistrar.

Tests cover:
- End-to-end rule assembly and submission
- Short-circuit on feed failure
- Non-fatal chart resolution failure (and strict mode)
- Submission rejection
- Pass outcomes from run_pass
"""

import logging

import pytest

from nginx_adapter.errors import (
    BundleLocationFailed,
    ChartVersionResolutionFailed,
    FeedUnavailable,
    RegistrationRejected,
)
from nginx_adapter.modules.charts import BundleLocator
from nginx_adapter.modules.registration import (
    NGINX_CRD_FILTER,
    DynamicRegistrar,
    GenerationMethod,
)
from nginx_adapter.modules.releases import Release, VersionResolver

SERVER = "http://meshery:9081"
SELF = "nginx-adapter:10010"


def _submitted_rule(mock_sink):
    mock_sink.register_workloads_dynamically.assert_awaited_once()
    server, self_addr, rule = mock_sink.register_workloads_dynamically.call_args[0]
    assert server == SERVER
    assert self_addr == SELF
    return rule


class TestRegisterDynamic:
    """Tests for the registration sequence."""

    @pytest.mark.asyncio
    async def test_end_to_end(self, registrar, mock_sink, coordinates):
        """Test v2.5.0 release -> chart 2.5.0 -> submitted rule."""
        version = await registrar.register_dynamic(SERVER, SELF, coordinates)

        assert version == "2.5.0"
        rule = _submitted_rule(mock_sink)
        assert rule.name == "NGINX_SERVICE_MESH"
        assert rule.mesh_version == "2.5.0"
        assert rule.source_url.endswith("nginx-service-mesh-2.5.0.tgz?raw=true")
        assert rule.timeout_minutes == 60
        assert rule.generation_method == GenerationMethod.HELM_CHARTS
        assert rule.filter == NGINX_CRD_FILTER

    @pytest.mark.asyncio
    async def test_normalized_version_used_for_chart_lookup(
        self, registrar, mock_chart_resolver, coordinates
    ):
        """Test that the chart query uses the normalized version."""
        await registrar.register_dynamic(SERVER, SELF, coordinates)

        mock_chart_resolver.resolve_chart_version.assert_awaited_once_with(
            coordinates.repository_url, coordinates.chart_name, "2.5.0"
        )

    @pytest.mark.asyncio
    async def test_empty_feed_short_circuits(
        self, registrar, mock_feed, mock_chart_resolver, mock_sink, coordinates
    ):
        """Test that no chart lookup or submission happens without a release."""
        mock_feed.get_latest_releases.return_value = []

        with pytest.raises(FeedUnavailable):
            await registrar.register_dynamic(SERVER, SELF, coordinates)

        mock_chart_resolver.resolve_chart_version.assert_not_awaited()
        mock_sink.register_workloads_dynamically.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_chart_failure_is_not_fatal(
        self, registrar, mock_chart_resolver, mock_sink, coordinates, caplog
    ):
        """Test that a chart lookup failure still reaches submission."""
        mock_chart_resolver.resolve_chart_version.side_effect = ChartVersionResolutionFailed(
            "no chart for 2.5.0"
        )

        with caplog.at_level(logging.WARNING, logger="nginx_adapter.registration"):
            version = await registrar.register_dynamic(SERVER, SELF, coordinates)

        assert version == "2.5.0"
        rule = _submitted_rule(mock_sink)
        assert rule.mesh_version == "2.5.0"
        assert rule.source_url.endswith("nginx-service-mesh-.tgz?raw=true")
        assert "no chart for 2.5.0" in caplog.text

    @pytest.mark.asyncio
    async def test_chart_failure_strict_mode(
        self, mock_feed, mock_chart_resolver, mock_sink, coordinates
    ):
        """Test that strict mode short-circuits on chart lookup failure."""
        mock_chart_resolver.resolve_chart_version.side_effect = ChartVersionResolutionFailed("nope")
        registrar = DynamicRegistrar(
            resolver=VersionResolver(mock_feed),
            locator=BundleLocator(mock_chart_resolver),
            sink=mock_sink,
            strict_chart_resolution=True,
        )

        with pytest.raises(BundleLocationFailed):
            await registrar.register_dynamic(SERVER, SELF, coordinates)

        mock_sink.register_workloads_dynamically.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_submission_rejected(self, registrar, mock_sink, coordinates):
        """Test that sink errors propagate as RegistrationRejected."""
        mock_sink.register_workloads_dynamically.side_effect = RegistrationRejected("500")

        with pytest.raises(RegistrationRejected):
            await registrar.register_dynamic(SERVER, SELF, coordinates)

    @pytest.mark.asyncio
    async def test_unexpected_sink_error_wrapped(self, registrar, mock_sink, coordinates):
        """Test that unknown sink errors are reported as rejections."""
        mock_sink.register_workloads_dynamically.side_effect = ConnectionError("reset")

        with pytest.raises(RegistrationRejected):
            await registrar.register_dynamic(SERVER, SELF, coordinates)

    @pytest.mark.asyncio
    async def test_custom_timeout(self, mock_feed, mock_chart_resolver, mock_sink, coordinates):
        """Test that the configured timeout is bound into the rule."""
        registrar = DynamicRegistrar(
            resolver=VersionResolver(mock_feed),
            locator=BundleLocator(mock_chart_resolver),
            sink=mock_sink,
            timeout_minutes=15,
        )

        await registrar.register_dynamic(SERVER, SELF, coordinates)

        assert _submitted_rule(mock_sink).timeout_minutes == 15


class TestRunPass:
    """Tests for pass-boundary error handling."""

    @pytest.mark.asyncio
    async def test_success_outcome(self, registrar, coordinates):
        """Test a successful pass outcome."""
        outcome = await registrar.run_pass(SERVER, SELF, coordinates)

        assert outcome.success is True
        assert outcome.stage == "complete"
        assert outcome.mesh_version == "2.5.0"
        assert outcome.finished_at is not None

    @pytest.mark.asyncio
    async def test_feed_failure_outcome(self, registrar, mock_feed, coordinates, caplog):
        """Test that feed failures are logged, not raised."""
        mock_feed.get_latest_releases.side_effect = FeedUnavailable("github down")

        with caplog.at_level(logging.ERROR, logger="nginx_adapter.registration"):
            outcome = await registrar.run_pass(SERVER, SELF, coordinates)

        assert outcome.success is False
        assert outcome.stage == "version"
        assert "github down" in outcome.message
        assert "github down" in caplog.text

    @pytest.mark.asyncio
    async def test_marker_only_tag_outcome(
        self, registrar, mock_feed, mock_chart_resolver, mock_sink, coordinates
    ):
        """Test that a tag with no version fails the pass at the version stage."""
        mock_feed.get_latest_releases.return_value = [Release(tag="v")]

        outcome = await registrar.run_pass(SERVER, SELF, coordinates)

        assert outcome.success is False
        assert outcome.stage == "version"
        mock_chart_resolver.resolve_chart_version.assert_not_awaited()
        mock_sink.register_workloads_dynamically.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejection_outcome(self, registrar, mock_sink, coordinates):
        """Test that a rejected submission is reported at the submission stage."""
        mock_sink.register_workloads_dynamically.side_effect = RegistrationRejected("503")

        outcome = await registrar.run_pass(SERVER, SELF, coordinates)

        assert outcome.success is False
        assert outcome.stage == "submission"

    @pytest.mark.asyncio
    async def test_outcome_to_dict(self, registrar, coordinates):
        """Test outcome serialization."""
        outcome = await registrar.run_pass(SERVER, SELF, coordinates)

        data = outcome.to_dict()
        assert data["success"] is True
        assert data["mesh_version"] == "2.5.0"
