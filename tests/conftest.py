"""
Shared pytest fixtures for adapter tests.

This module provides common fixtures including:
- AsyncMock collaborators (release feed, chart resolver, registration sink)
- A DynamicRegistrar wired to those mocks
- An httpx MockTransport recorder for client tests
"""

import json
import os
import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
from unittest.mock import AsyncMock

import httpx
import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from nginx_adapter.modules.charts import BundleLocator, ChartCoordinates
from nginx_adapter.modules.registration import DynamicRegistrar
from nginx_adapter.modules.releases import Release, VersionResolver


# =============================================================================
# HTTP Mocking Infrastructure
# =============================================================================

@dataclass
class RecordedRequest:
    """Record of a request made through the mock transport."""
    method: str
    url: str
    path: str
    params: Dict[str, str]
    body: Optional[dict] = None


@dataclass
class HTTPRecorder:
    """
    Route table and call history for httpx.MockTransport.

    Usage:
        def test_fetch(http_recorder):
            http_recorder.route("GET", "/index.yaml", httpx.Response(200, text="..."))
            client = http_recorder.client()
    """
    routes: Dict[tuple, Callable[[httpx.Request], httpx.Response]] = field(default_factory=dict)
    calls: List[RecordedRequest] = field(default_factory=list)

    def route(self, method: str, path: str, response) -> "HTTPRecorder":
        """Register a response (or a request -> response callable) for a path."""
        if callable(response):
            handler = response
        else:
            # Fresh Response per request; a streamed Response can't be reused
            def handler(request, template=response):
                return httpx.Response(
                    template.status_code,
                    headers=template.headers,
                    content=template.content,
                )
        self.routes[(method, path)] = handler
        return self

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = None
        if request.content:
            try:
                body = json.loads(request.content)
            except ValueError:
                body = None
        self.calls.append(RecordedRequest(
            method=request.method,
            url=str(request.url),
            path=request.url.path,
            params=dict(request.url.params),
            body=body,
        ))

        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": "not found"})
        return handler(request)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handle))


@pytest.fixture
def http_recorder():
    """Fixture providing a fresh HTTPRecorder."""
    return HTTPRecorder()


# =============================================================================
# Registration Collaborators
# =============================================================================

@pytest.fixture
def coordinates():
    """Default NGINX chart coordinates."""
    return ChartCoordinates()


@pytest.fixture
def mock_feed():
    """Release feed returning a single v2.5.0 release."""
    feed = AsyncMock()
    feed.get_latest_releases = AsyncMock(return_value=[Release(tag="v2.5.0")])
    return feed


@pytest.fixture
def mock_chart_resolver():
    """Chart resolver mapping every app version to chart 2.5.0."""
    resolver = AsyncMock()
    resolver.resolve_chart_version = AsyncMock(return_value="2.5.0")
    return resolver


@pytest.fixture
def mock_sink():
    """Registration sink that accepts every submission."""
    sink = AsyncMock()
    sink.register_workloads_dynamically = AsyncMock(return_value=None)
    return sink


@pytest.fixture
def registrar(mock_feed, mock_chart_resolver, mock_sink):
    """DynamicRegistrar wired to mocked collaborators."""
    return DynamicRegistrar(
        resolver=VersionResolver(mock_feed),
        locator=BundleLocator(mock_chart_resolver),
        sink=mock_sink,
    )


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
