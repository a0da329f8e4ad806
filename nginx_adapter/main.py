#!/usr/bin/env python3
"""
NGINX Mesh Adapter - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Wires the registration modules together
3. Starts static and periodic registration in the background
4. Serves health endpoints

All registration logic is in the modules, following black box principles.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional, Tuple

import httpx
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nginx_adapter import __version__
from nginx_adapter.config import ConfigProvider, EnvConfigProvider, RegistrationConfig
from nginx_adapter.logging_config import configure_logging, get_logging_config
from nginx_adapter.modules.charts import BundleLocator, HelmChartResolver
from nginx_adapter.modules.registration import (
    DynamicRegistrar,
    RegistrationClient,
    StaticRegistrar,
)
from nginx_adapter.modules.releases import GitHubReleaseFeed, VersionResolver
from nginx_adapter.modules.scheduler import RefreshScheduler

logger = logging.getLogger("nginx_adapter.main")

Components = Tuple[StaticRegistrar, RefreshScheduler]


def build_components(config: RegistrationConfig, client: httpx.AsyncClient) -> Components:
    """Wire the registration modules for one process."""
    sink = RegistrationClient(client=client)

    registrar = DynamicRegistrar(
        resolver=VersionResolver(GitHubReleaseFeed(config.releases_url, client=client)),
        locator=BundleLocator(HelmChartResolver(client=client)),
        sink=sink,
        timeout_minutes=config.timeout_minutes,
        strict_chart_resolution=config.strict_chart_resolution,
    )
    scheduler = RefreshScheduler(
        registrar,
        server_address=config.server_address,
        self_address=config.self_address,
        coordinates=config.coordinates,
        interval_seconds=config.interval_seconds,
    )
    return StaticRegistrar(sink, config.templates_path), scheduler


def create_app(
    config_provider: Optional[ConfigProvider] = None,
    component_factory: Callable[[RegistrationConfig, httpx.AsyncClient], Components] = build_components,
) -> FastAPI:
    """Create the adapter application."""
    config_provider = config_provider or EnvConfigProvider()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Start registration tasks on startup, stop them on shutdown.

        Both tasks run detached from request handling; neither is awaited by
        any endpoint.
        """
        config = config_provider.get_registration_config()
        logger.info(
            f"Starting adapter registration (server: {config.server_address}, "
            f"self: {config.self_address})"
        )

        client = httpx.AsyncClient(timeout=30.0, follow_redirects=True)
        static_registrar, scheduler = component_factory(config, client)
        stop_event = asyncio.Event()

        registration_task = asyncio.create_task(scheduler.run(stop_event))
        app.state.scheduler = scheduler
        app.state.registration_task = registration_task
        tasks = [
            asyncio.create_task(
                static_registrar.register_capabilities(config.server_address, config.self_address)
            ),
            registration_task,
        ]

        yield

        logger.info("Shutting down adapter registration...")
        stop_event.set()
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        await client.aclose()
        logger.info("Adapter registration shutdown complete")

    app = FastAPI(
        title="NGINX Mesh Adapter",
        description="Capability registration for the NGINX Service Mesh adapter",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/healthz")
    async def healthz():
        """Minimal liveness probe."""
        return {"status": "ok"}

    @app.get("/health")
    async def health_check(request: Request):
        """
        Health check including the dynamic registration state.

        Registration failures do not make the adapter unhealthy; only a dead
        registration loop does. A loop task that has been scheduled but not
        yet entered reports "starting".
        """
        scheduler: Optional[RefreshScheduler] = getattr(request.app.state, "scheduler", None)
        if scheduler is None:
            return JSONResponse(status_code=503, content={"status": "starting"})

        task: Optional[asyncio.Task] = getattr(request.app.state, "registration_task", None)
        loop_alive = scheduler.is_running or (task is not None and not task.done())
        if scheduler.is_running:
            status = "healthy"
        elif loop_alive:
            status = "starting"
        else:
            status = "unhealthy"

        last = scheduler.last_outcome
        body = {
            "status": status,
            "version": __version__,
            "registration": {
                "running": scheduler.is_running,
                "passes_completed": scheduler.passes_completed,
                "last_outcome": last.to_dict() if last else None,
            },
        }
        if not loop_alive:
            return JSONResponse(status_code=503, content=body)
        return body

    return app


def main():
    """Main entry point."""
    config_provider = EnvConfigProvider()
    server = config_provider.get_server_config()
    configure_logging(server.log_level)

    logger.info(f"Adapter health server listening on {server.host}:{server.port}")
    uvicorn.run(
        create_app(config_provider),
        host=server.host,
        port=server.port,
        log_level=server.log_level.lower(),
        log_config=get_logging_config(server.log_level),
    )


if __name__ == "__main__":
    main()
