"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from nginx_adapter.modules.charts.locator import ChartCoordinates
from nginx_adapter.modules.registration.static import DEFAULT_TEMPLATES_PATH
from nginx_adapter.modules.releases.feed import DEFAULT_RELEASES_URL
from nginx_adapter.modules.scheduler import DEFAULT_INTERVAL_SECONDS

DEFAULT_MESHERY_SERVER = "http://localhost:9081"


@dataclass(frozen=True)
class RegistrationConfig:
    """Capability registration configuration."""
    server_address: str
    service_address: str
    adapter_port: int
    templates_path: Path = DEFAULT_TEMPLATES_PATH
    strict_chart_resolution: bool = False
    # Compiled-in, not read from the environment
    coordinates: ChartCoordinates = field(default_factory=ChartCoordinates)
    releases_url: str = DEFAULT_RELEASES_URL
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS
    timeout_minutes: int = 60

    @property
    def self_address(self) -> str:
        """host:port under which the orchestration server reaches this adapter."""
        return f"{self.service_address}:{self.adapter_port}"


@dataclass(frozen=True)
class ServerConfig:
    """Health server configuration."""
    host: str
    port: int
    log_level: str


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_registration_config(self) -> RegistrationConfig:
        """Get registration configuration."""
        ...

    def get_server_config(self) -> ServerConfig:
        """Get health server configuration."""
        ...


def normalize_server_address(address: str) -> str:
    """Prepend http:// to addresses given without a scheme."""
    if not address:
        return DEFAULT_MESHERY_SERVER
    if address.startswith("http"):
        return address
    return f"http://{address}"


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_registration_config(self) -> RegistrationConfig:
        """Get registration configuration from environment variables."""
        return RegistrationConfig(
            server_address=normalize_server_address(os.getenv("MESHERY_SERVER", "")),
            service_address=os.getenv("SERVICE_ADDR") or "localhost",
            adapter_port=int(os.getenv("ADAPTER_PORT", "10010")),
            templates_path=Path(os.getenv("OAM_TEMPLATES_PATH") or DEFAULT_TEMPLATES_PATH),
            strict_chart_resolution=os.getenv(
                "REGISTRATION_STRICT_CHART_RESOLUTION", "false"
            ).lower() == "true",
        )

    def get_server_config(self) -> ServerConfig:
        """Get health server configuration from environment variables."""
        return ServerConfig(
            host=os.getenv("ADAPTER_HOST", "0.0.0.0"),
            port=int(os.getenv("HEALTH_PORT", "10011")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
