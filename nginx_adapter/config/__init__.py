"""
Config Module - Black Box Interface

Purpose: Adapter configuration
Interface: EnvConfigProvider.get_registration_config(), get_server_config()
Hidden: Environment parsing, compiled-in registration constants
"""

from .provider import (
    ConfigProvider,
    EnvConfigProvider,
    RegistrationConfig,
    ServerConfig,
    normalize_server_address,
)

__all__ = [
    "ConfigProvider",
    "EnvConfigProvider",
    "RegistrationConfig",
    "ServerConfig",
    "normalize_server_address",
]
