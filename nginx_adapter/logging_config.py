"""
Logging configuration for the adapter process.

Adapter modules log under `nginx_adapter.*`. Uvicorn access lines for the
health endpoints are dropped, and per-request httpx logging is held at
WARNING so the registration passes stay readable.
"""

import logging
import logging.config
from typing import Any, Dict

HEALTH_PATHS = ("/healthz", "/health")

# Third-party loggers that are noisy at INFO for a polling process
QUIET_LOGGERS = ("httpx", "httpcore")


class HealthCheckFilter(logging.Filter):
    """Filter to suppress health check endpoint logs."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "uvicorn.access":
            message = record.getMessage()
            if "GET" in message and any(f"{path} " in message for path in HEALTH_PATHS):
                return False
        return True


def get_logging_config(level: str = "INFO") -> Dict[str, Any]:
    """Build the dictConfig for the adapter and its uvicorn server."""
    loggers: Dict[str, Any] = {
        "nginx_adapter": {"level": level},
        "uvicorn": {"level": "INFO"},
        "uvicorn.access": {
            "handlers": ["access"],
            "level": "INFO",
            "propagate": False,
        },
    }
    for name in QUIET_LOGGERS:
        loggers[name] = {"level": "WARNING"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {"health_check_filter": {"()": HealthCheckFilter}},
        "formatters": {
            "default": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"},
            "access": {"format": "%(message)s"},
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["health_check_filter"],
            },
        },
        "loggers": loggers,
        "root": {"level": level, "handlers": ["default"]},
    }


def configure_logging(level: str = "INFO") -> None:
    """Apply the process logging configuration."""
    logging.config.dictConfig(get_logging_config(level))
