"""
Registration Module - Black Box Interface

Purpose: Publish the adapter's capabilities to the orchestration server
Interface: DynamicRegistrar.run_pass(), StaticRegistrar.register_capabilities()
Hidden: Extraction rule wire format, HTTP endpoints, definition file layout

Registration is best-effort: failures are logged and never stop the adapter.
"""

from .client import RegistrationClient
from .models import (
    NGINX_CRD_FILTER,
    ExtractionRule,
    FilterSpec,
    GenerationMethod,
    Selector,
)
from .registrar import DynamicRegistrar, RegistrationOutcome, RegistrationSink
from .static import StaticRegistrar

__all__ = [
    "DynamicRegistrar",
    "ExtractionRule",
    "FilterSpec",
    "GenerationMethod",
    "NGINX_CRD_FILTER",
    "RegistrationClient",
    "RegistrationOutcome",
    "RegistrationSink",
    "Selector",
    "StaticRegistrar",
]
