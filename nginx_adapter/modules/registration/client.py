"""
HTTP client for the orchestration (Meshery) server registration endpoints.

The server owns component generation: dynamic registration only ships the
extraction rule, static registration ships pre-built definitions.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from nginx_adapter.errors import RegistrationRejected

from .models import ExtractionRule

logger = logging.getLogger("nginx_adapter.registration")

DYNAMIC_WORKLOAD_PATH = "/api/oam/workload/dynamic"
DEFINITION_PATH = "/api/oam/{kind}"


class RegistrationClient:
    """Submits capability registrations to the orchestration server."""

    def __init__(self, client: Optional[httpx.AsyncClient] = None, timeout: float = 30.0):
        """
        Initialize client.

        Args:
            client: Optional shared AsyncClient
            timeout: Timeout in seconds for static definition submissions
        """
        self.client = client
        self.timeout = timeout

    async def _post(self, url: str, payload: Dict[str, Any], timeout: float) -> None:
        try:
            if self.client is not None:
                response = await self.client.post(url, json=payload, timeout=timeout)
            else:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    response = await client.post(url, json=payload)
        except httpx.HTTPError as e:
            raise RegistrationRejected(f"Could not reach {url}: {e}") from e

        if response.status_code >= 300:
            raise RegistrationRejected(
                f"{url} returned {response.status_code}: {response.text}"
            )

    async def register_workloads_dynamically(
        self, server_address: str, self_address: str, rule: ExtractionRule
    ) -> None:
        """
        Submit an extraction rule for server-side component generation.

        The request is bounded by the rule's own timeout.

        Raises:
            RegistrationRejected: On transport errors or a non-2xx response
        """
        url = f"{server_address.rstrip('/')}{DYNAMIC_WORKLOAD_PATH}"
        payload = {"host": self_address, "config": rule.to_request()}

        logger.debug(f"Submitting dynamic registration for {rule.name} {rule.mesh_version} to {url}")
        await self._post(url, payload, timeout=rule.timeout_minutes * 60.0)

    async def register_definition(
        self,
        server_address: str,
        self_address: str,
        kind: str,
        definition: Dict[str, Any],
        schema: str = "",
    ) -> None:
        """
        Register one pre-built workload or trait definition.

        Args:
            server_address: Orchestration server base URL
            self_address: host:port of this adapter
            kind: "workload" or "trait"
            definition: OAM definition document
            schema: JSON schema of the definition's settings, as a string

        Raises:
            RegistrationRejected: On transport errors or a non-2xx response
        """
        url = f"{server_address.rstrip('/')}{DEFINITION_PATH.format(kind=kind)}"
        payload = {
            "oam_definition": definition,
            "oam_ref_schema": schema,
            "host": self_address,
        }
        await self._post(url, payload, timeout=self.timeout)
