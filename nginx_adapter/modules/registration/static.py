"""
One-shot registration of bundled workload and trait definitions.

Definitions ship with the adapter under templates/oam/<kind>s/. Each
`<name>_definition.json` may have a sibling
`<name>.meshery.layer5io.schema.json` describing its settings.
"""

import json
import logging
from pathlib import Path
from typing import List, Tuple

from nginx_adapter.errors import RegistrationError

from .client import RegistrationClient

logger = logging.getLogger("nginx_adapter.registration")

DEFINITION_SUFFIX = "_definition.json"
SCHEMA_SUFFIX = ".meshery.layer5io.schema.json"

DEFAULT_TEMPLATES_PATH = Path(__file__).resolve().parents[2] / "templates" / "oam"


def load_definitions(directory: Path) -> List[Tuple[str, dict, str]]:
    """
    Load (name, definition, schema) triples from a directory.

    Raises:
        RegistrationError: If a definition is not valid JSON or a file is unreadable
    """
    if not directory.is_dir():
        logger.warning(f"Definition directory {directory} not found, nothing to register")
        return []

    definitions = []
    for path in sorted(directory.glob(f"*{DEFINITION_SUFFIX}")):
        name = path.name[: -len(DEFINITION_SUFFIX)]
        schema_path = directory / f"{name}{SCHEMA_SUFFIX}"
        try:
            definition = json.loads(path.read_text(encoding="utf-8"))
            schema = schema_path.read_text(encoding="utf-8") if schema_path.exists() else ""
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise RegistrationError(f"Invalid definition files for {name} in {directory}: {e}") from e

        definitions.append((name, definition, schema))

    return definitions


class StaticRegistrar:
    """Registers the adapter's compiled-in capabilities once at startup."""

    def __init__(self, client: RegistrationClient, templates_path: Path = DEFAULT_TEMPLATES_PATH):
        self.client = client
        self.templates_path = Path(templates_path)

    async def _register_kind(self, server_address: str, self_address: str, kind: str) -> int:
        definitions = load_definitions(self.templates_path / f"{kind}s")
        for name, definition, schema in definitions:
            await self.client.register_definition(
                server_address, self_address, kind, definition, schema
            )
            logger.debug(f"Registered {kind} {name}")
        return len(definitions)

    async def register_workloads(self, server_address: str, self_address: str) -> int:
        """Register all bundled workload definitions. Returns the count."""
        return await self._register_kind(server_address, self_address, "workload")

    async def register_traits(self, server_address: str, self_address: str) -> int:
        """Register all bundled trait definitions. Returns the count."""
        return await self._register_kind(server_address, self_address, "trait")

    async def register_capabilities(self, server_address: str, self_address: str) -> None:
        """
        Register workloads, then traits.

        Failures are logged per kind; a workload failure does not stop trait
        registration and nothing is raised to the caller.
        """
        try:
            count = await self.register_workloads(server_address, self_address)
            logger.info(f"Registered {count} static workload definition(s)")
        except RegistrationError as e:
            logger.info(f"Static workload registration failed: {e}")

        try:
            count = await self.register_traits(server_address, self_address)
            logger.info(f"Registered {count} static trait definition(s)")
        except RegistrationError as e:
            logger.info(f"Static trait registration failed: {e}")
