"""
Refresh scheduler for dynamic capability registration.

Runs one pass immediately, then one pass per interval. The timer is only
re-armed after a pass finishes, so a slow pass delays the next one but never
overlaps with it.
"""

import asyncio
import logging
from typing import Optional

from nginx_adapter.modules.charts.locator import ChartCoordinates
from nginx_adapter.modules.registration.registrar import (
    DynamicRegistrar,
    RegistrationOutcome,
)

logger = logging.getLogger("nginx_adapter.scheduler")

# Re-register once a day
DEFAULT_INTERVAL_SECONDS = 24 * 60 * 60


class RefreshScheduler:
    """Keeps the published capability set fresh for the process lifetime."""

    def __init__(
        self,
        registrar: DynamicRegistrar,
        server_address: str,
        self_address: str,
        coordinates: ChartCoordinates,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ):
        """
        Initialize scheduler.

        Args:
            registrar: Registrar that performs one pass
            server_address: Orchestration server base URL
            self_address: host:port identifying this adapter
            coordinates: Chart coordinates for bundle lookup
            interval_seconds: Delay between the end of one pass and the next
        """
        self.registrar = registrar
        self.server_address = server_address
        self.self_address = self_address
        self.coordinates = coordinates
        self.interval_seconds = interval_seconds

        self.passes_completed = 0
        self.last_outcome: Optional[RegistrationOutcome] = None
        self.is_running = False

    async def run_once(self) -> Optional[RegistrationOutcome]:
        """Execute exactly one pass. Never raises on pass failure."""
        try:
            outcome = await self.registrar.run_pass(
                self.server_address, self.self_address, self.coordinates
            )
        except Exception as e:
            logger.exception(f"Unexpected error during registration pass: {e}")
            outcome = RegistrationOutcome(success=False, stage="unexpected", message=str(e))

        self.passes_completed += 1
        self.last_outcome = outcome
        return outcome

    async def _wait(self, stop_event: asyncio.Event) -> bool:
        """Wait one interval. Returns True if a stop was requested."""
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=self.interval_seconds)
            return True
        except asyncio.TimeoutError:
            return False

    async def run(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """
        Run passes until `stop_event` is set.

        Without a stop event the loop only ends when its task is cancelled.
        """
        stop_event = stop_event or asyncio.Event()
        self.is_running = True
        logger.info(
            f"Starting dynamic registration loop (interval: {self.interval_seconds}s)"
        )

        try:
            while not stop_event.is_set():
                await self.run_once()
                if await self._wait(stop_event):
                    break
        finally:
            self.is_running = False
            logger.info(f"Dynamic registration loop stopped after {self.passes_completed} pass(es)")
