"""Background sync: import then export on a fixed interval."""

from __future__ import annotations

import asyncio
import logging
from contextlib import AbstractAsyncContextManager
from typing import Callable

from payroll_integration.services.integration_service import IntegrationService

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 600.0

ServiceFactory = Callable[[], AbstractAsyncContextManager[IntegrationService]]


class BackgroundSync:
    """Runs import and export unattended until stopped.

    Each iteration gets its own IntegrationService (and therefore its own
    session) from ``service_factory``. An iteration that blows up is logged
    and the loop carries on with the next one.

    Usage:
        sync = BackgroundSync(service_scope, interval=600)
        sync.start()
        ...
        await sync.stop()
    """

    def __init__(
        self,
        service_factory: ServiceFactory,
        interval: float = DEFAULT_INTERVAL_SECONDS,
    ):
        self.service_factory = service_factory
        self.interval = interval
        self.iterations = 0
        self._stop_event: asyncio.Event | None = None
        self._task: asyncio.Task[None] | None = None

    async def run_once(self) -> None:
        """Run one import + export cycle in its own unit of work."""
        self.iterations += 1
        try:
            async with self.service_factory() as service:
                imported = await service.import_time_entries()
                exported = await service.export_payroll()
        except Exception:
            logger.exception("Background sync iteration %d failed", self.iterations)
            return

        logger.info(
            "Background sync iteration %d: imported=%d invalid=%d exported=%d queued=%d",
            self.iterations,
            imported.imported,
            imported.invalid,
            exported.exported_count,
            exported.failed_queued,
        )

    async def run(self, stop_event: asyncio.Event) -> None:
        """Loop until ``stop_event`` is set.

        The event is checked before every iteration and awaited between
        iterations, so setting it during the wait ends the loop immediately
        without another cycle.
        """
        logger.info("Background sync started (interval=%ss)", self.interval)
        while not stop_event.is_set():
            await self.run_once()
            if stop_event.is_set():
                break
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
        logger.info("Background sync stopped after %d iterations", self.iterations)

    def start(self) -> asyncio.Task[None]:
        """Start the loop as a background task."""
        if self._task is not None and not self._task.done():
            return self._task
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self.run(self._stop_event), name="background-sync")
        return self._task

    async def stop(self) -> None:
        """Signal the loop to stop and wait for it to finish."""
        if self._task is None or self._stop_event is None:
            return
        self._stop_event.set()
        await self._task
        self._task = None
        self._stop_event = None
