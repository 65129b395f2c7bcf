"""Polling loop: fetch, ingest, notify, summarize."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional, Protocol

from skytally.models.observation import AircraftBatch
from skytally.services.notifier import RarityNotifier
from skytally.services.ranking import build_summary, render_summary
from skytally.services.sighting_store import SightingStore

logger = logging.getLogger("skytally.tracker")
summary_logger = logging.getLogger("skytally.summary")


class AircraftSource(Protocol):
    async def get_aircraft(self, lat: float, lon: float) -> Optional[AircraftBatch]:
        ...


class TrafficTracker:
    """Drive the sighting store from an aircraft source on a fixed interval."""

    def __init__(
        self,
        *,
        store: SightingStore,
        source: AircraftSource,
        notifier: RarityNotifier,
        poll_interval: float = 30.0,
        warmup_seconds: float = 3600.0,
        summary_interval: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
        max_cycles: int | None = None,
    ) -> None:
        self.store = store
        self.source = source
        self.notifier = notifier
        self.poll_interval = poll_interval
        self.warmup_seconds = warmup_seconds
        self.summary_interval = summary_interval
        self.clock = clock
        self.max_cycles = max_cycles
        self._started_at: float | None = None
        self._last_summary_at: float | None = None

    async def run(self) -> None:
        """Run until cancelled, or until ``max_cycles`` cycles have completed."""

        self._started_at = self.clock()
        self._last_summary_at = self._started_at
        cycles = 0
        while True:
            try:
                await self.run_once()
            except asyncio.CancelledError:
                logger.info("Traffic tracker cancelled")
                raise
            except Exception as exc:
                logger.warning("Traffic tracker cycle failed: %s", exc)

            cycles += 1
            if self.max_cycles is not None and cycles >= self.max_cycles:
                return
            await asyncio.sleep(self.poll_interval)

    async def run_once(self) -> int:
        """Perform one fetch/ingest/notify cycle and return the events delivered."""

        if self._started_at is None:
            self._started_at = self.clock()
            self._last_summary_at = self._started_at

        now = self.clock()
        if self.store.is_warmup and now - self._started_at >= self.warmup_seconds:
            self.store.finish_warmup()

        reference = self.store.reference
        batch = await self.source.get_aircraft(reference.latitude, reference.longitude)
        delivered = 0
        if batch is not None:
            events = self.store.ingest(batch)
            delivered = await self.notifier.notify(events, warmup=self.store.is_warmup)

        if now - self._last_summary_at >= self.summary_interval:
            self.log_summary()
            self._last_summary_at = now
        return delivered

    def log_summary(self) -> None:
        for line in render_summary(build_summary(self.store.snapshot())):
            summary_logger.info(line)


__all__ = ["AircraftSource", "TrafficTracker"]
