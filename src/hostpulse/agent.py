"""The polling loop: collect a snapshot, send it, sleep, repeat."""

from __future__ import annotations

import enum
import logging
import threading
from typing import Callable

from .collector.manager import CollectorManager
from .errors import CollectionError, TransportError
from .exporter.base import BaseExporter

logger = logging.getLogger(__name__)


class CycleOutcome(enum.Enum):
    """How a single collect-and-send cycle ended."""

    SENT = "sent"
    SEND_FAILED = "send_failed"
    COLLECTION_FAILED = "collection_failed"


class ReportingAgent:
    """Runs collect → send → sleep until stopped.

    Cycles are strictly sequential. A failed cycle is never retried; the
    next one starts after the usual delay with fresh readings. *sleep* is
    called with the interval after every cycle and defaults to waiting on
    *stop_event*, so :meth:`stop` also cuts the delay short.
    """

    def __init__(
        self,
        manager: CollectorManager,
        exporter: BaseExporter,
        interval_seconds: float = 5.0,
        sleep: Callable[[float], object] | None = None,
        stop_event: threading.Event | None = None,
    ) -> None:
        self._manager = manager
        self._exporter = exporter
        self._interval = interval_seconds
        self._stop_event = stop_event or threading.Event()
        self._sleep = sleep or self._stop_event.wait

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        """Ask the loop to exit after the current cycle."""
        self._stop_event.set()

    def run_once(self) -> CycleOutcome:
        """Collect one snapshot and try to send it."""
        try:
            snapshot = self._manager.collect_once()
        except CollectionError as exc:
            logger.error("Collection error, skipping cycle: %s", exc)
            return CycleOutcome.COLLECTION_FAILED

        try:
            self._exporter.export(snapshot)
        except TransportError as exc:
            logger.error("Error sending data to API: %s", exc)
            return CycleOutcome.SEND_FAILED

        logger.info(
            "Data successfully sent to API (cpu=%.1f%% ram=%.2fGB/%.1f%% temp=%s)",
            snapshot.cpu_percent,
            snapshot.ram_used_gb,
            snapshot.ram_used_percent,
            f"{snapshot.temperature_c:.1f}C" if snapshot.temperature_available else "n/a",
        )
        return CycleOutcome.SENT

    def run(self, max_iterations: int | None = None) -> int:
        """Loop until stopped or *max_iterations* cycles have run.

        Returns the number of cycles run.
        """
        logger.info("Reporting agent started (interval=%.1fs)", self._interval)
        iterations = 0
        while not self._stop_event.is_set():
            if max_iterations is not None and iterations >= max_iterations:
                break
            self.run_once()
            iterations += 1
            self._sleep(self._interval)
        logger.info("Reporting agent stopped after %d cycle(s)", iterations)
        return iterations
