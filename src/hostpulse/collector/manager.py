"""Collector manager that assembles one snapshot from the individual collectors."""

from __future__ import annotations

import logging

from ..config import HostPulseConfig
from ..errors import CollectionError, PlatformUnsupportedError
from .base import TEMPERATURE_UNAVAILABLE, BaseCollector, SystemSnapshot
from .cpu import CpuCollector
from .memory import MemoryCollector
from .temperature import TemperatureSource, select_temperature_source

logger = logging.getLogger(__name__)


class CollectorManager:
    """Runs the CPU, memory and temperature collectors in order.

    CPU and memory failures propagate as :class:`CollectionError` so the
    caller can abandon the cycle. Temperature failures are logged and
    replaced with :data:`TEMPERATURE_UNAVAILABLE`.
    """

    def __init__(
        self,
        cpu: BaseCollector,
        memory: BaseCollector,
        temperature: TemperatureSource,
    ) -> None:
        self._cpu = cpu
        self._memory = memory
        self._temperature = temperature

    @classmethod
    def from_config(cls, config: HostPulseConfig) -> CollectorManager:
        return cls(
            cpu=CpuCollector(window_seconds=config.sampling.cpu_window_seconds),
            memory=MemoryCollector(),
            temperature=select_temperature_source(config.temperature),
        )

    def collect_once(self) -> SystemSnapshot:
        """Run all collectors once and return the assembled snapshot."""
        cpu_percent = self._cpu.collect()
        memory = self._memory.collect()

        try:
            temperature_c = self._temperature.measure_temperature()
            available = True
        except (CollectionError, PlatformUnsupportedError) as exc:
            logger.warning("Temperature unavailable (ignored): %s", exc)
            temperature_c = TEMPERATURE_UNAVAILABLE
            available = False

        return SystemSnapshot(
            cpu_percent=cpu_percent,
            ram_used_gb=memory.used_gb,
            ram_used_percent=memory.used_percent,
            temperature_c=temperature_c,
            temperature_available=available,
        )
