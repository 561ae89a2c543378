"""Base interface for metric collectors and the snapshot they feed."""

from __future__ import annotations

import abc
from dataclasses import dataclass
from typing import Any

# Wire value sent when no temperature reading could be taken.
TEMPERATURE_UNAVAILABLE = 0.0


@dataclass(frozen=True)
class SystemSnapshot:
    """One complete set of readings taken in a single loop cycle."""

    cpu_percent: float
    ram_used_gb: float
    ram_used_percent: float
    temperature_c: float
    temperature_available: bool = True

    def to_payload(self) -> dict[str, float]:
        """Serialize to the four fields the collector endpoint accepts."""
        return {
            "cpu_percent": self.cpu_percent,
            "ram_used_gb": self.ram_used_gb,
            "ram_used_percent": self.ram_used_percent,
            "temperature_c": self.temperature_c,
        }


class BaseCollector(abc.ABC):
    """Abstract base class for single-metric collectors."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Collector name used in errors and log output."""

    @abc.abstractmethod
    def collect(self) -> Any:
        """Read the metric from the OS. Raises CollectionError on failure."""
