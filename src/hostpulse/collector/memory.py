"""Memory usage collector."""

from __future__ import annotations

from dataclasses import dataclass

import psutil

from ..errors import CollectionError
from .base import BaseCollector

BYTES_PER_GB = 1_000_000_000


@dataclass(frozen=True)
class MemoryUsage:
    """Used memory in decimal gigabytes and as a percentage."""

    used_gb: float
    used_percent: float


class MemoryCollector(BaseCollector):
    """Collects virtual memory usage."""

    @property
    def name(self) -> str:
        return "memory"

    def collect(self) -> MemoryUsage:
        try:
            mem = psutil.virtual_memory()
        except (psutil.Error, OSError) as exc:
            raise CollectionError(self.name, str(exc) or type(exc).__name__) from exc
        return MemoryUsage(
            used_gb=mem.used / BYTES_PER_GB,
            used_percent=float(mem.percent),
        )
