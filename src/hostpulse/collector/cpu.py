"""CPU utilization collector."""

from __future__ import annotations

import psutil

from ..errors import CollectionError
from .base import BaseCollector


class CpuCollector(BaseCollector):
    """System-wide CPU percentage averaged over a blocking window."""

    def __init__(self, window_seconds: float = 1.0) -> None:
        self._window_seconds = window_seconds

    @property
    def name(self) -> str:
        return "cpu"

    def collect(self) -> float:
        try:
            return float(psutil.cpu_percent(interval=self._window_seconds))
        except (psutil.Error, OSError) as exc:
            raise CollectionError(self.name, str(exc) or type(exc).__name__) from exc
