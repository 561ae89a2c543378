"""Base interface for snapshot exporters."""

from __future__ import annotations

import abc

from ..collector.base import SystemSnapshot


class BaseExporter(abc.ABC):
    """Abstract base for exporters that deliver snapshots."""

    @abc.abstractmethod
    def export(self, snapshot: SystemSnapshot) -> None:
        """Deliver one snapshot. Raises TransportError on failure."""

    @abc.abstractmethod
    def shutdown(self) -> None:
        """Release resources."""
