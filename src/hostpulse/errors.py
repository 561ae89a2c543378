"""Exception hierarchy for hostpulse."""

from __future__ import annotations


class HostPulseError(Exception):
    """Base class for all hostpulse errors."""


class CollectionError(HostPulseError):
    """A metric source failed to produce a reading."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source


class PlatformUnsupportedError(HostPulseError):
    """No temperature source is implemented for this platform."""

    def __init__(self, system: str) -> None:
        super().__init__(f"temperature collection not supported on {system or 'unknown'}")
        self.system = system


class TransportError(HostPulseError):
    """Sending a snapshot to the collector endpoint failed."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ConfigurationError(HostPulseError):
    """Required configuration is missing or invalid."""
