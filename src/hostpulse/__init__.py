"""hostpulse: a small host-telemetry agent that pushes CPU, memory and
temperature readings to a remote collector."""

__version__ = "0.1.0"
