"""Platform-specific temperature sources.

Temperature is the one reading without a portable API, so each platform gets
its own :class:`TemperatureSource` and :func:`select_temperature_source`
picks one at startup. Everything downstream only sees
``measure_temperature()``.
"""

from __future__ import annotations

import abc
import json
import logging
import math
import platform
import subprocess
from pathlib import Path
from typing import Any, Callable

from ..config import DEFAULT_THERMAL_ZONE_PATH, TemperatureConfig
from ..errors import CollectionError, ConfigurationError, PlatformUnsupportedError

logger = logging.getLogger(__name__)

WMI_TEMPERATURE_QUERY = "SELECT CurrentTemperature FROM Win32_TemperatureProbe"

CommandRunner = Callable[[list[str], float], str]


class TemperatureSource(abc.ABC):
    """Something that can report the current temperature in Celsius."""

    name = "temperature"

    @abc.abstractmethod
    def measure_temperature(self) -> float:
        """Return degrees Celsius or raise CollectionError."""


class ThermalZoneSource(TemperatureSource):
    """Reads a sysfs thermal zone that exposes millidegrees Celsius."""

    def __init__(self, path: str | Path = DEFAULT_THERMAL_ZONE_PATH) -> None:
        self._path = Path(path)

    def measure_temperature(self) -> float:
        try:
            raw = self._path.read_text(encoding="ascii")
        except (OSError, UnicodeDecodeError) as exc:
            raise CollectionError(self.name, f"cannot read {self._path}: {exc}") from exc
        text = raw.strip()
        try:
            millidegrees = float(text)
        except ValueError as exc:
            raise CollectionError(self.name, f"invalid reading {text!r} in {self._path}") from exc
        if not math.isfinite(millidegrees):
            raise CollectionError(self.name, f"invalid reading {text!r} in {self._path}")
        return millidegrees / 1000


def _run_powershell(command: list[str], timeout: float) -> str:
    result = subprocess.run(
        command,
        capture_output=True,
        text=True,
        timeout=timeout,
        check=True,
    )
    return result.stdout


class WmiProbeSource(TemperatureSource):
    """Queries ``Win32_TemperatureProbe`` through PowerShell.

    WMI reports ``CurrentTemperature`` in tenths of a Kelvin. Only the first
    probe returned is used.
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._runner = runner or _run_powershell
        self._timeout = timeout_seconds

    @property
    def command(self) -> list[str]:
        return [
            "powershell",
            "-NoProfile",
            "-Command",
            f"Get-WmiObject -Query '{WMI_TEMPERATURE_QUERY}' "
            "| Select-Object CurrentTemperature | ConvertTo-Json",
        ]

    def measure_temperature(self) -> float:
        try:
            output = self._runner(self.command, self._timeout)
        except (subprocess.SubprocessError, OSError) as exc:
            raise CollectionError(self.name, f"WMI query failed: {exc}") from exc

        output = output.strip()
        if not output:
            raise CollectionError(self.name, "no temperature data found")
        try:
            data: Any = json.loads(output)
        except json.JSONDecodeError as exc:
            raise CollectionError(self.name, f"unexpected WMI output: {output[:200]!r}") from exc

        # ConvertTo-Json emits a bare object for a single row
        rows = data if isinstance(data, list) else [data]
        if not rows:
            raise CollectionError(self.name, "no temperature data found")

        first = rows[0]
        value = first.get("CurrentTemperature") if isinstance(first, dict) else None
        if value is None:
            raise CollectionError(self.name, "probe returned no CurrentTemperature")
        try:
            tenths_kelvin = float(value)
        except (TypeError, ValueError) as exc:
            raise CollectionError(self.name, f"invalid reading {value!r}") from exc
        if not math.isfinite(tenths_kelvin):
            raise CollectionError(self.name, f"invalid reading {value!r}")
        return tenths_kelvin / 10.0 - 273.15


class UnsupportedTemperatureSource(TemperatureSource):
    """Placeholder for platforms without a temperature implementation."""

    def __init__(self, system: str) -> None:
        self.system = system

    def measure_temperature(self) -> float:
        raise PlatformUnsupportedError(self.system)


def select_temperature_source(
    config: TemperatureConfig | None = None,
    system: str | None = None,
) -> TemperatureSource:
    """Pick the temperature source for this host.

    *system* defaults to :func:`platform.system`; it is only consulted when
    ``config.source`` is ``auto``.
    """
    config = config or TemperatureConfig()
    source = config.source
    if source == "auto":
        system = platform.system() if system is None else system
        if system == "Linux":
            source = "thermal_zone"
        elif system == "Windows":
            source = "wmi"
        else:
            logger.info("No temperature source for platform %r", system)
            return UnsupportedTemperatureSource(system)

    if source == "thermal_zone":
        return ThermalZoneSource(config.thermal_zone_path)
    if source == "wmi":
        return WmiProbeSource(timeout_seconds=config.query_timeout_seconds)
    if source == "none":
        return UnsupportedTemperatureSource(system or platform.system())
    raise ConfigurationError(f"unknown temperature source {source!r}")
