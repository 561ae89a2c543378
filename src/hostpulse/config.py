"""Configuration loading and validation for hostpulse."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigurationError

DEFAULT_THERMAL_ZONE_PATH = "/sys/class/thermal/thermal_zone0/temp"
TEMPERATURE_SOURCES = ("auto", "thermal_zone", "wmi", "none")


@dataclass
class EndpointConfig:
    """Remote collector endpoint settings."""

    url: str = ""
    secret: str = ""
    timeout_seconds: float = 10.0


@dataclass
class SamplingConfig:
    """Polling loop settings."""

    interval_seconds: float = 5.0
    cpu_window_seconds: float = 1.0


@dataclass
class TemperatureConfig:
    """Temperature source selection."""

    source: str = "auto"
    thermal_zone_path: str = DEFAULT_THERMAL_ZONE_PATH
    query_timeout_seconds: float = 10.0


@dataclass
class HostPulseConfig:
    """Top-level hostpulse configuration."""

    endpoint: EndpointConfig = field(default_factory=EndpointConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    temperature: TemperatureConfig = field(default_factory=TemperatureConfig)
    log_level: str = "INFO"


# Applied in order, so the prefixed names win over the bare ones.
_ENV_MAP = {
    "API_URL": ("endpoint", "url"),
    "API_SECRET": ("endpoint", "secret"),
    "HOSTPULSE_API_URL": ("endpoint", "url"),
    "HOSTPULSE_API_SECRET": ("endpoint", "secret"),
    "HOSTPULSE_REQUEST_TIMEOUT": ("endpoint", "timeout_seconds"),
    "HOSTPULSE_INTERVAL": ("sampling", "interval_seconds"),
    "HOSTPULSE_TEMPERATURE_SOURCE": ("temperature", "source"),
    "HOSTPULSE_THERMAL_ZONE_PATH": ("temperature", "thermal_zone_path"),
    "HOSTPULSE_LOG_LEVEL": ("log_level",),
}

_FLOAT_KEYS = {"timeout_seconds", "interval_seconds"}


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides."""
    for env_key, path in _ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is None or value == "":
            continue
        obj = data
        for part in path[:-1]:
            obj = obj.setdefault(part, {})
        final_key = path[-1]
        if final_key in _FLOAT_KEYS:
            try:
                obj[final_key] = float(value)
            except ValueError as exc:
                raise ConfigurationError(f"{env_key} must be a number, got {value!r}") from exc
        else:
            obj[final_key] = value
    return data


def _section(cls: type, data: Any) -> Any:
    if not isinstance(data, dict):
        return cls()
    return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def _endpoint_section(data: Any) -> EndpointConfig:
    endpoint = _section(EndpointConfig, data)
    # unquoted YAML scalars such as `secret: 123456` load as numbers
    for key in ("url", "secret"):
        value = getattr(endpoint, key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            setattr(endpoint, key, str(value))
    return endpoint


def _dict_to_config(data: dict[str, Any]) -> HostPulseConfig:
    """Convert a raw dictionary to a HostPulseConfig dataclass."""
    return HostPulseConfig(
        endpoint=_endpoint_section(data.get("endpoint")),
        sampling=_section(SamplingConfig, data.get("sampling")),
        temperature=_section(TemperatureConfig, data.get("temperature")),
        log_level=str(data.get("log_level", "INFO")),
    )


def load_config(path: str | Path | None = None) -> HostPulseConfig:
    """Load configuration from a YAML file with environment overrides.

    Looks for ``hostpulse.yaml`` in the current directory if *path* is None.
    A missing file is not an error; defaults and the environment are used.
    """
    data: dict[str, Any] = {}
    if path is None:
        path = Path("hostpulse.yaml")
    else:
        path = Path(path)

    if path.exists():
        try:
            with open(path, encoding="utf-8") as fh:
                loaded = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"invalid YAML in {path}: {exc}") from exc
        if isinstance(loaded, dict):
            data = loaded

    data = _apply_env_overrides(data)
    return _dict_to_config(data)


def validate_config(cfg: HostPulseConfig) -> HostPulseConfig:
    """Check the values the agent cannot run without.

    Raises :class:`ConfigurationError` describing the first problem found.
    """
    for key in ("url", "secret"):
        value = getattr(cfg.endpoint, key)
        if not isinstance(value, str):
            raise ConfigurationError(f"endpoint.{key} must be a string, got {type(value).__name__}")
    if not cfg.endpoint.url:
        raise ConfigurationError("collector URL is not set (endpoint.url / API_URL)")
    if not cfg.endpoint.secret:
        raise ConfigurationError("shared secret is not set (endpoint.secret / API_SECRET)")
    try:
        cfg.endpoint.secret.encode("latin-1")
    except UnicodeEncodeError as exc:
        raise ConfigurationError("endpoint.secret must contain only latin-1 characters to fit in an HTTP header") from exc
    if cfg.temperature.source not in TEMPERATURE_SOURCES:
        raise ConfigurationError(
            f"temperature.source must be one of {', '.join(TEMPERATURE_SOURCES)}, "
            f"got {cfg.temperature.source!r}"
        )
    positives = {
        "endpoint.timeout_seconds": cfg.endpoint.timeout_seconds,
        "sampling.interval_seconds": cfg.sampling.interval_seconds,
        "sampling.cpu_window_seconds": cfg.sampling.cpu_window_seconds,
        "temperature.query_timeout_seconds": cfg.temperature.query_timeout_seconds,
    }
    for name, value in positives.items():
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            raise ConfigurationError(f"{name} must be a positive number, got {value!r}")
    return cfg
