"""The config-kourier config map and its parsing."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

CONFIG_NAME = "config-kourier"

ENABLE_SERVICE_ACCESS_LOGGING_KEY = "enable-service-access-logging"
ENABLE_PROXY_PROTOCOL_KEY = "enable-proxy-protocol"
CLUSTER_CERT_KEY = "cluster-cert-secret"
IDLE_TIMEOUT_KEY = "stream-idle-timeout"
TRAFFIC_ISOLATION_KEY = "traffic-isolation"

ISOLATION_INGRESS_PORT = "port"


class ConfigError(ValueError):
    """A config map value could not be parsed."""


@dataclass
class Kourier:
    """Configuration of the Kourier gateway."""

    enable_service_access_logging: bool = True
    enable_proxy_protocol: bool = False
    cluster_cert_secret: str = ""
    idle_timeout: timedelta = field(default_factory=timedelta)
    traffic_isolation: str = ""


def default_config() -> Kourier:
    """Return the configuration used when the config map sets nothing."""
    return Kourier()


_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def parse_bool(value: str) -> bool:
    """Parse a boolean the way the config map format spells it."""
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"invalid boolean {value!r}")


_DURATION_UNITS = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_DURATION_COMPONENT = re.compile(r"(\d*)(?:\.(\d*))?([^\d.]*)")


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as "300ms", "1.5h" or "2h45m"."""
    text = value
    negative = False
    if text and text[0] in "+-":
        negative = text[0] == "-"
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {value!r}")

    total_ns = 0
    pos = 0
    while pos < len(text):
        match = _DURATION_COMPONENT.match(text, pos)
        whole, fraction, unit = match.group(1), match.group(2), match.group(3)
        if not whole and not fraction:
            raise ValueError(f"invalid duration {value!r}")
        if not unit:
            raise ValueError(f"missing unit in duration {value!r}")
        scale = _DURATION_UNITS.get(unit)
        if scale is None:
            raise ValueError(f"unknown unit {unit!r} in duration {value!r}")
        total_ns += int(whole or 0) * scale
        if fraction:
            total_ns += int(fraction) * scale // 10 ** len(fraction)
        pos = match.end()

    micros = total_ns // 1000
    return timedelta(microseconds=-micros if negative else micros)


def _parse_into(data: Mapping[str, str], key: str, parser, target: dict[str, Any], attr: str) -> None:
    if key not in data:
        return
    try:
        target[attr] = parser(data[key])
    except ValueError as err:
        raise ConfigError(f"failed to parse {key!r}: {err}") from err


def new_config_from_map(config_map: Mapping[str, str] | None) -> Kourier:
    """Build a Kourier configuration from the config map's data."""
    data = config_map or {}
    values: dict[str, Any] = {}
    _parse_into(data, ENABLE_SERVICE_ACCESS_LOGGING_KEY, parse_bool, values, "enable_service_access_logging")
    _parse_into(data, ENABLE_PROXY_PROTOCOL_KEY, parse_bool, values, "enable_proxy_protocol")
    _parse_into(data, CLUSTER_CERT_KEY, str, values, "cluster_cert_secret")
    _parse_into(data, IDLE_TIMEOUT_KEY, parse_duration, values, "idle_timeout")
    _parse_into(data, TRAFFIC_ISOLATION_KEY, str, values, "traffic_isolation")
    return Kourier(**values)


def new_config_from_config_map(config_map: Any) -> Kourier:
    """Build a Kourier configuration from a config map object or its mapping form."""
    if isinstance(config_map, Mapping):
        data = config_map.get("data")
    else:
        data = getattr(config_map, "data", None)
    return new_config_from_map(data)