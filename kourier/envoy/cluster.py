"""Upstream clusters."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import timedelta
from enum import Enum
from typing import Any

from kourier.ext_authz import HTTP_PROTOCOL_OPTIONS_KEY, HTTP_PROTOCOL_OPTIONS_TYPE


class DiscoveryType(str, Enum):
    """How a cluster finds its members."""

    STATIC = "STATIC"
    STRICT_DNS = "STRICT_DNS"
    LOGICAL_DNS = "LOGICAL_DNS"
    EDS = "EDS"
    ORIGINAL_DST = "ORIGINAL_DST"


def _format_duration(value: timedelta | float) -> str:
    """Render a duration in the seconds notation of the envoy configuration."""
    if not isinstance(value, timedelta):
        value = timedelta(seconds=value)
    total_micros = (value.days * 86400 + value.seconds) * 1_000_000 + value.microseconds
    sign = "-" if total_micros < 0 else ""
    seconds, micros = divmod(abs(total_micros), 1_000_000)
    if micros == 0:
        return f"{sign}{seconds}s"
    if micros % 1000 == 0:
        return f"{sign}{seconds}.{micros // 1000:03d}s"
    return f"{sign}{seconds}.{micros:06d}s"


def new_cluster(
    name: str,
    connect_timeout: timedelta | float,
    endpoints: Iterable[dict[str, Any]],
    is_http2: bool,
    transport_socket: dict[str, Any] | None,
    discovery_type: DiscoveryType | str,
) -> dict[str, Any]:
    """Return a cluster with the given endpoints and settings."""
    cluster: dict[str, Any] = {
        "name": name,
        "type": DiscoveryType(discovery_type).value,
        "connect_timeout": _format_duration(connect_timeout),
        "load_assignment": {
            "cluster_name": name,
            "endpoints": [{"lb_endpoints": list(endpoints)}],
        },
    }
    if transport_socket is not None:
        cluster["transport_socket"] = transport_socket

    if is_http2:
        cluster["typed_extension_protocol_options"] = {
            HTTP_PROTOCOL_OPTIONS_KEY: {
                "@type": HTTP_PROTOCOL_OPTIONS_TYPE,
                "explicit_http_config": {"http2_protocol_options": {}},
            },
        }
    return cluster