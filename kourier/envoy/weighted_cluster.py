"""Weighted cluster entries of a route."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from kourier.envoy.headers import headers_to_add


def new_weighted_cluster(
    name: str, traffic_perc: int, headers: Mapping[str, str] | None
) -> dict[str, Any]:
    """Return a cluster weight sending the given share of traffic to the cluster."""
    weighted: dict[str, Any] = {"name": name, "weight": traffic_perc}
    header_options = headers_to_add(headers)
    if header_options:
        weighted["request_headers_to_add"] = header_options
    return weighted