"""Load-balancing endpoints."""

from __future__ import annotations

from typing import Any


def new_lb_endpoint(ip: str, port: int) -> dict[str, Any]:
    """Return an endpoint reachable over TCP at the given address and port."""
    return {
        "endpoint": {
            "address": {
                "socket_address": {
                    "protocol": "TCP",
                    "address": ip,
                    "port_value": port,
                    "ipv4_compat": True,
                },
            },
        },
    }