"""HTTP connection managers and route configurations."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from kourier.configmap import Kourier
from kourier.envoy.cluster import _format_duration
from kourier.ext_authz import ExternalAuthzConfig, external_authz as _process_external_authz

ROUTER_FILTER = "envoy.filters.http.router"
FILE_ACCESS_LOG_TYPE = "type.googleapis.com/envoy.extensions.access_loggers.file.v3.FileAccessLog"


def new_http_connection_manager(
    route_config_name: str,
    kourier_config: Kourier,
    external_authz: ExternalAuthzConfig | None = None,
) -> dict[str, Any]:
    """Return a connection manager that fetches the named route configuration over ADS.

    Without an explicit external authorization configuration, the one built
    from the process environment is used.
    """
    if external_authz is None:
        external_authz = _process_external_authz()

    filters: list[dict[str, Any]] = []
    if external_authz.enabled:
        filters.append(external_authz.http_filter)
    # The router filter must come last.
    filters.append({"name": ROUTER_FILTER})

    manager: dict[str, Any] = {
        "codec_type": "AUTO",
        "stat_prefix": "ingress_http",
        "http_filters": filters,
        "rds": {
            "config_source": {
                "resource_api_version": "V3",
                "ads": {},
                "initial_fetch_timeout": "10s",
            },
            "route_config_name": route_config_name,
        },
        "stream_idle_timeout": _format_duration(kourier_config.idle_timeout),
    }

    if kourier_config.enable_proxy_protocol:
        # Use the real remote address of the client connection.
        manager["use_remote_address"] = True

    if kourier_config.enable_service_access_logging:
        manager["access_log"] = [{
            "name": "envoy.file_access_log",
            "typed_config": {"@type": FILE_ACCESS_LOG_TYPE, "path": "/dev/stdout"},
        }]

    return manager


def new_route_config(name: str, virtual_hosts: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """Return a route configuration that rejects routes to unknown clusters."""
    return {
        "name": name,
        "virtual_hosts": list(virtual_hosts),
        "validate_clusters": True,
    }