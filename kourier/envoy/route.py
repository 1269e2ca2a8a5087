"""Routes of a virtual host."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import timedelta
from typing import Any, Optional, Union

from kourier.envoy.cluster import _format_duration
from kourier.envoy.headers import headers_to_add
from kourier.ext_authz import HTTP_EXTERNAL_AUTHORIZATION

EXT_AUTHZ_PER_ROUTE_TYPE = (
    "type.googleapis.com/envoy.extensions.filters.http.ext_authz.v3.ExtAuthzPerRoute"
)

_Matchers = Optional[Iterable[dict]]
_Weights = Optional[Iterable[dict]]
_Headers = Optional[Mapping[str, str]]
_Timeout = Union[timedelta, float]


def _route_match(path: str, headers_match: _Matchers) -> dict:
    match: dict = {"prefix": path}
    if headers_match:
        match["headers"] = list(headers_match)
    return match


def new_route(
    name: str,
    headers_match: _Matchers,
    path: str,
    wrs: _Weights,
    route_timeout: _Timeout,
    headers: _Headers,
    host_rewrite: str,
) -> dict:
    """Return a route splitting traffic between weighted clusters."""
    action: dict = {
        "weighted_clusters": {"clusters": list(wrs or [])},
        "timeout": _format_duration(route_timeout),
        "upgrade_configs": [{"upgrade_type": "websocket", "enabled": True}],
    }
    if host_rewrite:
        action["host_rewrite_literal"] = host_rewrite

    route: dict = {
        "name": name,
        "match": _route_match(path, headers_match),
        "route": action,
    }
    header_options = headers_to_add(headers)
    if header_options:
        route["request_headers_to_add"] = header_options
    return route


def new_redirect_route(name: str, headers_match: _Matchers, path: str) -> dict:
    """Return a route that redirects plain HTTP requests to HTTPS."""
    return {
        "name": name,
        "match": _route_match(path, headers_match),
        "redirect": {"https_redirect": True},
    }


def new_route_ext_authz_disabled(
    name: str,
    headers_match: _Matchers,
    path: str,
    wrs: _Weights,
    route_timeout: _Timeout,
    headers: _Headers,
    host_rewrite: str,
) -> dict:
    """Return a route like new_route that bypasses external authorization."""
    route = new_route(name, headers_match, path, wrs, route_timeout, headers, host_rewrite)
    disabled: dict[str, Any] = {"@type": EXT_AUTHZ_PER_ROUTE_TYPE, "disabled": True}
    route["typed_per_filter_config"] = {HTTP_EXTERNAL_AUTHORIZATION: disabled}
    return route