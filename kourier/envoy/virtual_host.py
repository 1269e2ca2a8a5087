"""Virtual hosts of a route configuration."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from kourier.envoy.route import EXT_AUTHZ_PER_ROUTE_TYPE
from kourier.ext_authz import HTTP_EXTERNAL_AUTHORIZATION


def new_virtual_host(
    name: str, domains: Iterable[str], routes: Iterable[dict[str, Any]]
) -> dict[str, Any]:
    """Return a virtual host serving the given domains with the given routes."""
    return {"name": name, "domains": list(domains), "routes": list(routes)}


def new_virtual_host_with_ext_authz(
    name: str,
    context_extensions: Mapping[str, str] | None,
    domains: Iterable[str],
    routes: Iterable[dict[str, Any]],
) -> dict[str, Any]:
    """Return a virtual host that passes context extensions to the authorizer."""
    host = new_virtual_host(name, domains, routes)
    host["typed_per_filter_config"] = {
        HTTP_EXTERNAL_AUTHORIZATION: {
            "@type": EXT_AUTHZ_PER_ROUTE_TYPE,
            "check_settings": {"context_extensions": dict(context_extensions or {})},
        },
    }
    return host