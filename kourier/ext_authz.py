"""External authorization: cluster and HTTP filter built from the environment."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any

from kourier.configmap import parse_bool

EXT_AUTHZ_CLUSTER_NAME = "extAuthz"
UNIX_MAX_PORT = 65535
ENV_PREFIX = "KOURIER_EXTAUTHZ"

HTTP_PROTOCOL_OPTIONS_KEY = "envoy.extensions.upstreams.http.v3.HttpProtocolOptions"
HTTP_PROTOCOL_OPTIONS_TYPE = "type.googleapis.com/" + HTTP_PROTOCOL_OPTIONS_KEY
EXT_AUTHZ_TYPE = "type.googleapis.com/envoy.extensions.filters.http.ext_authz.v3.ExtAuthz"
HTTP_EXTERNAL_AUTHORIZATION = "envoy.filters.http.ext_authz"


class ExtAuthzProtocol(str, Enum):
    GRPC = "grpc"
    HTTP = "http"
    HTTPS = "https"


def is_valid_ext_authz_protocol(protocol: str) -> bool:
    """Tell whether the protocol is one the external authorizer may speak."""
    return protocol in {p.value for p in ExtAuthzProtocol}


@dataclass
class ExtAuthzSettings:
    """Settings of the external authorization service."""

    host: str
    failure_mode_allow: bool = False
    max_request_bytes: int = 8192
    timeout: int = 2000
    protocol: ExtAuthzProtocol = ExtAuthzProtocol.GRPC
    path_prefix: str = ""

    def __post_init__(self) -> None:
        self.protocol = ExtAuthzProtocol(self.protocol)


@dataclass
class ExternalAuthzConfig:
    """Whether external authorization is on, and the envoy pieces it needs."""

    enabled: bool = False
    cluster: dict[str, Any] | None = None
    http_filter: dict[str, Any] | None = None


def _duration(milliseconds: int) -> str:
    sign = "-" if milliseconds < 0 else ""
    seconds, millis = divmod(abs(milliseconds), 1000)
    if millis:
        return f"{sign}{seconds}.{millis:03d}s"
    return f"{sign}{seconds}s"


def ext_authz_cluster(host: str, port: int, protocol: str) -> dict[str, Any]:
    """Return the cluster that points at the external authorization service."""
    protocol = ExtAuthzProtocol(protocol)
    if protocol is ExtAuthzProtocol.GRPC:
        explicit = {"http2_protocol_options": {}}
    else:
        explicit = {"http_protocol_options": {}}

    return {
        "name": EXT_AUTHZ_CLUSTER_NAME,
        "type": "STRICT_DNS",
        "typed_extension_protocol_options": {
            HTTP_PROTOCOL_OPTIONS_KEY: {
                "@type": HTTP_PROTOCOL_OPTIONS_TYPE,
                "explicit_http_config": explicit,
            },
        },
        "connect_timeout": "5s",
        "load_assignment": {
            "cluster_name": EXT_AUTHZ_CLUSTER_NAME,
            "endpoints": [{
                "lb_endpoints": [{
                    "endpoint": {
                        "address": {
                            "socket_address": {
                                "protocol": "TCP",
                                "address": host,
                                "port_value": port,
                                "ipv4_compat": True,
                            },
                        },
                    },
                }],
            }],
        },
    }


def external_authz_filter(conf: ExtAuthzSettings) -> dict[str, Any]:
    """Return the HTTP filter that consults the external authorization service."""
    timeout = _duration(conf.timeout)
    headers = [{"key": "client", "value": "kourier"}]

    typed_config: dict[str, Any] = {
        "@type": EXT_AUTHZ_TYPE,
        "transport_api_version": "V3",
        "failure_mode_allow": conf.failure_mode_allow,
        "with_request_body": {
            "max_request_bytes": conf.max_request_bytes,
            "allow_partial_message": True,
        },
    }

    if conf.protocol is ExtAuthzProtocol.GRPC:
        typed_config["grpc_service"] = {
            "envoy_grpc": {"cluster_name": EXT_AUTHZ_CLUSTER_NAME},
            "timeout": timeout,
            "initial_metadata": headers,
        }
    else:
        http_service: dict[str, Any] = {
            "server_uri": {
                "uri": f"{conf.protocol.value}://{conf.host}",
                "cluster": EXT_AUTHZ_CLUSTER_NAME,
                "timeout": timeout,
            },
        }
        if conf.path_prefix:
            http_service["path_prefix"] = conf.path_prefix
        http_service["authorization_request"] = {"headers_to_add": headers}
        typed_config["http_service"] = http_service

    return {"name": HTTP_EXTERNAL_AUTHORIZATION, "typed_config": typed_config}


def _split_host_port(hostport: str) -> tuple[str, str]:
    if hostport.startswith("["):
        end = hostport.find("]")
        if end < 0:
            raise ValueError(f"address {hostport}: missing ']' in address")
        if hostport[end + 1:end + 2] != ":":
            raise ValueError(f"address {hostport}: missing port in address")
        return hostport[1:end], hostport[end + 2:]
    host, sep, port = hostport.rpartition(":")
    if not sep:
        raise ValueError(f"address {hostport}: missing port in address")
    if ":" in host:
        raise ValueError(f"address {hostport}: too many colons in address")
    return host, port


def _parse_int(value: str, low: int, high: int, name: str) -> int:
    try:
        number = int(value, 0)
    except ValueError as err:
        raise ValueError(f"{name}: invalid integer {value!r}") from err
    if not low <= number <= high:
        raise ValueError(f"{name}: value {value!r} out of range")
    return number


def _settings_from_env(environ: Mapping[str, str]) -> ExtAuthzSettings:
    def lookup(field_name: str, default: str | None = None) -> str | None:
        return environ.get(f"{ENV_PREFIX}_{field_name}", default)

    host = lookup("HOST", "")
    failure_mode = lookup("FAILUREMODEALLOW")
    max_bytes = lookup("MAXREQUESTBYTES", "8192")
    timeout = lookup("TIMEOUT", "2000")
    protocol = lookup("PROTOCOL", "grpc")
    path_prefix = lookup("PATHPREFIX", "")

    if not is_valid_ext_authz_protocol(protocol):
        valid = ", ".join(p.value for p in ExtAuthzProtocol)
        raise ValueError(f"protocol {protocol} is invalid, must be in [{valid}]")

    try:
        allow = parse_bool(failure_mode) if failure_mode is not None else False
    except ValueError as err:
        raise ValueError(f"{ENV_PREFIX}_FAILUREMODEALLOW: {err}") from err

    return ExtAuthzSettings(
        host=host,
        failure_mode_allow=allow,
        max_request_bytes=_parse_int(max_bytes, 0, 2**32 - 1, f"{ENV_PREFIX}_MAXREQUESTBYTES"),
        timeout=_parse_int(timeout, -(2**63), 2**63 - 1, f"{ENV_PREFIX}_TIMEOUT"),
        protocol=protocol,
        path_prefix=path_prefix,
    )


def load_external_authz(environ: Mapping[str, str]) -> ExternalAuthzConfig:
    """Build the external authorization configuration from environment variables."""
    if not environ.get(f"{ENV_PREFIX}_HOST", ""):
        return ExternalAuthzConfig(enabled=False)

    settings = _settings_from_env(environ)
    host, port_text = _split_host_port(settings.host)
    if not re.fullmatch(r"[+-]?\d+", port_text):
        raise ValueError(f"invalid port {port_text!r}")
    port = int(port_text)
    if port > UNIX_MAX_PORT:
        raise ValueError(f"port {port} bigger than {UNIX_MAX_PORT}")
    if port < 0:
        raise ValueError(f"port {port} is negative")

    return ExternalAuthzConfig(
        enabled=True,
        cluster=ext_authz_cluster(host, port, settings.protocol),
        http_filter=external_authz_filter(settings),
    )


@lru_cache(maxsize=None)
def external_authz() -> ExternalAuthzConfig:
    """Return the process-wide external authorization configuration."""
    return load_external_authz(os.environ)