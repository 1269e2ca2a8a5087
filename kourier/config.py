"""Names, ports and namespaces shared by the Kourier controller and gateway."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

CONTROLLER_NAME = "net-kourier-controller"
INTERNAL_SERVICE_NAME = "kourier-internal"
ISOLATION_SERVICE_PREFIX = "kourier-isolation-"
EXTERNAL_SERVICE_NAME = "kourier"

HTTP_PORT_EXTERNAL = 8080
HTTP_PORT_INTERNAL = 8081
HTTPS_PORT_INTERNAL = 8444
HTTPS_PORT_EXTERNAL = 8443
HTTP_PORT_PROB = 8090
HTTPS_PORT_PROB = 9443

INTERNAL_KOURIER_DOMAIN = "internalkourier"
GATEWAY_NAMESPACE_ENV = "KOURIER_GATEWAY_NAMESPACE"
KOURIER_INGRESS_CLASS_NAME = "kourier.ingress.networking.knative.dev"
SERVING_NAMESPACE_ENV = "SERVING_NAMESPACE"
LISTENER_PORT_ANNOTATION_KEY = "kourier.knative.dev/listener-port"

SYSTEM_NAMESPACE_ENV = "SYSTEM_NAMESPACE"
CLUSTER_DOMAIN_ENV = "CLUSTER_DOMAIN"
DEFAULT_CLUSTER_DOMAIN = "cluster.local"

_DISABLE_HTTP2_ANNOTATION_KEY = "kourier.knative.dev/disable-http2"
# Annotation keys in priority order; the first one present wins.
_DISABLE_HTTP2_ANNOTATION = (_DISABLE_HTTP2_ANNOTATION_KEY,)

_RESOLV_CONF = Path("/etc/resolv.conf")


def _cluster_domain_name(resolv_conf: Path = _RESOLV_CONF) -> str:
    """Return the cluster domain from the environment, resolv.conf or the default."""
    domain = os.environ.get(CLUSTER_DOMAIN_ENV, "")
    if domain:
        return domain
    try:
        lines = resolv_conf.read_text().splitlines()
    except OSError:
        return DEFAULT_CLUSTER_DOMAIN
    for line in lines:
        elements = line.split(" ")
        if elements[0] != "search":
            continue
        for element in elements[1:]:
            if element.startswith("svc."):
                return element[len("svc."):].rstrip(".")
    return DEFAULT_CLUSTER_DOMAIN


def _system_namespace() -> str:
    namespace = os.environ.get(SYSTEM_NAMESPACE_ENV, "")
    if not namespace:
        raise RuntimeError(
            f"the environment variable {SYSTEM_NAMESPACE_ENV!r} is not set"
        )
    return namespace


def get_service_hostname(name: str, namespace: str) -> str:
    """Return the fully qualified cluster hostname of a service."""
    return f"{name}.{namespace}.svc.{_cluster_domain_name()}"


def service_hostnames() -> tuple[str, str]:
    """Return the hostnames of the external and the internal service."""
    namespace = gateway_namespace()
    return (
        get_service_hostname(EXTERNAL_SERVICE_NAME, namespace),
        get_service_hostname(INTERNAL_SERVICE_NAME, namespace),
    )


def listener_service_hostnames(port: str) -> str:
    """Return the hostname of the isolation service for a listener port."""
    return get_service_hostname(ISOLATION_SERVICE_PREFIX + str(port), gateway_namespace())


def gateway_namespace() -> str:
    """Return the namespace where the gateway is deployed."""
    return os.environ.get(GATEWAY_NAMESPACE_ENV, "") or _system_namespace()


def serving_namespace() -> str:
    """Return the namespace where serving is deployed."""
    return os.environ.get(SERVING_NAMESPACE_ENV, "") or _system_namespace()


def get_disable_http2(annotations: Mapping[str, str] | None) -> str:
    """Return the disable-http2 annotation value, or an empty string."""
    for key in _DISABLE_HTTP2_ANNOTATION:
        if annotations and key in annotations:
            return annotations[key]
    return ""