# kourier

Building blocks for the Envoy configuration of a Knative ingress gateway:
clusters, endpoints, weighted clusters, routes, virtual hosts, route
configurations, HTTP connection managers, external authorization settings,
and the gateway's own configuration map.

Every Envoy resource is built as a plain Python dictionary shaped like
Envoy's v3 JSON form. Durations are rendered as seconds strings such as
`"5s"` or `"0.250s"`. The package has no dependencies outside the standard
library.

## Installing

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Gateway configuration

`kourier.configmap.new_config_from_map` reads the `config-kourier` data into
a `Kourier` dataclass. The keys it understands are:

| key                             | field                           | default |
|---------------------------------|---------------------------------|---------|
| `enable-service-access-logging` | `enable_service_access_logging` | `True`  |
| `enable-proxy-protocol`         | `enable_proxy_protocol`         | `False` |
| `cluster-cert-secret`           | `cluster_cert_secret`           | `""`    |
| `stream-idle-timeout`           | `idle_timeout` (a `timedelta`)  | zero    |
| `traffic-isolation`             | `traffic_isolation`             | `""`    |

Keys that are absent keep the values from `default_config()`. Booleans accept
`1`, `t`, `T`, `TRUE`, `true`, `True` and their false counterparts
(`parse_bool`). Durations are written like `300ms`, `1.5h` or `2h45m`
(`parse_duration`). A value that cannot be parsed raises `ConfigError`, a
subclass of `ValueError`.

```python
from kourier.configmap import new_config_from_map

cfg = new_config_from_map({
    "enable-service-access-logging": "false",
    "enable-proxy-protocol": "true",
    "stream-idle-timeout": "200s",
    "traffic-isolation": "port",
})
```

`new_config_from_config_map` does the same for a config map object with a
`data` attribute, or a mapping with a `"data"` key.

## Namespaces and hostnames

`kourier.config` provides:

- `gateway_namespace()`: `KOURIER_GATEWAY_NAMESPACE`, or else
  `SYSTEM_NAMESPACE`.
- `serving_namespace()`: `SERVING_NAMESPACE`, or else `SYSTEM_NAMESPACE`.
- `get_service_hostname(name, namespace)`: `name.namespace.svc.<domain>`.
  The cluster domain comes from `CLUSTER_DOMAIN`, or else from the `search`
  line of `/etc/resolv.conf`, or else is `cluster.local`.
- `service_hostnames()`: the hostnames of the external (`kourier`) and
  internal (`kourier-internal`) services in the gateway namespace.
- `listener_service_hostnames(port)`: the hostname of the
  `kourier-isolation-<port>` service.
- `get_disable_http2(annotations)`: the value of the
  `kourier.knative.dev/disable-http2` annotation, or `""`.

When a namespace is needed and neither its own variable nor
`SYSTEM_NAMESPACE` is set, a `RuntimeError` is raised.

## External authorization

`kourier.ext_authz.load_external_authz(environ)` reads the
`KOURIER_EXTAUTHZ_*` variables: `HOST` (as `host:port`),
`FAILUREMODEALLOW`, `MAXREQUESTBYTES` (default 8192), `TIMEOUT` in
milliseconds (default 2000), `PROTOCOL` (`grpc`, `http` or `https`; default
`grpc`) and `PATHPREFIX`. It returns an `ExternalAuthzConfig` holding the
authorization cluster and its HTTP filter, or one with `enabled` set to
false when no host is given. An invalid protocol, a malformed address or a
port above 65535 raises `ValueError`.

`external_authz()` does the same for the process environment; it loads the
settings once and keeps them. The cluster and filter builders are also
available on their own as `ext_authz_cluster(host, port, protocol)` and
`external_authz_filter(settings)`, the latter taking an `ExtAuthzSettings`.

## Envoy resources

The `kourier.envoy` sub-package builds the resources themselves:

```python
from datetime import timedelta

from kourier.configmap import default_config
from kourier.envoy.cluster import DiscoveryType, new_cluster
from kourier.envoy.http_connection_manager import (
    new_http_connection_manager,
    new_route_config,
)
from kourier.envoy.lb_endpoint import new_lb_endpoint
from kourier.envoy.route import new_route
from kourier.envoy.virtual_host import new_virtual_host
from kourier.envoy.weighted_cluster import new_weighted_cluster

cluster = new_cluster(
    "my-service",
    timedelta(seconds=5),
    [new_lb_endpoint("10.0.0.1", 8080)],
    True,
    None,
    DiscoveryType.STATIC,
)
split = new_weighted_cluster("my-service", 100, {"K-Original-Host": "example.com"})
route = new_route("default", [], "/", [split], timedelta(seconds=30), {}, "")
vhost = new_virtual_host("my-service", ["example.com"], [route])
route_config = new_route_config("external_services", [vhost])
manager = new_http_connection_manager("external_services", default_config(), None)
```

- `new_cluster` adds HTTP/2 upstream protocol options when `is_http2` is true.
- `kourier.envoy.headers.headers_to_add` turns a header mapping into
  entries that set, rather than append, each header.
- `new_redirect_route` sends plain HTTP to HTTPS.
- `new_route_ext_authz_disabled` builds a route like `new_route` with
  external authorization turned off for it.
- `new_virtual_host_with_ext_authz` passes context extensions to the
  authorization service.
- `new_http_connection_manager` puts the external authorization filter, when
  enabled, before the router filter; enables `use_remote_address` when proxy
  protocol is on; and writes access logs to `/dev/stdout` when service access
  logging is on. Passing `None` as the third argument uses `external_authz()`.
- `new_route_config` sets `validate_clusters` so that routes to unknown
  clusters are rejected.

## What this package does not do

It only builds configuration. It has no xDS management server, does not
build listeners or TLS filter chains, does not watch Kubernetes ingresses,
and has no command-line program. Serialising the dictionaries and serving
them to Envoy is left to the caller.