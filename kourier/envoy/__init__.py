"""Builders for Envoy v3 resources: clusters, endpoints, routes, virtual hosts and HTTP connection managers."""