"""Envoy resource builders and gateway configuration for a Knative ingress gateway."""

__version__ = "0.1.0"