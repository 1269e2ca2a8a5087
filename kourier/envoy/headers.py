"""Header manipulation entries for routes and weighted clusters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def headers_to_add(headers: Mapping[str, str] | None) -> list[dict[str, Any]]:
    """Return header options that set (never append) each of the given headers."""
    if not headers:
        return []
    # Headers are set rather than appended, as Knative Serving expects.
    return [
        {"header": {"key": name, "value": value}, "append": False}
        for name, value in headers.items()
    ]