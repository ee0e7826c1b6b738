"""Request details in a form safe for debug logs."""

from __future__ import annotations

from collections.abc import Mapping

_SENSITIVE_HEADERS: frozenset[str] = frozenset({"authorization", "cookie", "proxy-authorization"})


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    """Copy *headers* with credentials replaced by ``<redacted>``."""
    return {name: "<redacted>" if name.lower() in _SENSITIVE_HEADERS else value for name, value in headers.items()}


def body_for_log(payload: str | None, *, max_length: int = 512) -> str | None:
    """Serialised request body, cut to *max_length* characters."""
    if payload is None or len(payload) <= max_length:
        return payload
    return f"{payload[:max_length]}...<truncated {len(payload) - max_length} chars>"
