"""Shared helpers for device operation wrappers.

It is internal to pyhomeconnect and may change at any time.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import TypeVar

from pyhomeconnect.exceptions import HomeConnectEmptyResponseError, HomeConnectTransportError

_logger = logging.getLogger(__name__)

T = TypeVar("T")


def is_benign(exc: BaseException, codes: Collection[str]) -> bool:
    """Whether *exc* is a transport error whose code means "no such state"."""
    if not isinstance(exc, HomeConnectTransportError):
        return False
    if exc.code in codes:
        return True
    return exc.status_code is not None and str(exc.status_code) in codes


def log_failure(ha_id: str, operation: str, exc: BaseException) -> None:
    _logger.error("ha_id=%s %s failed: %s", ha_id, operation, exc)


def require_data(value: T | None, operation: str) -> T:
    if value is None:
        raise HomeConnectEmptyResponseError(operation=operation)
    return value
