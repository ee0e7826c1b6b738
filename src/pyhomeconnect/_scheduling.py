"""Deferred callbacks with explicit cancellation handles."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any


class Timer:
    """A single-slot deferred callback on the running event loop.

    Scheduling again replaces any call that has not fired yet, so only
    the most recent request runs. The owner must call :meth:`cancel`
    on teardown.
    """

    def __init__(self) -> None:
        self._handle: asyncio.TimerHandle | None = None

    @property
    def active(self) -> bool:
        """Whether a call is scheduled and has not fired yet."""
        return self._handle is not None

    def schedule(self, delay: float, callback: Callable[..., Any], *args: Any) -> None:
        self.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(max(delay, 0.0), self._fire, callback, args)

    def cancel(self) -> None:
        handle = self._handle
        self._handle = None
        if handle is not None:
            handle.cancel()

    def _fire(self, callback: Callable[..., Any], args: tuple[Any, ...]) -> None:
        self._handle = None
        callback(*args)
