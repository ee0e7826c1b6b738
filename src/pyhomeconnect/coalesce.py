"""Serialise and coalesce user-triggered writes.

Rapid requests for the same logical action (for example several option
changes made one after another in a UI) are merged into a single API
call carrying the most recent combined options. Every caller awaiting a
merged request receives the result (or exception) of that one call.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Hashable, Mapping
from dataclasses import dataclass, field
from typing import Any

_logger = logging.getLogger(__name__)

Operation = Callable[[dict[str, Any]], Awaitable[Any]]


@dataclass(slots=True)
class _Request:
    """Options and result channels of one (possibly merged) call."""

    operation: Operation
    options: dict[str, Any]
    futures: list[asyncio.Future[Any]] = field(default_factory=list)


@dataclass(slots=True)
class _Slot:
    pending: _Request | None = None
    active: _Request | None = None
    task: asyncio.Task[None] | None = None


class RequestCoalescer:
    """One pending request and at most one in-flight call per key."""

    def __init__(self) -> None:
        self._slots: dict[Hashable, _Slot] = {}

    def submit(
        self,
        key: Hashable,
        operation: Operation,
        options: Mapping[str, Any] | None = None,
    ) -> asyncio.Future[Any]:
        """Queue *operation* under *key* and return a future for its result.

        While a request for *key* has not started yet, further submits
        merge their options into it (later values win) and share its
        result. A submit made while a call is in flight starts the next
        call once that one finishes.
        """
        loop = asyncio.get_running_loop()
        slot = self._slots.setdefault(key, _Slot())

        if slot.pending is not None:
            _logger.debug("Coalescing serialised request %s (%d pending)", key, len(slot.pending.futures) + 1)
            slot.pending.options.update(options or {})
            slot.pending.operation = operation
        else:
            _logger.debug("Creating new serialised request %s", key)
            slot.pending = _Request(operation=operation, options=dict(options or {}))

        future: asyncio.Future[Any] = loop.create_future()
        slot.pending.futures.append(future)

        if slot.task is None:
            slot.task = loop.create_task(self._drain(key, slot))
        return future

    async def _drain(self, key: Hashable, slot: _Slot) -> None:
        try:
            while slot.pending is not None:
                request = slot.pending
                slot.pending = None
                slot.active = request
                _logger.debug("Performing serialised request %s", key)
                try:
                    result = await request.operation(request.options)
                except Exception as exc:
                    for future in request.futures:
                        if not future.done():
                            future.set_exception(exc)
                else:
                    for future in request.futures:
                        if not future.done():
                            future.set_result(result)
                finally:
                    slot.active = None
        finally:
            slot.task = None

    def cancel(self) -> None:
        """Cancel requests that have not started; in-flight calls are left to finish."""
        for slot in self._slots.values():
            if slot.pending is not None:
                for future in slot.pending.futures:
                    future.cancel()
                slot.pending = None
            if slot.task is not None and slot.active is None:
                slot.task.cancel()
        self._slots.clear()
