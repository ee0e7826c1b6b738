"""Bulk re-read of appliance state after (re)connection.

The sequencer executes an ordered list of read actions one at a time.
A disconnection discards whatever is left of the list; a failure while
still connected keeps the failed action at the head and retries the
remaining list after an exponentially growing delay.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pyhomeconnect._scheduling import Timer
from pyhomeconnect.config import HomeConnectConfig

_logger = logging.getLogger(__name__)

ResyncAction = Callable[[], Awaitable[Any]]


class ResyncSequencer:
    def __init__(
        self,
        *,
        ha_id: str,
        config: HomeConnectConfig,
        actions_factory: Callable[[], list[ResyncAction]],
        is_connected: Callable[[], bool | None],
        on_complete: Callable[[], None],
    ) -> None:
        self._ha_id = ha_id
        self._config = config
        self._actions_factory = actions_factory
        self._is_connected = is_connected
        self._on_complete = on_complete

        # None until the first connect and after every disconnect; an empty
        # list means the appliance state has been read.
        self._actions: list[ResyncAction] | None = None
        # True from scheduling until the run finishes, including backoff waits.
        self._scheduled = False
        self._timer = Timer()
        self._task: asyncio.Task[None] | None = None
        self._stopped = False
        # Bumped by cancel(); a run from an earlier generation is ignored.
        self._generation = 0
        self.retry_delay: float | None = None

    @property
    def pending_actions(self) -> int:
        return len(self._actions) if self._actions is not None else 0

    @property
    def in_progress(self) -> bool:
        """Whether a resync is queued, waiting to retry, or running."""
        return self._scheduled

    def request(self, *, connected: bool | None) -> None:
        """Start a resync unless one is queued, in flight, or already completed."""
        if self._stopped or self._actions is not None:
            return

        self._actions = list(self._actions_factory())

        if not self._scheduled:
            _logger.debug(
                "ha_id=%s %s, so reading appliance state...",
                self._ha_id,
                "Connected" if connected else "Might be connected",
            )
            self._schedule(0.0)
        else:
            _logger.debug("ha_id=%s connected, but appliance state read already pending...", self._ha_id)

    def abandon(self) -> None:
        """Discard the remaining actions (the appliance disconnected)."""
        if self._actions:
            _logger.debug(
                "ha_id=%s appliance disconnected; abandoning %d pending reads",
                self._ha_id,
                len(self._actions),
            )
        self._actions = None

    def cancel(self) -> None:
        """Stop all autonomous activity. An in-flight read is left to finish and ignored."""
        self._stopped = True
        self._actions = None
        self._scheduled = False
        self._generation += 1
        self._timer.cancel()

    def resume(self) -> None:
        """Accept requests again after :meth:`cancel`, starting from a fresh backoff."""
        self._stopped = False
        self._actions = None
        self.retry_delay = None

    def _schedule(self, delay: float) -> None:
        self._scheduled = True
        self._timer.schedule(delay, self._start_run)

    def _start_run(self) -> None:
        self._task = asyncio.get_running_loop().create_task(self._run(self._generation))

    async def _run(self, generation: int) -> None:
        try:
            while self._actions and generation == self._generation:
                # Keep a reference: a disconnect replaces self._actions mid-await.
                actions = self._actions
                await actions[0]()
                actions.pop(0)
        except Exception as exc:
            if generation == self._generation:
                self._on_failure(exc)
            return

        if generation != self._generation:
            return
        self._scheduled = False
        if self._actions is not None and not self._stopped:
            # The emptied list stays in place: state counts as read until the next disconnect.
            _logger.debug("ha_id=%s successfully read all appliance state", self._ha_id)
            self.retry_delay = None
            self._on_complete()
        else:
            _logger.debug("ha_id=%s ignoring appliance state read due to disconnection", self._ha_id)

    def _on_failure(self, exc: Exception) -> None:
        if self._is_connected() and not self._stopped:
            _logger.error("ha_id=%s reading appliance state failed (will retry): %s", self._ha_id, exc)
            if self.retry_delay:
                self.retry_delay = min(
                    self.retry_delay * self._config.connected_retry_factor,
                    self._config.connected_retry_max_delay,
                )
            else:
                self.retry_delay = self._config.connected_retry_min_delay
            _logger.debug(
                "ha_id=%s still connected, so retrying appliance state read in %s seconds...",
                self._ha_id,
                self.retry_delay,
            )
            self._schedule(self.retry_delay)
        else:
            _logger.debug("ha_id=%s ignoring appliance state read due to disconnection: %s", self._ha_id, exc)
            self._scheduled = False
