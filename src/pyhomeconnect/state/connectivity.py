"""Connected / disconnected / unknown tracking for one appliance."""

from __future__ import annotations

import logging
from collections.abc import Callable

from pyhomeconnect._constants import CONNECTED_KEY
from pyhomeconnect._scheduling import Timer
from pyhomeconnect.config import HomeConnectConfig
from pyhomeconnect.models.values import ConnectivityState
from pyhomeconnect.state.resync import ResyncAction, ResyncSequencer
from pyhomeconnect.state.store import ItemStore

_logger = logging.getLogger(__name__)


class ConnectivityMonitor:
    """Tri-state connectivity with debounced evaluation.

    :meth:`set_state` applies a definite value immediately, but the
    observable consequences (publishing ``connected=False``, starting a
    resync) are deferred to the next loop iteration and only the most
    recent request is evaluated, which coalesces rapid flapping.
    """

    def __init__(
        self,
        *,
        ha_id: str,
        store: ItemStore,
        config: HomeConnectConfig,
        actions_factory: Callable[[], list[ResyncAction]],
    ) -> None:
        self._ha_id = ha_id
        self._store = store
        self.connected: bool | None = None
        self._evaluate_timer = Timer()
        self.resync = ResyncSequencer(
            ha_id=ha_id,
            config=config,
            actions_factory=actions_factory,
            is_connected=lambda: self.connected,
            on_complete=self._resync_completed,
        )

    @property
    def state(self) -> ConnectivityState:
        if self.connected is None:
            return ConnectivityState.UNKNOWN
        return ConnectivityState.CONNECTED if self.connected else ConnectivityState.DISCONNECTED

    def set_state(self, connected: bool | None = None) -> None:
        """Record a connectivity signal; ``None`` means "re-evaluate"."""
        if connected is not None:
            self.connected = connected
        if connected is False:
            self.resync.abandon()

        self._evaluate_timer.schedule(0.0, self._evaluate, connected)

    def cancel(self) -> None:
        self._evaluate_timer.cancel()
        self.resync.cancel()

    def resume(self) -> None:
        self.resync.resume()

    def _evaluate(self, connected: bool | None) -> None:
        if not self.connected and self._store.get(CONNECTED_KEY) is not False:
            self._store.publish(CONNECTED_KEY, False)

        # Unknown still resyncs: the descriptor read reports the real state.
        if connected is not False:
            self.resync.request(connected=self.connected)

    def _resync_completed(self) -> None:
        if self.connected and not self._store.get(CONNECTED_KEY):
            _logger.debug("ha_id=%s appliance state read; publishing connected", self._ha_id)
            self._store.publish(CONNECTED_KEY, True)
