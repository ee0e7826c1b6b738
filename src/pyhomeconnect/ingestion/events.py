"""Classification of appliance event stream events.

Each event is handled completely (store written, listeners notified,
connectivity updated) before the next one is read, so notifications
follow arrival order.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from typing import Any

from pyhomeconnect._scheduling import Timer
from pyhomeconnect.config import HomeConnectConfig
from pyhomeconnect.exceptions import HomeConnectUnsupportedEventError
from pyhomeconnect.models.event import ApplianceEvent
from pyhomeconnect.models.values import EventType
from pyhomeconnect.state.connectivity import ConnectivityMonitor
from pyhomeconnect.state.store import ItemStore

_logger = logging.getLogger(__name__)


class EventStreamConsumer:
    def __init__(
        self,
        *,
        ha_id: str,
        store: ItemStore,
        connectivity: ConnectivityMonitor,
        config: HomeConnectConfig,
    ) -> None:
        self._ha_id = ha_id
        self._store = store
        self._connectivity = connectivity
        self._disconnect_delay = config.event_disconnect_delay
        self._stop_timer = Timer()

    @property
    def disconnect_pending(self) -> bool:
        return self._stop_timer.active

    async def run(self, stream: AsyncIterator[ApplianceEvent | Mapping[str, Any]]) -> None:
        """Handle every event from *stream* in order until it ends or fails."""
        try:
            async for event in stream:
                try:
                    self.handle(event)
                except Exception:
                    _logger.exception("ha_id=%s failed to handle event %r", self._ha_id, event)
        except Exception:
            _logger.exception("ha_id=%s device event stream failed", self._ha_id)
            self._stop_timer.cancel()
            self._stream_lost()

    def cancel(self) -> None:
        self._stop_timer.cancel()

    def handle(self, event: ApplianceEvent | Mapping[str, Any]) -> None:
        if not isinstance(event, ApplianceEvent):
            event = ApplianceEvent.model_validate(dict(event))

        _logger.debug("ha_id=%s event %s (%d items)", self._ha_id, event.event, len(event.items))
        kind = event.event

        if kind == EventType.START:
            # If the appliance was treated as disconnected, check its current status.
            self._stop_timer.cancel()
            self._connectivity.set_state()
        elif kind == EventType.STOP:
            delay = 0.0 if event.err else self._disconnect_delay
            self._stop_timer.schedule(delay, self._stream_lost)
        elif kind == EventType.PAIRED:
            _logger.debug("ha_id=%s appliance restored to Home Connect account", self._ha_id)
            self._connectivity.set_state()
        elif kind == EventType.DEPAIRED:
            _logger.debug(
                "ha_id=%s appliance removed from Home Connect account; treating appliance as disconnected",
                self._ha_id,
            )
            self._connectivity.set_state(False)
        elif kind == EventType.CONNECTED:
            _logger.debug("ha_id=%s appliance is now connected to Home Connect servers", self._ha_id)
            self._connectivity.set_state(True)
        elif kind == EventType.DISCONNECTED:
            _logger.debug("ha_id=%s appliance lost connection to Home Connect servers", self._ha_id)
            self._connectivity.set_state(False)
        elif kind in (EventType.STATUS, EventType.EVENT, EventType.NOTIFY):
            self._store.update(event.items)
        else:
            error = HomeConnectUnsupportedEventError(f"Unsupported type: {kind}", event=kind)
            _logger.error("ha_id=%s event stream: %s", self._ha_id, error)

    def _stream_lost(self) -> None:
        _logger.debug("ha_id=%s events may have been missed; treating appliance as disconnected", self._ha_id)
        self._connectivity.set_state(False)
