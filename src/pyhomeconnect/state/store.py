"""In-memory item store with per-key publish/subscribe.

This is the only component allowed to write appliance item values.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from pyhomeconnect.models.item import Item

_logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class ItemStore:
    """Last-known value for every item key of one appliance.

    Listeners are registered per key and invoked synchronously, in
    registration order, with the new value. A batch passed to
    :meth:`update` is written completely before any listener runs, so a
    listener never observes a partially applied batch.
    """

    def __init__(self, *, ha_id: str = "") -> None:
        self._ha_id = ha_id
        self._values: dict[str, Any] = {}
        self._listeners: dict[str, list[Listener]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value for *key*."""
        return self._values.get(key, default)

    def snapshot(self) -> dict[str, Any]:
        return dict(self._values)

    def update(self, items: Iterable[Item]) -> None:
        """Store a batch of items, then notify listeners in batch order."""
        batch = list(items)
        for item in batch:
            self._values[item.key] = item.value

        for item in batch:
            # Copy so listeners may unsubscribe while being notified.
            listeners = list(self._listeners.get(item.key, ()))
            _logger.debug("ha_id=%s %s (%d listeners)", self._ha_id, item.describe(), len(listeners))
            for listener in listeners:
                try:
                    listener(item.value)
                except Exception:
                    _logger.exception("ha_id=%s listener for %s failed", self._ha_id, item.key)

    def publish(self, key: str, value: Any) -> None:
        """Store and announce a single value."""
        self.update([Item(key=key, value=value)])

    def subscribe(self, key: str, listener: Listener) -> Callable[[], None]:
        """Register *listener* for *key*; returns a callable that removes it."""
        self._listeners.setdefault(key, []).append(listener)

        def _unsubscribe() -> None:
            self.unsubscribe(key, listener)

        return _unsubscribe

    def unsubscribe(self, key: str, listener: Listener) -> None:
        listeners = self._listeners.get(key)
        if not listeners:
            return
        try:
            listeners.remove(listener)
        except ValueError:
            return
        if not listeners:
            self._listeners.pop(key, None)

    def listener_count(self, key: str) -> int:
        return len(self._listeners.get(key, ()))

    def clear_listeners(self) -> None:
        """Detach every listener."""
        self._listeners.clear()
