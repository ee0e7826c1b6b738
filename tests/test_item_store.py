from __future__ import annotations

import logging
from typing import Any

import pytest

from pyhomeconnect.models.item import Item
from pyhomeconnect.state.store import ItemStore


def test_batch_is_written_before_any_listener_runs() -> None:
    store = ItemStore(ha_id="HA")
    seen: list[tuple[Any, Any]] = []
    store.subscribe("a", lambda _value: seen.append((store.get("a"), store.get("b"))))

    store.update([Item(key="a", value=1), Item(key="b", value=2)])

    assert seen == [(1, 2)]


def test_listeners_notified_in_batch_then_registration_order() -> None:
    store = ItemStore()
    order: list[str] = []
    store.subscribe("b", lambda value: order.append(f"b1={value}"))
    store.subscribe("a", lambda value: order.append(f"a1={value}"))
    store.subscribe("a", lambda value: order.append(f"a2={value}"))

    store.update([Item(key="a", value="x"), Item(key="b", value="y")])

    assert order == ["a1=x", "a2=x", "b1=y"]


def test_unsubscribe_stops_delivery() -> None:
    store = ItemStore()
    values: list[Any] = []
    unsubscribe = store.subscribe("a", values.append)

    store.publish("a", 1)
    unsubscribe()
    store.publish("a", 2)

    assert values == [1]
    assert store.listener_count("a") == 0
    assert store.get("a") == 2


def test_listener_may_unsubscribe_itself_during_notification() -> None:
    store = ItemStore()
    calls: list[Any] = []

    def _once(value: Any) -> None:
        calls.append(value)
        store.unsubscribe("a", _once)

    store.subscribe("a", _once)
    store.subscribe("a", calls.append)
    store.publish("a", 1)
    store.publish("a", 2)

    assert calls == [1, 1, 2]


def test_failing_listener_does_not_block_others(caplog: pytest.LogCaptureFixture) -> None:
    store = ItemStore(ha_id="HA")
    values: list[Any] = []

    def _broken(_value: Any) -> None:
        raise RuntimeError("boom")

    store.subscribe("a", _broken)
    store.subscribe("a", values.append)

    with caplog.at_level(logging.ERROR, logger="pyhomeconnect.state.store"):
        store.publish("a", 5)

    assert values == [5]
    assert "listener for a failed" in caplog.text


def test_clear_listeners_keeps_values() -> None:
    store = ItemStore()
    values: list[Any] = []
    store.subscribe("a", values.append)
    store.publish("a", 1)

    store.clear_listeners()
    store.publish("a", 2)

    assert values == [1]
    assert store.snapshot() == {"a": 2}
