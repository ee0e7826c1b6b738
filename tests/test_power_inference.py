from __future__ import annotations

import asyncio
from typing import Any

import pytest

from pyhomeconnect._constants import OPERATION_STATE_KEY, POWER_STATE_KEY
from pyhomeconnect.config import HomeConnectConfig
from pyhomeconnect.models.values import OperationState, PowerState
from pyhomeconnect.state.power import PowerStateInference, implied_power
from pyhomeconnect.state.store import ItemStore


def _attach(config: HomeConnectConfig) -> tuple[ItemStore, PowerStateInference, list[Any]]:
    store = ItemStore(ha_id="HA")
    inference = PowerStateInference(ha_id="HA", store=store, config=config)
    inference.attach()
    powers: list[Any] = []
    store.subscribe(POWER_STATE_KEY, powers.append)
    return store, inference, powers


def test_implied_power() -> None:
    assert implied_power(OperationState.INACTIVE) is False
    assert implied_power(OperationState.READY) is True
    assert implied_power(OperationState.RUN) is True
    assert implied_power(OperationState.FINISHED) is None
    assert implied_power(None) is None


@pytest.mark.asyncio
async def test_running_while_reported_off_corrects_to_on(config: HomeConnectConfig) -> None:
    store, inference, powers = _attach(config)
    store.publish(POWER_STATE_KEY, PowerState.OFF.value)
    await asyncio.sleep(0.08)
    assert not inference.blackout_active

    store.publish(OPERATION_STATE_KEY, OperationState.RUN.value)

    assert powers == [PowerState.OFF, PowerState.ON]
    assert store.get(POWER_STATE_KEY) == PowerState.ON
    inference.cancel()


@pytest.mark.asyncio
async def test_correction_suppressed_right_after_power_update(config: HomeConnectConfig) -> None:
    store, inference, powers = _attach(config)
    store.publish(POWER_STATE_KEY, PowerState.OFF.value)
    assert inference.blackout_active

    store.publish(OPERATION_STATE_KEY, OperationState.RUN.value)
    assert powers == [PowerState.OFF]

    await asyncio.sleep(0.08)
    store.publish(OPERATION_STATE_KEY, OperationState.RUN.value)
    assert powers == [PowerState.OFF, PowerState.ON]
    inference.cancel()


@pytest.mark.asyncio
async def test_inactive_while_on_corrects_to_standby(config: HomeConnectConfig) -> None:
    store, inference, powers = _attach(config)
    store.publish(POWER_STATE_KEY, PowerState.ON.value)
    await asyncio.sleep(0.08)

    store.publish(OPERATION_STATE_KEY, OperationState.INACTIVE.value)

    assert powers == [PowerState.ON, PowerState.STANDBY]
    inference.cancel()


@pytest.mark.asyncio
async def test_standby_correction_also_suppressed_during_blackout(config: HomeConnectConfig) -> None:
    store, inference, powers = _attach(config)
    store.publish(POWER_STATE_KEY, PowerState.ON.value)

    store.publish(OPERATION_STATE_KEY, OperationState.INACTIVE.value)

    assert powers == [PowerState.ON]
    inference.cancel()


@pytest.mark.asyncio
async def test_missing_power_counts_as_not_on(config: HomeConnectConfig) -> None:
    store, inference, powers = _attach(config)

    store.publish(OPERATION_STATE_KEY, OperationState.READY.value)

    assert powers == [PowerState.ON]
    # The correction itself is a power update and starts a blackout.
    assert inference.blackout_active
    inference.cancel()


@pytest.mark.asyncio
async def test_consistent_or_uninformative_phases_are_left_alone(config: HomeConnectConfig) -> None:
    store, inference, powers = _attach(config)
    store.publish(POWER_STATE_KEY, PowerState.OFF.value)
    await asyncio.sleep(0.08)

    store.publish(OPERATION_STATE_KEY, OperationState.INACTIVE.value)
    store.publish(OPERATION_STATE_KEY, OperationState.FINISHED.value)
    store.publish(OPERATION_STATE_KEY, OperationState.ERROR.value)

    assert powers == [PowerState.OFF]
    inference.cancel()


@pytest.mark.asyncio
async def test_cancel_detaches_listeners(config: HomeConnectConfig) -> None:
    store, inference, powers = _attach(config)
    inference.cancel()

    store.publish(OPERATION_STATE_KEY, OperationState.RUN.value)

    assert powers == []
    assert store.listener_count(OPERATION_STATE_KEY) == 0
