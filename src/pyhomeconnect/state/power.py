"""Workaround for appliances that do not reliably report their power state.

The operation phase is cross-checked against the stored power setting
and a corrected power setting is published when they disagree. Shortly
after a genuine power setting update the correction is suppressed so
the inference cannot override a value the appliance just reported.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from pyhomeconnect._constants import OPERATION_STATE_KEY, POWER_STATE_KEY
from pyhomeconnect._scheduling import Timer
from pyhomeconnect.config import HomeConnectConfig
from pyhomeconnect.models.values import OperationState, PowerState
from pyhomeconnect.state.store import ItemStore

_logger = logging.getLogger(__name__)

# Phases without an entry imply nothing about power.
_OPERATION_IMPLIES_ON: dict[str, bool] = {
    OperationState.INACTIVE: False,
    OperationState.READY: True,
    OperationState.RUN: True,
}


def implied_power(operation_state: Any) -> bool | None:
    """Whether *operation_state* implies the appliance is on, off, or neither (``None``)."""
    return _OPERATION_IMPLIES_ON.get(operation_state)


class PowerStateInference:
    def __init__(self, *, ha_id: str, store: ItemStore, config: HomeConnectConfig) -> None:
        self._ha_id = ha_id
        self._store = store
        self._blackout_duration = config.power_state_blackout
        self._blackout = Timer()
        self._unsubscribes: list[Callable[[], None]] = []

    @property
    def blackout_active(self) -> bool:
        return self._blackout.active

    def attach(self) -> None:
        self._unsubscribes = [
            self._store.subscribe(POWER_STATE_KEY, self._on_power_state),
            self._store.subscribe(OPERATION_STATE_KEY, self._on_operation_state),
        ]

    def cancel(self) -> None:
        self._blackout.cancel()
        for unsubscribe in self._unsubscribes:
            unsubscribe()
        self._unsubscribes = []

    def _on_power_state(self, _value: Any) -> None:
        self._blackout.schedule(self._blackout_duration, lambda: None)

    def _on_operation_state(self, operation_state: Any) -> None:
        implies_on = implied_power(operation_state)
        if implies_on is None:
            return

        is_on = self._store.get(POWER_STATE_KEY) == PowerState.ON
        if implies_on and not is_on:
            self._correct(PowerState.ON, "on")
        elif not implies_on and is_on:
            # Never infer Off: some appliances can only be placed in standby.
            self._correct(PowerState.STANDBY, "standby or off")

    def _correct(self, power_state: PowerState, description: str) -> None:
        if self._blackout.active:
            _logger.debug("ha_id=%s operation state implies power is %s (ignored)", self._ha_id, description)
            return
        _logger.debug("ha_id=%s operation state implies power is %s", self._ha_id, description)
        self._store.publish(POWER_STATE_KEY, power_state.value)
