"""Typed capability sub-components owned by a device.

Each capability wraps the gated device operations for one concern and
keeps whatever state that concern needs (for example which value
switches the appliance off).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pyhomeconnect._constants import CONNECTED_KEY, POWER_STATE_KEY
from pyhomeconnect.coalesce import RequestCoalescer
from pyhomeconnect.exceptions import HomeConnectError
from pyhomeconnect.models.values import PowerState

if TYPE_CHECKING:
    from pyhomeconnect.device import HomeConnectDevice

_logger = logging.getLogger(__name__)


class PowerControl:
    """Power on/off (or standby) for an appliance."""

    def __init__(self, device: HomeConnectDevice) -> None:
        self._device = device
        self.off_value: PowerState | None = None
        self.discovered = False

    @property
    def is_on(self) -> bool | None:
        """``True`` only when connected and powered on; ``None`` until power has been reported."""
        store = self._device.store
        if store.get(CONNECTED_KEY) is False:
            return False
        power = store.get(POWER_STATE_KEY)
        if power is None:
            return None
        return power == PowerState.ON

    @property
    def can_switch_off(self) -> bool:
        return self.off_value is not None

    async def discover(self) -> PowerState | None:
        """Read the power setting's allowed values and pick the off value."""
        setting = await self._device.get_setting(POWER_STATE_KEY)
        allowed = set(setting.constraints.allowed_values) if setting and setting.constraints else set()

        # Some appliances report unsupported combinations.
        if PowerState.OFF in allowed and PowerState.STANDBY in allowed:
            _logger.warning(
                "ha_id=%s claims it can be both switched off and placed in standby; "
                "treating as cannot be switched off",
                self._device.ha_id,
            )
            self.off_value = None
        elif PowerState.OFF in allowed:
            _logger.info("ha_id=%s can be switched off", self._device.ha_id)
            self.off_value = PowerState.OFF
        elif PowerState.STANDBY in allowed:
            _logger.info("ha_id=%s can be placed in standby", self._device.ha_id)
            self.off_value = PowerState.STANDBY
        else:
            _logger.info("ha_id=%s cannot be switched off", self._device.ha_id)
            self.off_value = None
        self.discovered = True
        return self.off_value

    async def set_power(self, on: bool) -> None:
        if on:
            value = PowerState.ON
        elif self.off_value is not None:
            value = self.off_value
        else:
            raise HomeConnectError("The appliance cannot be switched off")
        _logger.info("ha_id=%s SET %s", self._device.ha_id, "On" if on else "Off")
        await self._device.set_setting(POWER_STATE_KEY, value.value)


class ProgramControl:
    """Program selection, start/stop and option changes.

    Starting a program and changing an option go through a
    :class:`RequestCoalescer` so bursts of changes become one API call.
    """

    def __init__(self, device: HomeConnectDevice) -> None:
        self._device = device
        self._coalescer = RequestCoalescer()

    async def select(self, program_key: str, options: Mapping[str, Any] | None = None) -> None:
        await self._device.set_selected_program(program_key, options)

    async def start(self, program_key: str | None = None, options: Mapping[str, Any] | None = None) -> Any:
        """Start a program; calls made before the API request is sent are merged."""

        async def _start(merged: dict[str, Any]) -> None:
            await self._device.start_program(program_key, merged)

        return await self._coalescer.submit("start", _start, options)

    async def stop(self) -> None:
        await self._device.stop_program()

    async def pause(self) -> None:
        await self._device.pause_program(True)

    async def resume(self) -> None:
        await self._device.pause_program(False)

    async def set_option(self, option_key: str, value: Any) -> Any:
        """Change an option of the active program; rapid changes send only the last value."""

        async def _set(merged: dict[str, Any]) -> None:
            await self._device.set_active_program_option(option_key, merged["value"])

        return await self._coalescer.submit(("option", option_key), _set, {"value": value})

    def cancel(self) -> None:
        self._coalescer.cancel()
