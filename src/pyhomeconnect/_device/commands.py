"""Internal write operations for :class:`pyhomeconnect.device.HomeConnectDevice`.

Every mutation requires the relevant scope, a connected appliance and
that the appliance currently accepts remote control. On success the
written values are applied to the item store straight away rather than
waiting for the event stream to echo them.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pyhomeconnect._constants import (
    ACTIVE_PROGRAM_KEY,
    OPEN_DOOR_COMMAND,
    OPERATION_STATE_KEY,
    PARTLY_OPEN_DOOR_COMMAND,
    PAUSE_PROGRAM_COMMAND,
    RESUME_PROGRAM_COMMAND,
    SELECTED_PROGRAM_KEY,
)
from pyhomeconnect._device._common import log_failure
from pyhomeconnect.models.item import Item, items_from_options
from pyhomeconnect.models.values import ACTIVE_OPERATION_STATES

if TYPE_CHECKING:
    from pyhomeconnect.device import HomeConnectDevice

_logger = logging.getLogger(__name__)


async def set_setting(device: HomeConnectDevice, key: str, value: Any) -> None:
    try:
        device.gate.require_settings()
        device.gate.require_remote_control()
        await device.api.set_setting(device.ha_id, key, value)
    except Exception as exc:
        log_failure(device.ha_id, f"SET {key}={value}", exc)
        raise
    device.store.update([Item(key=key, value=value)])


async def set_selected_program(
    device: HomeConnectDevice,
    program_key: str,
    options: Mapping[str, Any] | None = None,
) -> None:
    program_options = items_from_options(dict(options or {}))
    try:
        device.gate.require_control()
        device.gate.require_remote_control()
        await device.api.set_selected_program(device.ha_id, program_key, program_options)
    except Exception as exc:
        log_failure(device.ha_id, f"SET selected program {program_key}", exc)
        raise
    device.store.update([Item(key=SELECTED_PROGRAM_KEY, value=program_key)])
    device.store.update(program_options)


async def start_program(
    device: HomeConnectDevice,
    program_key: str | None = None,
    options: Mapping[str, Any] | None = None,
) -> None:
    """Start *program_key*, or the currently selected program when omitted."""
    program_options = items_from_options(dict(options or {}))
    try:
        device.gate.require_control()
        device.gate.require_remote_start()
        if not program_key:
            program_key = device.store.get(SELECTED_PROGRAM_KEY)
        if not program_key:
            raise ValueError("No program key given and no program is selected")
        await device.api.set_active_program(device.ha_id, program_key, program_options)
    except Exception as exc:
        log_failure(device.ha_id, f"START active program {program_key}", exc)
        raise
    device.store.update([Item(key=ACTIVE_PROGRAM_KEY, value=program_key)])
    device.store.update(program_options)


async def stop_program(device: HomeConnectDevice) -> None:
    operation_state = device.store.get(OPERATION_STATE_KEY)
    if operation_state not in ACTIVE_OPERATION_STATES:
        _logger.debug("ha_id=%s ignoring STOP active program in %s", device.ha_id, operation_state)
        return
    try:
        device.gate.require_control()
        device.gate.require_remote_control()
        await device.api.stop_active_program(device.ha_id)
    except Exception as exc:
        log_failure(device.ha_id, "STOP active program", exc)
        raise


async def pause_program(device: HomeConnectDevice, pause: bool = True) -> None:
    command = PAUSE_PROGRAM_COMMAND if pause else RESUME_PROGRAM_COMMAND
    try:
        device.gate.require_control()
        device.gate.require_remote_control()
        await device.api.set_command(device.ha_id, command)
    except Exception as exc:
        log_failure(device.ha_id, f"COMMAND {command}", exc)
        raise


async def open_door(device: HomeConnectDevice, fully: bool = True) -> None:
    # Opening the door does not need remote control to be enabled.
    command = OPEN_DOOR_COMMAND if fully else PARTLY_OPEN_DOOR_COMMAND
    try:
        device.gate.require_control()
        await device.api.set_command(device.ha_id, command)
    except Exception as exc:
        log_failure(device.ha_id, f"COMMAND {command}", exc)
        raise


async def set_active_program_option(device: HomeConnectDevice, option_key: str, value: Any) -> None:
    try:
        device.gate.require_control()
        device.gate.require_remote_control()
        await device.api.set_active_program_option(device.ha_id, option_key, value)
    except Exception as exc:
        log_failure(device.ha_id, f"SET {option_key}={value}", exc)
        raise
    device.store.update([Item(key=option_key, value=value)])
