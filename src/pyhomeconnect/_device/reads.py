"""Internal read operations for :class:`pyhomeconnect.device.HomeConnectDevice`.

These functions keep `device.py` small without changing the public API.
Each one runs the capability gate, calls the API, writes the result to
the item store and returns it. Failures are logged and re-raised, except
for the error codes a given read defines as "nothing to report".
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pyhomeconnect._constants import (
    ACTIVE_PROGRAM_KEY,
    COMMANDS_UNSUPPORTED_CODES,
    NO_PROGRAM_ACTIVE_CODES,
    NO_PROGRAM_SELECTED_CODES,
    OPERATION_STATE_KEY,
    SELECTED_PROGRAM_KEY,
    UNSUPPORTED_SETTING_CODES,
    WRONG_OPERATION_STATE_CODES,
)
from pyhomeconnect._device._common import is_benign, log_failure, require_data
from pyhomeconnect.models.appliance import ApplianceInfo, Command, Program, ProgramList
from pyhomeconnect.models.item import Item
from pyhomeconnect.models.values import IDLE_OPERATION_STATES, OperationState

if TYPE_CHECKING:
    from pyhomeconnect.device import HomeConnectDevice

_logger = logging.getLogger(__name__)


def _publish_program_list(device: HomeConnectDevice, programs: ProgramList) -> None:
    if programs.active is not None and programs.active.key:
        device.store.update([Item(key=ACTIVE_PROGRAM_KEY, value=programs.active.key)])
        device.store.update(programs.active.options)
    elif programs.selected is not None and programs.selected.key:
        device.store.update([Item(key=SELECTED_PROGRAM_KEY, value=programs.selected.key)])
        device.store.update(programs.selected.options)


async def get_appliance(device: HomeConnectDevice) -> ApplianceInfo:
    operation = "GET appliance"
    try:
        device.gate.require_identify()
        appliance = require_data(await device.api.get_appliance(device.ha_id), operation)
    except Exception as exc:
        log_failure(device.ha_id, operation, exc)
        raise
    device.appliance = appliance
    device.connectivity.set_state(appliance.connected)
    return appliance


async def get_status(device: HomeConnectDevice) -> list[Item]:
    operation = "GET status"
    try:
        device.gate.require_monitor()
        status = require_data(await device.api.get_status(device.ha_id), operation)
    except Exception as exc:
        log_failure(device.ha_id, operation, exc)
        raise
    device.store.update(status)
    return status


async def get_settings(device: HomeConnectDevice) -> list[Item]:
    operation = "GET settings"
    try:
        device.gate.require_settings()
        settings = require_data(await device.api.get_settings(device.ha_id), operation)
    except Exception as exc:
        log_failure(device.ha_id, operation, exc)
        raise
    device.store.update(settings)
    return settings


async def get_setting(device: HomeConnectDevice, key: str) -> Item | None:
    operation = f"GET {key}"
    try:
        device.gate.require_settings()
        item = require_data(await device.api.get_setting(device.ha_id, key), operation)
    except Exception as exc:
        if is_benign(exc, UNSUPPORTED_SETTING_CODES):
            return None
        log_failure(device.ha_id, operation, exc)
        raise
    device.store.update([item])
    return item


async def get_all_programs(device: HomeConnectDevice) -> list[Program]:
    operation = "GET programs"
    try:
        device.gate.require_monitor()
        programs = require_data(await device.api.get_programs(device.ha_id), operation)
    except Exception as exc:
        log_failure(device.ha_id, operation, exc)
        raise
    _publish_program_list(device, programs)
    return programs.programs


async def get_available_programs(device: HomeConnectDevice) -> list[Program]:
    operation = "GET available programs"
    try:
        device.gate.require_monitor()
        programs = require_data(await device.api.get_available_programs(device.ha_id), operation)
    except Exception as exc:
        if is_benign(exc, WRONG_OPERATION_STATE_CODES):
            return []
        log_failure(device.ha_id, operation, exc)
        raise
    _publish_program_list(device, programs)
    return programs.programs


async def get_available_program(device: HomeConnectDevice, program_key: str) -> Program:
    operation = f"GET available program {program_key}"
    try:
        device.gate.require_monitor()
        return require_data(await device.api.get_available_program(device.ha_id, program_key), operation)
    except Exception as exc:
        log_failure(device.ha_id, operation, exc)
        raise


async def get_selected_program(device: HomeConnectDevice) -> Program | None:
    operation = "GET selected program"
    try:
        device.gate.require_monitor()
        program = require_data(await device.api.get_selected_program(device.ha_id), operation)
    except Exception as exc:
        if is_benign(exc, NO_PROGRAM_SELECTED_CODES):
            return None
        log_failure(device.ha_id, operation, exc)
        raise
    device.store.update([Item(key=SELECTED_PROGRAM_KEY, value=program.key)])
    # The selected program's options are only meaningful while nothing is running.
    if device.store.get(OPERATION_STATE_KEY) == OperationState.READY:
        device.store.update(program.options)
    return program


async def get_active_program(device: HomeConnectDevice) -> Program | None:
    operation_state = device.store.get(OPERATION_STATE_KEY)
    if operation_state in IDLE_OPERATION_STATES:
        _logger.debug("ha_id=%s ignoring GET active program in %s", device.ha_id, operation_state)
        return None

    operation = "GET active program"
    try:
        device.gate.require_monitor()
        program = require_data(await device.api.get_active_program(device.ha_id), operation)
    except Exception as exc:
        if is_benign(exc, NO_PROGRAM_ACTIVE_CODES):
            return None
        log_failure(device.ha_id, operation, exc)
        raise
    device.store.update([Item(key=ACTIVE_PROGRAM_KEY, value=program.key)])
    device.store.update(program.options)
    return program


async def get_commands(device: HomeConnectDevice) -> list[Command]:
    operation = "GET commands"
    try:
        device.gate.require_control()
        return require_data(await device.api.get_commands(device.ha_id), operation)
    except Exception as exc:
        if is_benign(exc, COMMANDS_UNSUPPORTED_CODES):
            return []
        log_failure(device.ha_id, operation, exc)
        raise
