"""Data models for Home Connect API payloads."""

from pyhomeconnect.models._base import HomeConnectBaseModel
from pyhomeconnect.models.appliance import ApplianceInfo, Command, Program, ProgramList
from pyhomeconnect.models.event import ApplianceEvent, EventData
from pyhomeconnect.models.item import Item, ItemConstraints, items_from_options
from pyhomeconnect.models.values import (
    ACTIVE_OPERATION_STATES,
    IDLE_OPERATION_STATES,
    ConnectivityState,
    EventType,
    OperationState,
    PowerState,
    Scope,
)

__all__ = [
    "ACTIVE_OPERATION_STATES",
    "IDLE_OPERATION_STATES",
    "ApplianceEvent",
    "ApplianceInfo",
    "Command",
    "ConnectivityState",
    "EventData",
    "EventType",
    "HomeConnectBaseModel",
    "Item",
    "ItemConstraints",
    "OperationState",
    "PowerState",
    "Program",
    "ProgramList",
    "Scope",
    "items_from_options",
]
