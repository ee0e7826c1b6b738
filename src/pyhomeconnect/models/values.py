"""Enumerations for well-known Home Connect values."""

from __future__ import annotations

from enum import StrEnum


class Scope(StrEnum):
    """Authorisation grants checked by the capability gate."""

    MONITOR = "Monitor"
    SETTINGS = "Settings"
    CONTROL = "Control"
    IDENTIFY_APPLIANCE = "IdentifyAppliance"


class ConnectivityState(StrEnum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    UNKNOWN = "unknown"


class EventType(StrEnum):
    """Event tags delivered by the appliance event stream."""

    START = "START"
    STOP = "STOP"
    PAIRED = "PAIRED"
    DEPAIRED = "DEPAIRED"
    CONNECTED = "CONNECTED"
    DISCONNECTED = "DISCONNECTED"
    STATUS = "STATUS"
    EVENT = "EVENT"
    NOTIFY = "NOTIFY"


class OperationState(StrEnum):
    """Values of ``BSH.Common.Status.OperationState``."""

    INACTIVE = "BSH.Common.EnumType.OperationState.Inactive"
    READY = "BSH.Common.EnumType.OperationState.Ready"
    DELAYED_START = "BSH.Common.EnumType.OperationState.DelayedStart"
    RUN = "BSH.Common.EnumType.OperationState.Run"
    PAUSE = "BSH.Common.EnumType.OperationState.Pause"
    ACTION_REQUIRED = "BSH.Common.EnumType.OperationState.ActionRequired"
    FINISHED = "BSH.Common.EnumType.OperationState.Finished"
    ERROR = "BSH.Common.EnumType.OperationState.Error"
    ABORTING = "BSH.Common.EnumType.OperationState.Aborting"


class PowerState(StrEnum):
    """Values of ``BSH.Common.Setting.PowerState``."""

    OFF = "BSH.Common.EnumType.PowerState.Off"
    ON = "BSH.Common.EnumType.PowerState.On"
    STANDBY = "BSH.Common.EnumType.PowerState.Standby"


#: Phases in which no program can be active.
IDLE_OPERATION_STATES: frozenset[str] = frozenset({OperationState.INACTIVE, OperationState.READY})

#: Phases in which a program is running (or about to) and can be stopped.
ACTIVE_OPERATION_STATES: frozenset[str] = frozenset(
    {
        OperationState.DELAYED_START,
        OperationState.RUN,
        OperationState.PAUSE,
        OperationState.ACTION_REQUIRED,
    }
)
