"""pyhomeconnect - Async state engine for Home Connect appliances."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyhomeconnect")
except PackageNotFoundError:
    __version__ = "0+local"
from pyhomeconnect._transport import ApplianceApi, HomeConnectTransport
from pyhomeconnect.capabilities import PowerControl, ProgramControl
from pyhomeconnect.coalesce import RequestCoalescer
from pyhomeconnect.config import HomeConnectConfig
from pyhomeconnect.device import HomeConnectDevice
from pyhomeconnect.exceptions import (
    HomeConnectAuthorizationError,
    HomeConnectConfigError,
    HomeConnectEmptyResponseError,
    HomeConnectError,
    HomeConnectOfflineError,
    HomeConnectRemoteControlDeniedError,
    HomeConnectTransportError,
    HomeConnectUnsupportedEventError,
)
from pyhomeconnect.models import (
    ApplianceEvent,
    ApplianceInfo,
    Command,
    ConnectivityState,
    EventType,
    Item,
    ItemConstraints,
    OperationState,
    PowerState,
    Program,
    ProgramList,
    Scope,
)
from pyhomeconnect.state.store import ItemStore

__all__ = [
    "__version__",
    "ApplianceApi",
    "ApplianceEvent",
    "ApplianceInfo",
    "Command",
    "ConnectivityState",
    "EventType",
    "HomeConnectAuthorizationError",
    "HomeConnectConfig",
    "HomeConnectConfigError",
    "HomeConnectDevice",
    "HomeConnectEmptyResponseError",
    "HomeConnectError",
    "HomeConnectOfflineError",
    "HomeConnectRemoteControlDeniedError",
    "HomeConnectTransport",
    "HomeConnectTransportError",
    "HomeConnectUnsupportedEventError",
    "Item",
    "ItemConstraints",
    "ItemStore",
    "OperationState",
    "PowerControl",
    "PowerState",
    "Program",
    "ProgramList",
    "RequestCoalescer",
    "Scope",
]
