"""Custom exception hierarchy for pyhomeconnect."""

from __future__ import annotations


class HomeConnectError(Exception):
    """Base exception for all pyhomeconnect errors."""


class HomeConnectConfigError(HomeConnectError):
    """Invalid or missing configuration."""


class HomeConnectAuthorizationError(HomeConnectError):
    """The scope required by an operation has not been authorised."""

    def __init__(self, message: str, *, scope: str = "") -> None:
        self.scope = scope
        super().__init__(message)


class HomeConnectOfflineError(HomeConnectError):
    """The appliance is not currently connected."""


class HomeConnectRemoteControlDeniedError(HomeConnectError):
    """The appliance does not currently accept remote control.

    Raised when the appliance is being operated locally, when remote
    control has been disabled on the unit, or when remote start is not
    allowed for a program start.
    """

    def __init__(self, message: str, *, reason: str = "") -> None:
        self.reason = reason
        super().__init__(message)


class HomeConnectEmptyResponseError(HomeConnectError):
    """The API returned no data where data was required."""

    def __init__(self, message: str = "Empty response", *, operation: str = "") -> None:
        self.operation = operation
        super().__init__(message)


class HomeConnectTransportError(HomeConnectError):
    """API call failed.

    ``code`` carries the machine-readable error key reported by the
    server (e.g. ``SDK.Error.NoProgramActive``) or the HTTP status as a
    string when the body had no key. It is empty for network-level
    failures.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str = "",
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.code = code
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class HomeConnectUnsupportedEventError(HomeConnectError):
    """The event stream delivered an event type this library does not handle."""

    def __init__(self, message: str, *, event: str = "") -> None:
        self.event = event
        super().__init__(message)
