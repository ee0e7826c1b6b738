"""Permission and readiness checks run before any transport call."""

from __future__ import annotations

from collections.abc import Callable

from pyhomeconnect._constants import LOCAL_CONTROL_ACTIVE_KEY, REMOTE_CONTROL_ACTIVE_KEY, REMOTE_START_ALLOWED_KEY
from pyhomeconnect._transport import ApplianceApi
from pyhomeconnect.exceptions import (
    HomeConnectAuthorizationError,
    HomeConnectOfflineError,
    HomeConnectRemoteControlDeniedError,
)
from pyhomeconnect.models.values import Scope
from pyhomeconnect.state.store import ItemStore


class CapabilityGate:
    """Checks, in order: scope, connectivity, local control, remote control/start.

    Every failure is raised synchronously so no transport call is attempted.
    """

    def __init__(
        self,
        *,
        api: ApplianceApi,
        store: ItemStore,
        appliance_type: Callable[[], str],
        is_connected: Callable[[], bool | None],
    ) -> None:
        self._api = api
        self._store = store
        self._appliance_type = appliance_type
        self._is_connected = is_connected

    def has_scope(self, scope: Scope | str) -> bool:
        """Whether the appliance-specific (``Oven-Control``) or generic scope is granted."""
        appliance_type = self._appliance_type()
        if appliance_type and self._api.has_scope(f"{appliance_type}-{scope}"):
            return True
        return self._api.has_scope(str(scope))

    def _require_scope(self, scope: Scope) -> None:
        if not self.has_scope(scope):
            raise HomeConnectAuthorizationError(f"{scope} scope has not been authorised", scope=str(scope))

    def require_connected(self) -> None:
        if not self._is_connected():
            raise HomeConnectOfflineError("The appliance is offline")

    def require_identify(self) -> None:
        # Only the generic scope; reading the descriptor is how connectivity is learnt.
        if not self._api.has_scope(Scope.IDENTIFY_APPLIANCE):
            raise HomeConnectAuthorizationError(
                "IdentifyAppliance scope has not been authorised",
                scope=str(Scope.IDENTIFY_APPLIANCE),
            )

    def require_monitor(self) -> None:
        self._require_scope(Scope.MONITOR)
        self.require_connected()

    def require_settings(self) -> None:
        self._require_scope(Scope.SETTINGS)
        self.require_connected()

    def require_control(self) -> None:
        self._require_scope(Scope.CONTROL)
        self.require_connected()

    def require_remote_control(self) -> None:
        if self._store.get(LOCAL_CONTROL_ACTIVE_KEY):
            raise HomeConnectRemoteControlDeniedError(
                "Appliance is being manually controlled locally",
                reason="local_control_active",
            )
        if self._store.get(REMOTE_CONTROL_ACTIVE_KEY) is False:
            raise HomeConnectRemoteControlDeniedError(
                "Remote control not enabled on the appliance",
                reason="remote_control_disabled",
            )

    def require_remote_start(self) -> None:
        self.require_remote_control()
        if self._store.get(REMOTE_START_ALLOWED_KEY) is False:
            raise HomeConnectRemoteControlDeniedError(
                "Remote start not enabled on the appliance",
                reason="remote_start_disabled",
            )
