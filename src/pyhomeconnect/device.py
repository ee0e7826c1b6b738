"""Per-appliance state engine for the Home Connect API."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Collection, Mapping
from typing import Any

from pyhomeconnect._constants import CONNECTED_KEY, OPERATION_STATE_KEY
from pyhomeconnect._device import commands as _commands
from pyhomeconnect._device import reads as _reads
from pyhomeconnect._device.gate import CapabilityGate
from pyhomeconnect._transport import ApplianceApi
from pyhomeconnect.capabilities import PowerControl, ProgramControl
from pyhomeconnect.config import HomeConnectConfig
from pyhomeconnect.ingestion.events import EventStreamConsumer
from pyhomeconnect.models.appliance import ApplianceInfo, Command, Program
from pyhomeconnect.models.item import Item
from pyhomeconnect.models.values import ConnectivityState
from pyhomeconnect.state.connectivity import ConnectivityMonitor
from pyhomeconnect.state.power import PowerStateInference
from pyhomeconnect.state.resync import ResyncAction
from pyhomeconnect.state.store import ItemStore

_logger = logging.getLogger(__name__)


class HomeConnectDevice:
    """Mirror of one appliance's state, kept current from its event stream.

    Usage::

        async with HomeConnectDevice(api, appliance) as device:
            await device.wait_connected(immediate=True)
            device.subscribe("BSH.Common.Status.OperationState", print)

    Parameters
    ----------
    api
        Anything implementing :class:`~pyhomeconnect._transport.ApplianceApi`.
    appliance
        The appliance descriptor (model or raw API mapping).
    config
        Timing configuration; defaults to :meth:`HomeConnectConfig.from_env`.
    """

    def __init__(
        self,
        api: ApplianceApi,
        appliance: ApplianceInfo | Mapping[str, Any],
        *,
        config: HomeConnectConfig | None = None,
    ) -> None:
        if not isinstance(appliance, ApplianceInfo):
            appliance = ApplianceInfo.model_validate(dict(appliance))
        self.appliance = appliance
        self.ha_id = appliance.ha_id
        self.api = api
        self.config = config or HomeConnectConfig.from_env()

        self.store = ItemStore(ha_id=self.ha_id)
        self.connectivity = ConnectivityMonitor(
            ha_id=self.ha_id,
            store=self.store,
            config=self.config,
            actions_factory=self._resync_actions,
        )
        self.gate = CapabilityGate(
            api=api,
            store=self.store,
            appliance_type=lambda: self.appliance.type,
            is_connected=lambda: self.connectivity.connected,
        )
        self.power_inference = PowerStateInference(ha_id=self.ha_id, store=self.store, config=self.config)
        self.power_inference.attach()
        self.consumer = EventStreamConsumer(
            ha_id=self.ha_id,
            store=self.store,
            connectivity=self.connectivity,
            config=self.config,
        )

        self.power = PowerControl(self)
        self.programs = ProgramControl(self)

        self._poll_programs = False
        self._stream_task: asyncio.Task[None] | None = None
        self._stopped = False
        self._waiters: set[asyncio.Future[Any]] = set()

    def __repr__(self) -> str:
        return f"<HomeConnectDevice ha_id={self.ha_id} type={self.appliance.type} {self.connectivity.state}>"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> HomeConnectDevice:
        self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    def start(self) -> None:
        """Apply the descriptor's connectivity and start consuming events.

        A stopped device can be started again; it reads its state afresh.
        """
        if self._stream_task is not None:
            return
        if self._stopped:
            self._stopped = False
            self.connectivity.resume()
            self.power_inference.attach()
        _logger.debug("ha_id=%s starting (%s)", self.ha_id, self.appliance.type)
        self.connectivity.set_state(self.appliance.connected)
        self._stream_task = asyncio.get_running_loop().create_task(
            self.consumer.run(self.api.get_events(self.ha_id)),
            name=f"homeconnect-events-{self.ha_id}",
        )

    async def stop(self) -> None:
        """Cancel every autonomous activity and detach all listeners."""
        task, self._stream_task = self._stream_task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        self.consumer.cancel()
        self.connectivity.cancel()
        self.power_inference.cancel()
        self.programs.cancel()
        for waiter in list(self._waiters):
            waiter.cancel()
        self._waiters.clear()
        self.store.clear_listeners()
        self._stopped = True
        _logger.debug("ha_id=%s stopped", self.ha_id)

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def connected(self) -> bool | None:
        return self.connectivity.connected

    @property
    def connectivity_state(self) -> ConnectivityState:
        return self.connectivity.state

    def get_item(self, key: str, default: Any = None) -> Any:
        return self.store.get(key, default)

    def subscribe(self, key: str, listener: Callable[[Any], None]) -> Callable[[], None]:
        """Call *listener* with every new value of *key*; returns an unsubscribe callable."""
        return self.store.subscribe(key, listener)

    def poll_programs(self, enable: bool = True) -> None:
        """Also read the selected and active programs whenever state is resynchronised."""
        self._poll_programs = enable

    def describe(self) -> str:
        appliance = self.appliance
        parts = [part for part in (appliance.brand, appliance.type) if part]
        model = appliance.enumber or appliance.vib
        if model:
            parts.append(f"({model})")
        parts.append(f"haId={self.ha_id}")
        return " ".join(parts)

    def identify(self) -> None:
        """Log the appliance descriptor and every cached item."""
        _logger.info("ha_id=%s %s", self.ha_id, self.describe())
        for key, value in sorted(self.store.snapshot().items()):
            _logger.info("ha_id=%s   %s=%s", self.ha_id, key, value)

    def _resync_actions(self) -> list[ResyncAction]:
        actions: list[ResyncAction] = [self.get_appliance, self.get_status, self.get_settings]
        if self._poll_programs:
            actions += [self.get_selected_program, self.get_active_program]
        return actions

    # ------------------------------------------------------------------
    # Waiting
    # ------------------------------------------------------------------

    async def _wait_for(
        self,
        key: str,
        predicate: Callable[[Any], bool],
        *,
        immediate: bool,
        timeout: float | None,
    ) -> Any:
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        current = self.store.get(key)
        if immediate and predicate(current):
            return current

        def _listener(value: Any) -> None:
            if not future.done() and predicate(value):
                future.set_result(value)

        unsubscribe = self.store.subscribe(key, _listener)
        self._waiters.add(future)
        try:
            return await asyncio.wait_for(future, timeout)
        finally:
            unsubscribe()
            self._waiters.discard(future)

    async def wait_connected(self, immediate: bool = False, timeout: float | None = None) -> None:
        """Wait until the appliance is published as connected."""
        await self._wait_for(CONNECTED_KEY, bool, immediate=immediate, timeout=timeout)

    async def wait_operation_state(self, states: Collection[str] | str, timeout: float | None = None) -> str:
        """Wait until the operation phase is one of *states*; returns the matching phase."""
        wanted = {states} if isinstance(states, str) else set(states)
        return await self._wait_for(OPERATION_STATE_KEY, wanted.__contains__, immediate=True, timeout=timeout)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_appliance(self) -> ApplianceInfo:
        return await _reads.get_appliance(self)

    async def get_status(self) -> list[Item]:
        return await _reads.get_status(self)

    async def get_settings(self) -> list[Item]:
        return await _reads.get_settings(self)

    async def get_setting(self, key: str) -> Item | None:
        """Read one setting; ``None`` when the appliance does not support it."""
        return await _reads.get_setting(self, key)

    async def get_all_programs(self) -> list[Program]:
        return await _reads.get_all_programs(self)

    async def get_available_programs(self) -> list[Program]:
        return await _reads.get_available_programs(self)

    async def get_available_program(self, program_key: str) -> Program:
        return await _reads.get_available_program(self, program_key)

    async def get_selected_program(self) -> Program | None:
        return await _reads.get_selected_program(self)

    async def get_active_program(self) -> Program | None:
        return await _reads.get_active_program(self)

    async def get_commands(self) -> list[Command]:
        return await _reads.get_commands(self)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def set_setting(self, key: str, value: Any) -> None:
        await _commands.set_setting(self, key, value)

    async def set_selected_program(self, program_key: str, options: Mapping[str, Any] | None = None) -> None:
        await _commands.set_selected_program(self, program_key, options)

    async def start_program(self, program_key: str | None = None, options: Mapping[str, Any] | None = None) -> None:
        await _commands.start_program(self, program_key, options)

    async def stop_program(self) -> None:
        await _commands.stop_program(self)

    async def pause_program(self, pause: bool = True) -> None:
        await _commands.pause_program(self, pause)

    async def open_door(self, fully: bool = True) -> None:
        await _commands.open_door(self, fully)

    async def set_active_program_option(self, option_key: str, value: Any) -> None:
        await _commands.set_active_program_option(self, option_key, value)
