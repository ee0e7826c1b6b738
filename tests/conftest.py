from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

import pytest

from pyhomeconnect.config import HomeConnectConfig
from pyhomeconnect.device import HomeConnectDevice
from pyhomeconnect.models.appliance import ApplianceInfo, Command, Program, ProgramList
from pyhomeconnect.models.event import ApplianceEvent
from pyhomeconnect.models.item import Item

HA_ID = "SIEMENS-HB678GBS6-68A40E000000"


@dataclass
class FakeApplianceApi:
    """In-memory stand-in for the Home Connect API.

    ``failures`` maps a method name to exceptions raised by its next
    calls (one per call); ``blockers`` holds an event a method waits on
    before answering.
    """

    appliance: ApplianceInfo = field(
        default_factory=lambda: ApplianceInfo(ha_id=HA_ID, type="Oven", brand="Siemens", connected=True)
    )
    scopes: set[str] = field(default_factory=lambda: {"IdentifyAppliance", "Monitor", "Settings", "Control"})
    status: list[Item] | None = field(default_factory=list)
    settings: list[Item] | None = field(default_factory=list)
    setting: Item | None = None
    programs: ProgramList | None = field(default_factory=ProgramList)
    program: Program | None = None
    commands: list[Command] | None = field(default_factory=list)
    failures: dict[str, list[Exception]] = field(default_factory=dict)
    blockers: dict[str, asyncio.Event] = field(default_factory=dict)
    calls: list[tuple[Any, ...]] = field(default_factory=list)
    events: asyncio.Queue[ApplianceEvent | None] | None = None

    def push(self, event: ApplianceEvent | None) -> None:
        if self.events is None:
            self.events = asyncio.Queue()
        self.events.put_nowait(event)

    def has_scope(self, scope: str) -> bool:
        return scope in self.scopes

    def called(self, name: str) -> list[tuple[Any, ...]]:
        return [call for call in self.calls if call[0] == name]

    def fail(self, name: str, *errors: Exception) -> None:
        self.failures.setdefault(name, []).extend(errors)

    async def _call(self, name: str, *args: Any) -> None:
        self.calls.append((name, *args))
        await asyncio.sleep(0)
        blocker = self.blockers.get(name)
        if blocker is not None:
            await blocker.wait()
        pending = self.failures.get(name)
        if pending:
            raise pending.pop(0)

    async def get_events(self, ha_id: str) -> AsyncIterator[ApplianceEvent]:
        if self.events is None:
            self.events = asyncio.Queue()
        while True:
            event = await self.events.get()
            if event is None:
                return
            yield event

    async def get_appliance(self, ha_id: str) -> ApplianceInfo | None:
        await self._call("get_appliance", ha_id)
        return self.appliance

    async def get_status(self, ha_id: str) -> list[Item] | None:
        await self._call("get_status", ha_id)
        return self.status

    async def get_settings(self, ha_id: str) -> list[Item] | None:
        await self._call("get_settings", ha_id)
        return self.settings

    async def get_setting(self, ha_id: str, key: str) -> Item | None:
        await self._call("get_setting", ha_id, key)
        return self.setting

    async def set_setting(self, ha_id: str, key: str, value: Any) -> None:
        await self._call("set_setting", ha_id, key, value)

    async def get_programs(self, ha_id: str) -> ProgramList | None:
        await self._call("get_programs", ha_id)
        return self.programs

    async def get_available_programs(self, ha_id: str) -> ProgramList | None:
        await self._call("get_available_programs", ha_id)
        return self.programs

    async def get_available_program(self, ha_id: str, program_key: str) -> Program | None:
        await self._call("get_available_program", ha_id, program_key)
        return self.program

    async def get_selected_program(self, ha_id: str) -> Program | None:
        await self._call("get_selected_program", ha_id)
        return self.program

    async def set_selected_program(self, ha_id: str, program_key: str, options: Sequence[Item]) -> None:
        await self._call("set_selected_program", ha_id, program_key, list(options))

    async def get_active_program(self, ha_id: str) -> Program | None:
        await self._call("get_active_program", ha_id)
        return self.program

    async def set_active_program(self, ha_id: str, program_key: str, options: Sequence[Item]) -> None:
        await self._call("set_active_program", ha_id, program_key, list(options))

    async def stop_active_program(self, ha_id: str) -> None:
        await self._call("stop_active_program", ha_id)

    async def get_commands(self, ha_id: str) -> list[Command] | None:
        await self._call("get_commands", ha_id)
        return self.commands

    async def set_command(self, ha_id: str, command_key: str) -> None:
        await self._call("set_command", ha_id, command_key)

    async def set_active_program_option(self, ha_id: str, option_key: str, value: Any) -> None:
        await self._call("set_active_program_option", ha_id, option_key, value)


@pytest.fixture
def config() -> HomeConnectConfig:
    return HomeConnectConfig(
        access_token="token",
        event_disconnect_delay=0.05,
        connected_retry_min_delay=0.01,
        connected_retry_max_delay=0.04,
        connected_retry_factor=2.0,
        power_state_blackout=0.05,
        event_stream_retry_delay=0.01,
    )


@pytest.fixture
def api() -> FakeApplianceApi:
    return FakeApplianceApi()


@pytest.fixture
def make_device(api: FakeApplianceApi, config: HomeConnectConfig) -> Callable[..., HomeConnectDevice]:
    def _make(*, online: bool | None = None, **appliance: Any) -> HomeConnectDevice:
        info = api.appliance.model_copy(update=appliance)
        device = HomeConnectDevice(api, info, config=config)
        if online is not None:
            device.connectivity.connected = online
        return device

    return _make
