from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest

from pyhomeconnect._constants import CONNECTED_KEY, POWER_STATE_KEY
from pyhomeconnect.device import HomeConnectDevice
from pyhomeconnect.exceptions import HomeConnectError, HomeConnectTransportError
from pyhomeconnect.models.item import Item
from pyhomeconnect.models.values import PowerState

if TYPE_CHECKING:
    from conftest import FakeApplianceApi

MakeDevice = Callable[..., HomeConnectDevice]


def _power_setting(*allowed: PowerState) -> Item:
    return Item.model_validate(
        {
            "key": POWER_STATE_KEY,
            "value": PowerState.ON.value,
            "constraints": {"allowedvalues": [value.value for value in allowed]},
        }
    )


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("allowed", "expected"),
    [
        ((PowerState.ON, PowerState.OFF), PowerState.OFF),
        ((PowerState.ON, PowerState.STANDBY), PowerState.STANDBY),
        ((PowerState.ON, PowerState.OFF, PowerState.STANDBY), None),
        ((PowerState.ON,), None),
    ],
)
async def test_off_value_discovery(
    make_device: MakeDevice,
    api: FakeApplianceApi,
    allowed: tuple[PowerState, ...],
    expected: PowerState | None,
) -> None:
    api.setting = _power_setting(*allowed)
    device = make_device(online=True)

    assert await device.power.discover() == expected
    assert device.power.discovered
    assert device.power.can_switch_off is (expected is not None)


@pytest.mark.asyncio
async def test_discovery_when_power_setting_unsupported(make_device: MakeDevice, api: FakeApplianceApi) -> None:
    api.fail("get_setting", HomeConnectTransportError("unsupported", code="SDK.Error.UnsupportedSetting"))
    device = make_device(online=True)

    assert await device.power.discover() is None
    assert not device.power.can_switch_off


@pytest.mark.asyncio
async def test_set_power_uses_discovered_off_value(make_device: MakeDevice, api: FakeApplianceApi) -> None:
    api.setting = _power_setting(PowerState.ON, PowerState.STANDBY)
    device = make_device(online=True)
    await device.power.discover()

    await device.power.set_power(False)
    await device.power.set_power(True)

    assert [call[3] for call in api.called("set_setting")] == [PowerState.STANDBY, PowerState.ON]


@pytest.mark.asyncio
async def test_switching_off_unsupported_raises(make_device: MakeDevice, api: FakeApplianceApi) -> None:
    device = make_device(online=True)

    with pytest.raises(HomeConnectError, match="cannot be switched off"):
        await device.power.set_power(False)

    assert api.called("set_setting") == []


@pytest.mark.asyncio
async def test_is_on_combines_connectivity_and_power(make_device: MakeDevice) -> None:
    device = make_device(online=True)
    assert device.power.is_on is None

    device.store.publish(POWER_STATE_KEY, PowerState.ON.value)
    assert device.power.is_on is True

    device.store.publish(CONNECTED_KEY, False)
    assert device.power.is_on is False


@pytest.mark.asyncio
async def test_program_control_delegates(make_device: MakeDevice, api: FakeApplianceApi) -> None:
    device = make_device(online=True)
    device.store.publish("BSH.Common.Status.OperationState", "BSH.Common.EnumType.OperationState.Run")

    await device.programs.select("Dishcare.Dishwasher.Program.Auto2")
    await device.programs.pause()
    await device.programs.resume()
    await device.programs.stop()

    assert [call[0] for call in api.calls] == [
        "set_selected_program",
        "set_command",
        "set_command",
        "stop_active_program",
    ]
