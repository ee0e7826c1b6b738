"""Appliance descriptor, program and command models."""

from __future__ import annotations

from pydantic import Field

from pyhomeconnect.models._base import HomeConnectBaseModel
from pyhomeconnect.models.item import Item


class ApplianceInfo(HomeConnectBaseModel):
    """Descriptor returned by ``GET /homeappliances/{haId}``.

    ``connected`` is the server's authoritative view of whether the
    appliance is currently reachable.
    """

    ha_id: str
    name: str = ""
    type: str = ""
    brand: str = ""
    vib: str = ""
    enumber: str = ""
    connected: bool | None = None


class Program(HomeConnectBaseModel):
    """A program (selected, active or available) with its options."""

    key: str
    name: str | None = None
    options: list[Item] = Field(default_factory=list)


class ProgramList(HomeConnectBaseModel):
    """Result of listing programs, plus the active/selected program if any."""

    programs: list[Program] = Field(default_factory=list)
    active: Program | None = None
    selected: Program | None = None


class Command(HomeConnectBaseModel):
    """A command supported by an appliance."""

    key: str
    name: str | None = None
