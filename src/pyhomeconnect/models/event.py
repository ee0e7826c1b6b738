"""Appliance event stream model."""

from __future__ import annotations

from pydantic import Field

from pyhomeconnect.models._base import HomeConnectBaseModel
from pyhomeconnect.models.item import Item


class EventData(HomeConnectBaseModel):
    items: list[Item] = Field(default_factory=list)


class ApplianceEvent(HomeConnectBaseModel):
    """One event delivered by the appliance event stream.

    ``event`` is kept as a plain string rather than an
    :class:`~pyhomeconnect.models.values.EventType` so that tags this
    library does not know about still reach the consumer, which reports
    them instead of the stream failing validation.
    """

    event: str
    data: EventData | None = None
    err: bool = False
    """``True`` on a ``STOP`` caused by a transport failure."""

    @property
    def items(self) -> list[Item]:
        if self.data is None:
            return []
        return self.data.items
