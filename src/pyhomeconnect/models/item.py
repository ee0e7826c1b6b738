"""Status, setting, event and option items."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from pyhomeconnect.models._base import HomeConnectBaseModel


class ItemConstraints(HomeConnectBaseModel):
    """Value constraints reported alongside a setting or program option."""

    allowed_values: list[str] = Field(default_factory=list, alias="allowedvalues")
    """Enumeration values the appliance accepts."""

    default: Any = None
    minimum: float | None = Field(default=None, alias="min")
    maximum: float | None = Field(default=None, alias="max")
    stepsize: float | None = None


class Item(HomeConnectBaseModel):
    """A single key/value state fact about an appliance."""

    key: str
    value: Any = None
    name: str | None = None
    unit: str | None = None
    uri: str | None = None
    timestamp: int | None = None
    constraints: ItemConstraints | None = None

    def describe(self) -> str:
        """Render the item as ``key=value unit`` for logging."""
        description = self.key
        if self.value is not None:
            description += f"={self.value}"
        elif self.constraints is not None and self.constraints.default is not None:
            description += f"={self.constraints.default}"
        if self.unit and self.unit != "enum":
            description += f" {self.unit}"
        return description


def items_from_options(options: dict[str, Any] | None) -> list[Item]:
    """Convert a ``{option_key: value}`` mapping to a list of items."""
    if not options:
        return []
    return [Item(key=key, value=value) for key, value in options.items()]
