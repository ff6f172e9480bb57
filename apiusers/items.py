"""Catalogue items."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass
class Item:
    """A product with an identifier, a name and a price."""

    id: str = ""
    name: str = ""
    price: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready representation of the item."""
        return {"id": self.id, "name": self.name, "price": self.price}


def _field(data: Mapping[str, Any], key: str, kind: type | tuple[type, ...], default: Any) -> Any:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, kind):
        raise TypeError(f"field {key!r} has the wrong type: {type(value).__name__}")
    return value


def item_from_dict(data: Mapping[str, Any] | None) -> Item:
    """Build an item from decoded JSON; missing fields take their zero value."""
    if data is None:
        return Item()
    if not isinstance(data, Mapping):
        raise TypeError("item must be a JSON object")
    return Item(
        id=_field(data, "id", str, ""),
        name=_field(data, "name", str, ""),
        price=float(_field(data, "price", (int, float), 0.0)),
    )