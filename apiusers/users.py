"""Users with validated names and biography."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class ValidationError(ValueError):
    """A user field is outside its allowed length."""


def _byte_length(text: str) -> int:
    return len(text.encode("utf-8"))


def _check_length(value: str, field_name: str, low: int, high: int) -> None:
    if not low <= _byte_length(value) <= high:
        raise ValidationError(f"{field_name} deve ter entre {low} e {high} caracteres")


@dataclass
class User:
    """A registered user."""

    first_name: str
    last_name: str
    biography: str
    id: str = ""

    def validate(self) -> None:
        """Raise ValidationError if any field has an invalid length."""
        _check_length(self.first_name, "first_name", 2, 20)
        _check_length(self.last_name, "last_name", 2, 20)
        _check_length(self.biography, "biography", 20, 450)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready representation of the user."""
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "biography": self.biography,
        }


def new_user(first_name: str, last_name: str, biography: str) -> User:
    """Create a validated user from trimmed input."""
    user = User(
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        biography=biography.strip(),
    )
    user.validate()
    return user