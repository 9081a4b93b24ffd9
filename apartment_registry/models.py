"""
Data model for apartment blocks and their renters.

A Block is created once with an empty renter list and afterwards only
read or extended. Renters are immutable. Field names on the wire match
the ledger record format: ``nOfRooms`` and ``movedIn`` keep their
camelCase spelling.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .exceptions import SerializationError


def _text_field(data: dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise TypeError(f"{key} must be a string, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class Renter:
    """An occupant of exactly one block.

    Attributes:
        name: Given name
        surname: Family name
        moved_in: When the renter was registered (timezone-aware)
    """

    name: str
    surname: str
    moved_in: datetime

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for storage."""
        return {
            "name": self.name,
            "surname": self.surname,
            "movedIn": self.moved_in.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Renter:
        """Deserialize from dictionary."""
        return cls(
            name=_text_field(data, "name"),
            surname=_text_field(data, "surname"),
            moved_in=datetime.fromisoformat(data["movedIn"]),
        )


@dataclass
class Block:
    """A registered apartment building.

    Attributes:
        id: Ledger key derived from street and number, never user-supplied
        street: Street name
        number: House number (kept as text, e.g. "12a")
        n_of_rooms: Number of rooms as supplied at creation
        renters: Occupants in registration order, append-only
    """

    id: str
    street: str
    number: str
    n_of_rooms: str
    renters: list[Renter] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.renters

    def add_renter(self, renter: Renter) -> int:
        """Append a renter and return the new renter count."""
        self.renters.append(renter)
        return len(self.renters)

    def find_renter(self, name: str) -> Renter | None:
        """Return the first renter registered under ``name``.

        When several renters share a name, the earliest registration wins.
        """
        for renter in self.renters:
            if renter.name == name:
                return renter
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for storage."""
        return {
            "id": self.id,
            "street": self.street,
            "number": self.number,
            "nOfRooms": self.n_of_rooms,
            "renters": [r.to_dict() for r in self.renters],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Block:
        """Deserialize from dictionary."""
        return cls(
            id=_text_field(data, "id"),
            street=_text_field(data, "street"),
            number=_text_field(data, "number"),
            n_of_rooms=_text_field(data, "nOfRooms"),
            renters=[Renter.from_dict(r) for r in data.get("renters") or []],
        )


def encode_record(record: Block | Renter) -> bytes:
    """Encode a block or renter as UTF-8 JSON."""
    return json.dumps(record.to_dict(), ensure_ascii=False).encode("utf-8")


def decode_block(raw: bytes) -> Block:
    """Decode a block record read from the ledger.

    Raises:
        SerializationError: If the bytes are not a valid block record
    """
    try:
        data = json.loads(raw.decode("utf-8"))
        if not isinstance(data, dict):
            raise TypeError(f"expected object, got {type(data).__name__}")
        return Block.from_dict(data)
    except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise SerializationError("block", str(e)) from e


def decode_renter(raw: bytes) -> Renter:
    """Decode a renter payload."""
    try:
        data = json.loads(raw.decode("utf-8"))
        if not isinstance(data, dict):
            raise TypeError(f"expected object, got {type(data).__name__}")
        return Renter.from_dict(data)
    except (UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise SerializationError("renter", str(e)) from e
