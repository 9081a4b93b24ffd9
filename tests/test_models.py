"""Tests for Block and Renter records."""

import json
from datetime import UTC, datetime

import pytest

from apartment_registry.exceptions import SerializationError
from apartment_registry.models import Block, Renter, decode_block, decode_renter, encode_record

MOVED_IN = datetime(2024, 3, 1, 9, 0, tzinfo=UTC)


def make_block(**overrides) -> Block:
    values = {"id": "block:Elm%20St:12", "street": "Elm St", "number": "12", "n_of_rooms": "4"}
    values.update(overrides)
    return Block(**values)


class TestRenter:
    def test_to_dict_uses_wire_names(self):
        renter = Renter(name="Ana", surname="Lopez", moved_in=MOVED_IN)
        assert renter.to_dict() == {
            "name": "Ana",
            "surname": "Lopez",
            "movedIn": "2024-03-01T09:00:00+00:00",
        }

    def test_is_immutable(self):
        renter = Renter(name="Ana", surname="Lopez", moved_in=MOVED_IN)
        with pytest.raises(AttributeError):
            renter.name = "Eve"  # type: ignore[misc]

    def test_decode(self):
        raw = json.dumps({"name": "Ana", "surname": "Lopez", "movedIn": MOVED_IN.isoformat()})
        renter = decode_renter(raw.encode())
        assert renter == Renter(name="Ana", surname="Lopez", moved_in=MOVED_IN)


class TestBlock:
    def test_new_block_is_empty(self):
        block = make_block()
        assert block.renters == []
        assert block.is_empty

    def test_add_renter_returns_count(self):
        block = make_block()
        assert block.add_renter(Renter("Ana", "Lopez", MOVED_IN)) == 1
        assert block.add_renter(Renter("Ben", "Ito", MOVED_IN)) == 2
        assert not block.is_empty

    def test_find_renter_returns_first_match(self):
        """With duplicate names the earliest registration wins."""
        block = make_block()
        block.add_renter(Renter("Ana", "Lopez", MOVED_IN))
        block.add_renter(Renter("Ana", "Smith", MOVED_IN))
        assert block.find_renter("Ana").surname == "Lopez"

    def test_find_renter_missing(self):
        assert make_block().find_renter("Nobody") is None

    def test_to_dict_fields(self):
        data = make_block().to_dict()
        assert set(data) == {"id", "street", "number", "nOfRooms", "renters"}
        assert data["nOfRooms"] == "4"

    def test_encode_decode_preserves_renter_order(self):
        block = make_block()
        for name in ("Ana", "Ben", "Cy"):
            block.add_renter(Renter(name, "X", MOVED_IN))
        decoded = decode_block(encode_record(block))
        assert decoded == block
        assert [r.name for r in decoded.renters] == ["Ana", "Ben", "Cy"]

    def test_decode_tolerates_null_renters(self):
        raw = json.dumps(
            {"id": "b", "street": "s", "number": "1", "nOfRooms": "2", "renters": None}
        ).encode()
        assert decode_block(raw).renters == []


class TestDecodeErrors:
    @pytest.mark.parametrize(
        "raw",
        [
            b"not json",
            b"[1, 2]",
            b'{"id": "b"}',
            b"\xff\xfe",
            b'{"id": "b", "street": "s", "number": "1", "nOfRooms": "2",'
            b' "renters": [{"name": "A", "surname": "B", "movedIn": "yesterday"}]}',
            b'{"id": null, "street": "s", "number": "1", "nOfRooms": "2", "renters": []}',
            b'{"id": "b", "street": "s", "number": 1, "nOfRooms": "2", "renters": []}',
        ],
    )
    def test_invalid_block_raises(self, raw):
        with pytest.raises(SerializationError) as exc_info:
            decode_block(raw)
        assert exc_info.value.kind == "block"

    def test_invalid_renter_raises(self):
        with pytest.raises(SerializationError):
            decode_renter(b'{"name": "A"}')

    def test_null_field_names_the_field(self):
        raw = b'{"id": "b", "street": null, "number": "1", "nOfRooms": "2", "renters": []}'
        with pytest.raises(SerializationError) as exc_info:
            decode_block(raw)
        assert "street" in exc_info.value.reason

    def test_non_string_renter_name(self):
        with pytest.raises(SerializationError):
            decode_renter(b'{"name": 7, "surname": "B", "movedIn": "2024-03-01T09:00:00+00:00"}')
