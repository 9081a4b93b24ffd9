"""ID derivation and parsing utilities for the registry.

Centralizes the ledger key format so callers never need to
construct or parse block IDs directly.

Block IDs: block:{quote(street)}:{quote(number)}
Index key: blocksIdCache

Both parts are percent-encoded with no safe characters, so ``:`` never
appears inside a part and different (street, number) pairs can never
produce the same ID.
"""

from __future__ import annotations

from urllib.parse import quote, unquote

from .exceptions import ValidationError

BLOCK_ID_PREFIX = "block"
BLOCK_ID_SEPARATOR = ":"

# Reserved ledger key holding the serialized existence index
BLOCKS_INDEX_KEY = "blocksIdCache"


def derive_block_id(street: str, number: str) -> str:
    """Derive the ledger key of a block from its location.

    Raises ValidationError if either part is empty.
    """
    if not street or not street.strip():
        raise ValidationError("street", "cannot be empty")
    if not number or not number.strip():
        raise ValidationError("number", "cannot be empty")
    return BLOCK_ID_SEPARATOR.join(
        (BLOCK_ID_PREFIX, quote(street, safe=""), quote(number, safe=""))
    )


def parse_block_id(block_id: str) -> tuple[str, str]:
    """Extract (street, number) from a block ID.

    Raises ValueError on malformed input.
    """
    parts = block_id.split(BLOCK_ID_SEPARATOR)
    if len(parts) != 3 or parts[0] != BLOCK_ID_PREFIX or not parts[1] or not parts[2]:
        raise ValueError(f"Malformed block ID: {block_id}")
    return unquote(parts[1]), unquote(parts[2])


def is_block_id(key: str) -> bool:
    """Check whether a ledger key has the shape of a block ID."""
    try:
        parse_block_id(key)
    except ValueError:
        return False
    return True
