"""
Existence index of registered blocks.

The index maps every known block ID to ``True`` and is persisted as a
single JSON object under a reserved ledger key. It is a projection of
that key, not an independent source of truth: ``load`` always replaces
the in-memory state with what the ledger holds.

Block records and index entries are written by two separate ledger
writes. Callers write the block first, so an interrupted create leaves
an orphan block that is not indexed. ``reconcile`` adopts such orphans.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

from .exceptions import LedgerKeyNotFoundError, SerializationError
from .id_utils import BLOCKS_INDEX_KEY, is_block_id
from .ledger import LedgerStore

logger = logging.getLogger(__name__)


def encode_index(block_ids: dict[str, bool]) -> bytes:
    """Encode the index mapping as UTF-8 JSON."""
    return json.dumps(block_ids, sort_keys=True).encode("utf-8")


def decode_index(raw: bytes) -> dict[str, bool]:
    """Decode an index record.

    Raises:
        SerializationError: If the record is not a JSON object of booleans
    """
    try:
        data = json.loads(raw.decode("utf-8")) if raw.strip() else {}
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise SerializationError("index", str(e)) from e
    if not isinstance(data, dict) or not all(isinstance(v, bool) for v in data.values()):
        raise SerializationError("index", "expected an object mapping block ids to booleans")
    return data


class ExistenceIndex:
    """Cache of which block IDs exist, persisted under one ledger key."""

    def __init__(self, store: LedgerStore, key: str = BLOCKS_INDEX_KEY):
        self.store = store
        self.key = key
        self._present: dict[str, bool] = {}

    def load(self) -> None:
        """Rebuild the index from the ledger, empty if never persisted."""
        try:
            raw = self.store.read(self.key)
        except LedgerKeyNotFoundError:
            self._present = {}
            return
        self._present = decode_index(raw)
        logger.debug(f"Loaded index with {len(self)} blocks")

    def is_persisted(self) -> bool:
        """Check whether the reserved key has ever been written."""
        return self.store.exists(self.key)

    def persist(self) -> None:
        """Write the full index to the ledger."""
        self.store.write(self.key, encode_index(self._present))

    def contains(self, block_id: str) -> bool:
        return self._present.get(block_id, False)

    def add(self, block_id: str) -> None:
        """Mark a block as present and persist before returning.

        If the write fails the entry is removed again, so the index never
        reports presence that is not durable.
        """
        if self.contains(block_id):
            return
        self._present[block_id] = True
        try:
            self.persist()
        except Exception:
            self._present.pop(block_id, None)
            raise

    def enumerate(self) -> list[str]:
        """Return every present block ID. Order carries no meaning."""
        return [block_id for block_id, present in self._present.items() if present]

    def reconcile(self) -> list[str]:
        """Adopt block records that exist in the ledger but are not indexed.

        Returns:
            The adopted block IDs
        """
        orphans = [
            key
            for key in self.store.keys()
            if key != self.key and is_block_id(key) and not self.contains(key)
        ]
        if not orphans:
            return []

        for block_id in orphans:
            logger.warning(f"Adopting orphan block {block_id} into index")
            self._present[block_id] = True
        try:
            self.persist()
        except Exception:
            for block_id in orphans:
                self._present.pop(block_id, None)
            raise
        logger.info(f"Reconciled index: adopted {len(orphans)} orphan blocks")
        return orphans

    def __contains__(self, block_id: object) -> bool:
        return isinstance(block_id, str) and self.contains(block_id)

    def __iter__(self) -> Iterator[str]:
        return iter(self.enumerate())

    def __len__(self) -> int:
        return len(self.enumerate())
