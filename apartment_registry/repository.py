"""
Block repository.

Loads and saves whole Block records through a ledger store. There are
no partial updates: callers read a block, modify their local copy and
put the full record back.
"""

from __future__ import annotations

import logging

from .exceptions import BlockNotFoundError, LedgerKeyNotFoundError
from .ledger import LedgerStore
from .models import Block, decode_block, encode_record

logger = logging.getLogger(__name__)


class BlockRepository:
    """
    Reads and writes Block records keyed by block ID.

    Contract:
    - get: BlockNotFoundError if the key was never written,
      PersistenceError if the read fails, SerializationError if the
      record cannot be decoded
    - put: overwrites the record; PersistenceError on write failure
    """

    def __init__(self, store: LedgerStore):
        self.store = store

    def get(self, block_id: str) -> Block:
        """Load a block by ID."""
        try:
            raw = self.store.read(block_id)
        except LedgerKeyNotFoundError:
            raise BlockNotFoundError(block_id) from None
        return decode_block(raw)

    def put(self, block_id: str, block: Block) -> None:
        """Save the full block record under ``block_id``."""
        self.store.write(block_id, encode_record(block))
        logger.debug(f"Block {block_id} saved with {len(block.renters)} renters")

    def exists(self, block_id: str) -> bool:
        return self.store.exists(block_id)
