"""
Registry operations.

The operation set of the apartment registry: create blocks, register
renters, and query the result. Each call runs to completion
synchronously against the ledger; the only shared state is the
existence index owned by the registry instance.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from .exceptions import (
    BlockAlreadyExistsError,
    BlockNotFoundError,
    NoEmptyBlockFoundError,
    RegistryError,
    RenterNotFoundError,
)
from .id_utils import BLOCKS_INDEX_KEY, derive_block_id
from .index import ExistenceIndex
from .ledger import LedgerStore
from .logging_utils import RegistryLoggerAdapter, get_registry_logger
from .models import Block, Renter
from .repository import BlockRepository

logger = get_registry_logger("operations")


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class SkippedBlock:
    """A block that could not be read during a scan."""

    block_id: str
    reason: str


@dataclass
class EmptyBlockSearch:
    """Result of ``find_empty_block``.

    Attributes:
        block: The first empty block found
        skipped: Blocks that failed to load before the match
    """

    block: Block
    skipped: list[SkippedBlock] = field(default_factory=list)


class ApartmentRegistry:
    """
    Operation set over a block repository and its existence index.

    With ``reload_index`` enabled (the default) every operation starts by
    reloading the index from the ledger, so several registry instances
    sharing one ledger never act on a stale view of which blocks exist.
    """

    def __init__(
        self,
        store: LedgerStore,
        *,
        index_key: str = BLOCKS_INDEX_KEY,
        reload_index: bool = True,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize the registry.

        Args:
            store: Ledger holding block records and the index
            index_key: Reserved key of the existence index
            reload_index: Reload the index at the start of every operation
            clock: Source of renter move-in timestamps
        """
        self.store = store
        self.repository = BlockRepository(store)
        self.index = ExistenceIndex(store, index_key)
        self.reload_index = reload_index
        self.clock = clock

    def _refresh(self) -> None:
        if self.reload_index:
            self.index.load()

    def _require_indexed(self, street: str, number: str) -> str:
        block_id = derive_block_id(street, number)
        if not self.index.contains(block_id):
            raise BlockNotFoundError(block_id)
        return block_id

    def create_block(self, street: str, number: str, n_of_rooms: str) -> Block:
        """Register a new block with no renters.

        The block record is written before the index entry. If a record
        already exists without an index entry, it is adopted into the
        index and left untouched.

        Raises:
            BlockAlreadyExistsError: If the block is already registered
            PersistenceError: If either ledger write fails
        """
        self._refresh()
        block_id = derive_block_id(street, number)
        log = RegistryLoggerAdapter(logger, {"block_id": block_id, "operation": "createBlock"})

        if self.index.contains(block_id):
            raise BlockAlreadyExistsError(block_id)

        if self.repository.exists(block_id):
            log.warning(f"Block {block_id} has a record but no index entry, adopting it")
            self.index.add(block_id)
            raise BlockAlreadyExistsError(block_id, recovered=True)

        block = Block(id=block_id, street=street, number=number, n_of_rooms=n_of_rooms)
        self.repository.put(block_id, block)
        self.index.add(block_id)

        log.info(f"Created block {block_id}")
        return block

    def register_renter(self, street: str, number: str, name: str, surname: str) -> int:
        """Append a renter to a block.

        Returns:
            The block's renter count after registration

        Raises:
            BlockNotFoundError: If the block is not registered
            PersistenceError: If the block cannot be read or written
        """
        self._refresh()
        block_id = self._require_indexed(street, number)

        block = self.repository.get(block_id)
        count = block.add_renter(Renter(name=name, surname=surname, moved_in=self.clock()))
        self.repository.put(block_id, block)

        RegistryLoggerAdapter(
            logger, {"block_id": block_id, "operation": "registerRenter"}
        ).info(f"Registered renter {name} {surname} in {block_id} ({count} renters)")
        return count

    def query_renter(self, street: str, number: str, name: str) -> Renter:
        """Look up a renter by name.

        When several renters share the name, the earliest registered
        one is returned.

        Raises:
            BlockNotFoundError: If the block is not registered
            RenterNotFoundError: If no renter has that name
        """
        self._refresh()
        block_id = self._require_indexed(street, number)

        renter = self.repository.get(block_id).find_renter(name)
        if renter is None:
            raise RenterNotFoundError(name, block_id)
        return renter

    def blocks_count(self) -> int:
        """Return how many blocks are registered."""
        self._refresh()
        return len(self.index.enumerate())

    def renters_count(self, street: str, number: str) -> tuple[str, int]:
        """Return the block ID and how many renters it has.

        Reads the block record directly, so a record missing from the
        index is still counted.

        Raises:
            BlockNotFoundError: If the block has no record
            PersistenceError: If the block cannot be read
        """
        block_id = derive_block_id(street, number)
        return block_id, len(self.repository.get(block_id).renters)

    def find_empty_block(self) -> EmptyBlockSearch:
        """Find a block without renters.

        Blocks that fail to load are skipped and reported rather than
        ending the scan.

        Raises:
            NoEmptyBlockFoundError: If every readable block has renters
        """
        self._refresh()
        skipped: list[SkippedBlock] = []

        for block_id in self.index.enumerate():
            try:
                block = self.repository.get(block_id)
            except RegistryError as e:
                logger.warning(
                    f"Skipping block {block_id}: {e.message}",
                    extra={"block_id": block_id, "operation": "findEmptyBlock"},
                )
                skipped.append(SkippedBlock(block_id=block_id, reason=e.message))
                continue
            if block.is_empty:
                return EmptyBlockSearch(block=block, skipped=skipped)

        raise NoEmptyBlockFoundError([s.block_id for s in skipped])
