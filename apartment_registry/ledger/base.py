"""
Abstract ledger store interface.

Defines the contract that every ledger backend must implement. The
registry only ever needs two synchronous primitives, read and write,
over an opaque key space; ``keys`` exists for index recovery scans.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..exceptions import LedgerKeyNotFoundError


class LedgerStore(ABC):
    """Synchronous key-value ledger.

    Implementations must treat every write as fully durable before
    returning. Ordering and replication across concurrent writers are
    properties of the underlying platform, not of this interface.
    """

    @abstractmethod
    def read(self, key: str) -> bytes:
        """Read the value stored under a key.

        Raises:
            LedgerKeyNotFoundError: If the key has never been written
            PersistenceError: If the read fails for any other reason
        """

    @abstractmethod
    def write(self, key: str, value: bytes) -> None:
        """Store a value under a key, overwriting any previous value.

        Raises:
            PersistenceError: If the write fails
        """

    @abstractmethod
    def keys(self) -> list[str]:
        """List every key that has been written.

        Raises:
            PersistenceError: If the key space cannot be enumerated
        """

    def exists(self, key: str) -> bool:
        """Check whether a key has been written."""
        try:
            self.read(key)
        except LedgerKeyNotFoundError:
            return False
        return True
