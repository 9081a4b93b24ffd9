"""
Ledger stores.

The registry persists everything through two synchronous primitives,
``read(key)`` and ``write(key, value)``. Backends:

- InMemoryLedgerStore: dict-backed, for tests and embedded use
- FileLedgerStore: one file per key with atomic writes
- CosmosLedgerStore: one document per key in an Azure Cosmos DB container
"""

from .base import LedgerStore
from .cosmos import CosmosLedgerConfig, CosmosLedgerStore
from .file import FileLedgerStore
from .memory import InMemoryLedgerStore

__all__ = [
    "LedgerStore",
    "InMemoryLedgerStore",
    "FileLedgerStore",
    "CosmosLedgerStore",
    "CosmosLedgerConfig",
]
