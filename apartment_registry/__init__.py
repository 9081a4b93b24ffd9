"""
Apartment Registry

Registry of apartment blocks and their renters, persisted through a
synchronous key-value ledger.

Provides:
- Deterministic, collision-free block IDs derived from street and number
- Block records stored whole under their ID
- An existence index under one reserved key, reloadable at any time
- Operations: create block, register/query renters, counts, empty-block search
- A dispatcher mapping named invocations with string arguments onto operations

Usage:

    >>> from apartment_registry import InMemoryLedgerStore, RegistryHost
    >>> host = RegistryHost(InMemoryLedgerStore())
    >>> host.init().success
    True
    >>> host.invoke("createBlock", ["Elm St", "12", "4"]).payload
    b'Successfully created block block:Elm%20St:12.'

Backend Selection:

    # Local files, one per ledger key
    from apartment_registry.ledger import FileLedgerStore

    # Azure Cosmos DB container
    from apartment_registry.ledger import CosmosLedgerConfig, CosmosLedgerStore
"""

from .config import LedgerBackend, RegistryConfig, create_ledger_store
from .dispatcher import InvocationDispatcher, InvocationResult
from .exceptions import (
    ArgumentCountError,
    BlockAlreadyExistsError,
    BlockNotFoundError,
    ConfigurationError,
    LedgerKeyNotFoundError,
    NoEmptyBlockFoundError,
    PersistenceError,
    RegistryError,
    RenterNotFoundError,
    SerializationError,
    UnknownOperationError,
    ValidationError,
)
from .host import RegistryHost
from .id_utils import BLOCKS_INDEX_KEY, derive_block_id, parse_block_id
from .index import ExistenceIndex
from .ledger import (
    CosmosLedgerConfig,
    CosmosLedgerStore,
    FileLedgerStore,
    InMemoryLedgerStore,
    LedgerStore,
)
from .models import Block, Renter
from .operations import ApartmentRegistry, EmptyBlockSearch, SkippedBlock
from .repository import BlockRepository

__all__ = [
    # Core
    "ApartmentRegistry",
    "BlockRepository",
    "ExistenceIndex",
    "EmptyBlockSearch",
    "SkippedBlock",
    # Model
    "Block",
    "Renter",
    "BLOCKS_INDEX_KEY",
    "derive_block_id",
    "parse_block_id",
    # Dispatch and hosting
    "InvocationDispatcher",
    "InvocationResult",
    "RegistryHost",
    "RegistryConfig",
    "LedgerBackend",
    "create_ledger_store",
    # Ledger stores
    "LedgerStore",
    "InMemoryLedgerStore",
    "FileLedgerStore",
    "CosmosLedgerStore",
    "CosmosLedgerConfig",
    # Exceptions
    "RegistryError",
    "ArgumentCountError",
    "UnknownOperationError",
    "BlockAlreadyExistsError",
    "BlockNotFoundError",
    "RenterNotFoundError",
    "NoEmptyBlockFoundError",
    "PersistenceError",
    "LedgerKeyNotFoundError",
    "SerializationError",
    "ValidationError",
    "ConfigurationError",
]

__version__ = "0.1.0"
