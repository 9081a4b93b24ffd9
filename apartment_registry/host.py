"""
Registry host.

Wires a ledger store, the operation set and the dispatcher together and
exposes the two lifecycle entry points a hosting runtime calls:
``init`` once per process start and ``invoke`` once per request.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .config import RegistryConfig, create_ledger_store
from .dispatcher import InvocationDispatcher, InvocationResult
from .exceptions import RegistryError
from .ledger import LedgerStore
from .operations import ApartmentRegistry

logger = logging.getLogger(__name__)


class RegistryHost:
    """Process-level owner of one registry."""

    def __init__(self, store: LedgerStore, config: RegistryConfig | None = None):
        self.config = config or RegistryConfig()
        self.store = store
        self.registry = ApartmentRegistry(
            store,
            index_key=self.config.index_key,
            reload_index=self.config.reload_index,
        )
        self.dispatcher = InvocationDispatcher(self.registry)

    @classmethod
    def from_config(cls, config: RegistryConfig) -> RegistryHost:
        return cls(create_ledger_store(config), config)

    def init(self) -> InvocationResult:
        """Load the existence index for a new process lifetime.

        Writes an empty index on first startup and, when configured,
        adopts block records that an interrupted create left unindexed.
        """
        index = self.registry.index
        try:
            if not index.is_persisted():
                index.persist()
                logger.info(f"Initialized empty index under {index.key}")
            index.load()

            if self.config.reconcile_on_start:
                adopted = index.reconcile()
                if adopted:
                    logger.warning(f"Adopted {len(adopted)} orphan blocks during init")
        except RegistryError as e:
            logger.error(f"Registry init failed: {e.message}")
            return InvocationResult.failed(e)

        logger.info(f"Registry ready with {len(index)} blocks")
        return InvocationResult.ok(b"Successfully initialized registry.")

    def invoke(self, operation: str, args: Sequence[str]) -> InvocationResult:
        return self.dispatcher.invoke(operation, args)
