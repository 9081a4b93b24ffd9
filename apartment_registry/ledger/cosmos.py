"""
Azure Cosmos DB ledger store.

Each ledger key is one document in a container partitioned by ``/id``:

    {"id": "<key>", "value": "<base64 of the stored bytes>"}

Consistency and replication are whatever the Cosmos account provides;
from the registry's point of view single-document upserts are
linearizable.
"""

from __future__ import annotations

import base64
import binascii
import logging
import os
from dataclasses import dataclass
from typing import Any

from azure.cosmos import ContainerProxy, CosmosClient, PartitionKey
from azure.cosmos.exceptions import CosmosHttpResponseError, CosmosResourceNotFoundError

from ..exceptions import ConfigurationError, LedgerKeyNotFoundError, PersistenceError
from .base import LedgerStore

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = "apartment_registry"
DEFAULT_CONTAINER = "ledger"


@dataclass
class CosmosLedgerConfig:
    """Configuration for the Cosmos DB ledger.

    Attributes:
        endpoint: Cosmos DB account endpoint URL
        key: Cosmos DB account key
        database_name: Database holding the ledger container
        container_name: Container holding one document per key
    """

    endpoint: str
    key: str
    database_name: str = DEFAULT_DATABASE
    container_name: str = DEFAULT_CONTAINER

    @classmethod
    def from_env(cls) -> CosmosLedgerConfig:
        """Create config from environment variables.

        Expected environment variables:
        - APARTMENT_REGISTRY_COSMOS_ENDPOINT: Cosmos DB account endpoint
        - APARTMENT_REGISTRY_COSMOS_KEY: Cosmos DB account key
        - APARTMENT_REGISTRY_COSMOS_DATABASE: Database name (optional)
        - APARTMENT_REGISTRY_COSMOS_CONTAINER: Container name (optional)

        Raises:
            ConfigurationError: If endpoint or key are missing
        """
        endpoint = os.environ.get("APARTMENT_REGISTRY_COSMOS_ENDPOINT")
        key = os.environ.get("APARTMENT_REGISTRY_COSMOS_KEY")

        if not endpoint:
            raise ConfigurationError("cosmos_endpoint", "APARTMENT_REGISTRY_COSMOS_ENDPOINT not set")
        if not key:
            raise ConfigurationError("cosmos_key", "APARTMENT_REGISTRY_COSMOS_KEY not set")

        return cls(
            endpoint=endpoint,
            key=key,
            database_name=os.environ.get("APARTMENT_REGISTRY_COSMOS_DATABASE", DEFAULT_DATABASE),
            container_name=os.environ.get("APARTMENT_REGISTRY_COSMOS_CONTAINER", DEFAULT_CONTAINER),
        )


class CosmosLedgerStore(LedgerStore):
    """Ledger store backed by a Cosmos DB container."""

    def __init__(self, container: ContainerProxy):
        """
        Args:
            container: Container proxy, usually from ``from_config``
        """
        self._container = container

    @classmethod
    def from_config(cls, config: CosmosLedgerConfig) -> CosmosLedgerStore:
        """Connect and ensure the database and container exist."""
        try:
            client = CosmosClient(config.endpoint, credential=config.key)
            database = client.create_database_if_not_exists(id=config.database_name)
            container = database.create_container_if_not_exists(
                id=config.container_name,
                partition_key=PartitionKey(path="/id"),
            )
        except CosmosHttpResponseError as e:
            raise PersistenceError("connect", config.endpoint, e) from e
        logger.info(f"Connected to Cosmos ledger {config.database_name}/{config.container_name}")
        return cls(container)

    def read(self, key: str) -> bytes:
        try:
            item: dict[str, Any] = self._container.read_item(item=key, partition_key=key)
        except CosmosResourceNotFoundError:
            raise LedgerKeyNotFoundError(key) from None
        except CosmosHttpResponseError as e:
            raise PersistenceError("read", key, e) from e

        try:
            value = base64.b64decode(item["value"], validate=True)
        except (KeyError, TypeError, binascii.Error) as e:
            raise PersistenceError("read", key, e) from e
        logger.debug(f"Read {len(value)} bytes from {key}")
        return value

    def write(self, key: str, value: bytes) -> None:
        body = {"id": key, "value": base64.b64encode(value).decode("ascii")}
        try:
            self._container.upsert_item(body=body)
        except CosmosHttpResponseError as e:
            raise PersistenceError("write", key, e) from e
        logger.debug(f"Wrote {len(value)} bytes to {key}")

    def keys(self) -> list[str]:
        try:
            return [
                item["id"]
                for item in self._container.query_items(
                    query="SELECT c.id FROM c",
                    enable_cross_partition_query=True,
                )
            ]
        except CosmosHttpResponseError as e:
            raise PersistenceError("list_keys", cause=e) from e
