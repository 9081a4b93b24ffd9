"""
Invocation dispatcher.

Maps an operation name and an ordered list of string arguments onto one
registry operation and encodes its outcome as bytes. Arity is checked
before anything touches the ledger.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from .exceptions import ArgumentCountError, RegistryError, UnknownOperationError
from .id_utils import derive_block_id
from .models import encode_record
from .operations import ApartmentRegistry

logger = logging.getLogger(__name__)


@dataclass
class InvocationResult:
    """Outcome of one invocation, successful or not."""

    success: bool
    payload: bytes = b""
    error: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        result: dict[str, Any] = {"success": self.success}
        if self.success:
            result["payload"] = self.payload.decode("utf-8")
        if self.error:
            result["error"] = self.error
            result["details"] = self.details
        elif self.details:
            result["details"] = self.details
        return result

    @classmethod
    def ok(cls, payload: bytes, details: dict[str, Any] | None = None) -> InvocationResult:
        return cls(success=True, payload=payload, details=details or {})

    @classmethod
    def failed(cls, error: RegistryError) -> InvocationResult:
        return cls(success=False, error=error.message, details=error.details)


@dataclass(frozen=True)
class OperationSpec:
    """A dispatchable operation: its arity and how to run it."""

    name: str
    arity: int
    handler: Callable[[ApartmentRegistry, list[str]], InvocationResult]


def _create_block(registry: ApartmentRegistry, args: list[str]) -> InvocationResult:
    block = registry.create_block(args[0], args[1], args[2])
    return InvocationResult.ok(f"Successfully created block {block.id}.".encode())


def _register_renter(registry: ApartmentRegistry, args: list[str]) -> InvocationResult:
    count = registry.register_renter(args[0], args[1], args[2], args[3])
    block_id = derive_block_id(args[0], args[1])
    return InvocationResult.ok(f"Block {block_id} has now {count} renters".encode())


def _query_renter(registry: ApartmentRegistry, args: list[str]) -> InvocationResult:
    return InvocationResult.ok(encode_record(registry.query_renter(args[0], args[1], args[2])))


def _blocks_count(registry: ApartmentRegistry, args: list[str]) -> InvocationResult:
    return InvocationResult.ok(f"{registry.blocks_count()} blocks found".encode())


def _renters_count(registry: ApartmentRegistry, args: list[str]) -> InvocationResult:
    block_id, count = registry.renters_count(args[0], args[1])
    return InvocationResult.ok(f"{count} renters in {block_id} found".encode())


def _find_empty_block(registry: ApartmentRegistry, args: list[str]) -> InvocationResult:
    search = registry.find_empty_block()
    details = {}
    if search.skipped:
        details["skipped"] = [s.block_id for s in search.skipped]
    return InvocationResult.ok(encode_record(search.block), details)


OPERATIONS: dict[str, OperationSpec] = {
    spec.name: spec
    for spec in (
        OperationSpec("createBlock", 3, _create_block),
        OperationSpec("registerRenter", 4, _register_renter),
        OperationSpec("queryRenter", 3, _query_renter),
        OperationSpec("blocksCount", 0, _blocks_count),
        OperationSpec("rentersCount", 2, _renters_count),
        OperationSpec("findEmptyBlock", 0, _find_empty_block),
    )
}

# Older clients still call createBlock by its original name
ALIASES = {"newBlock": "createBlock"}


class InvocationDispatcher:
    """Stateless dispatch of named invocations onto a registry."""

    def __init__(self, registry: ApartmentRegistry):
        self.registry = registry

    @property
    def operation_names(self) -> list[str]:
        return sorted([*OPERATIONS, *ALIASES])

    def resolve(self, operation: str, args: Sequence[str]) -> OperationSpec:
        """Find an operation and validate the argument count.

        Raises:
            UnknownOperationError: If no operation has that name
            ArgumentCountError: If fewer arguments than required were given
        """
        spec = OPERATIONS.get(ALIASES.get(operation, operation))
        if spec is None:
            raise UnknownOperationError(operation)
        if len(args) < spec.arity:
            raise ArgumentCountError(spec.name, spec.arity, len(args))
        return spec

    def dispatch(self, operation: str, args: Sequence[str]) -> InvocationResult:
        """Run an operation and return its successful result, raising on failure."""
        spec = self.resolve(operation, args)
        logger.debug(f"Dispatching {spec.name} with {len(args)} arguments")
        return spec.handler(self.registry, list(args))

    def invoke(self, operation: str, args: Sequence[str]) -> InvocationResult:
        """Run an operation and wrap any registry error into the result."""
        try:
            return self.dispatch(operation, args)
        except RegistryError as e:
            logger.info(f"{operation} failed: {e.message}", extra={"operation": operation})
            return InvocationResult.failed(e)

