"""
Custom exceptions for the apartment registry.

Every operation, store backend and the dispatcher raise these
exceptions so callers can handle failures uniformly. All of them are
terminal for the invocation that raised them; nothing is retried
internally.
"""


class RegistryError(Exception):
    """Base exception for all registry errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ArgumentCountError(RegistryError):
    """Raised when an operation is invoked with too few arguments."""

    def __init__(self, operation: str, required: int, supplied: int):
        super().__init__(
            f"not enough arguments for {operation}: {required} required, {supplied} supplied",
            {"operation": operation, "required": required, "supplied": supplied},
        )
        self.operation = operation
        self.required = required
        self.supplied = supplied


class UnknownOperationError(RegistryError):
    """Raised when the dispatcher has no operation under the given name."""

    def __init__(self, operation: str):
        super().__init__(f"No function {operation} implemented", {"operation": operation})
        self.operation = operation


class BlockAlreadyExistsError(RegistryError):
    """Raised when trying to create a block that already exists."""

    def __init__(self, block_id: str, recovered: bool = False):
        details: dict = {"block_id": block_id}
        if recovered:
            details["recovered"] = True
        super().__init__(f"Block {block_id} already exists", details)
        self.block_id = block_id
        self.recovered = recovered


class BlockNotFoundError(RegistryError):
    """Raised when a block is not registered or has no record."""

    def __init__(self, block_id: str):
        super().__init__(f"No block {block_id} registered", {"block_id": block_id})
        self.block_id = block_id


class RenterNotFoundError(RegistryError):
    """Raised when no renter with the given name lives in a block."""

    def __init__(self, name: str, block_id: str):
        super().__init__(
            f"Could not find renter {name} in block {block_id}",
            {"name": name, "block_id": block_id},
        )
        self.name = name
        self.block_id = block_id


class NoEmptyBlockFoundError(RegistryError):
    """Raised when every known block has at least one renter."""

    def __init__(self, skipped: list[str] | None = None):
        skipped = skipped or []
        details: dict = {}
        if skipped:
            details["skipped"] = skipped
        super().__init__("No blocks empty", details)
        self.skipped = skipped


class PersistenceError(RegistryError):
    """Raised when a ledger read or write fails."""

    def __init__(self, operation: str, key: str | None = None, cause: Exception | None = None):
        details = {"operation": operation}
        if key:
            details["key"] = key
        if cause:
            details["cause"] = str(cause)
        message = f"Ledger error during {operation}"
        if key:
            message += f": {key}"
        super().__init__(message, details)
        self.operation = operation
        self.key = key
        self.cause = cause


class LedgerKeyNotFoundError(RegistryError):
    """Raised by a ledger store when a key has never been written."""

    def __init__(self, key: str):
        super().__init__(f"Ledger key not found: {key}", {"key": key})
        self.key = key


class SerializationError(RegistryError):
    """Raised when a stored record cannot be encoded or decoded."""

    def __init__(self, kind: str, reason: str):
        super().__init__(
            f"Could not serialize {kind}: {reason}",
            {"kind": kind, "reason": reason},
        )
        self.kind = kind
        self.reason = reason


class ValidationError(RegistryError):
    """Raised when an input value is rejected."""

    def __init__(self, field: str, reason: str, value: str | None = None):
        details = {"field": field, "reason": reason}
        if value is not None:
            details["value"] = value
        super().__init__(f"Validation failed for {field}: {reason}", details)
        self.field = field
        self.reason = reason
        self.value = value


class ConfigurationError(RegistryError):
    """Raised when registry configuration is missing or invalid."""

    def __init__(self, setting: str, reason: str):
        super().__init__(
            f"Invalid configuration for {setting}: {reason}",
            {"setting": setting, "reason": reason},
        )
        self.setting = setting
        self.reason = reason
