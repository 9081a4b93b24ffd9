"""
Shared test configuration and fixtures.

Provides in-memory and file-backed ledgers, a ledger that fails on
demand, and a fixed clock for deterministic move-in timestamps.
"""

import logging
import tempfile
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from apartment_registry.exceptions import PersistenceError
from apartment_registry.ledger import FileLedgerStore, InMemoryLedgerStore
from apartment_registry.operations import ApartmentRegistry


class FailingLedgerStore(InMemoryLedgerStore):
    """
    In-memory ledger that raises PersistenceError for selected keys.

    Used to simulate crashes between the two writes of a create and
    unreadable block records.
    """

    def __init__(self) -> None:
        super().__init__()
        self.fail_reads: set[str] = set()
        self.fail_writes: set[str] = set()
        self.writes: list[str] = []

    def read(self, key: str) -> bytes:
        if key in self.fail_reads:
            raise PersistenceError("read", key, OSError("simulated read failure"))
        return super().read(key)

    def write(self, key: str, value: bytes) -> None:
        if key in self.fail_writes:
            raise PersistenceError("write", key, OSError("simulated write failure"))
        self.writes.append(key)
        super().write(key, value)


class FixedClock:
    """Clock returning a fixed start time that advances one minute per call."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2024, 3, 1, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        now = self.current
        self.current = now + timedelta(minutes=1)
        return now


@pytest.fixture(autouse=True)
def reset_registry_logger():
    """Undo handlers and levels installed by configure_structured_logging."""
    logger = logging.getLogger("apartment_registry")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def store():
    """Create an empty in-memory ledger."""
    return InMemoryLedgerStore()


@pytest.fixture
def failing_store():
    """Create a ledger whose reads and writes can be made to fail."""
    return FailingLedgerStore()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def registry(store, clock):
    """Create a registry over the in-memory ledger."""
    return ApartmentRegistry(store, clock=clock)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def file_store(temp_dir):
    """Create a file-backed ledger in a temporary directory."""
    return FileLedgerStore(temp_dir / "ledger")
