"""In-memory ledger store for tests and single-process use."""

from __future__ import annotations

import logging
from threading import Lock

from ..exceptions import LedgerKeyNotFoundError
from .base import LedgerStore

logger = logging.getLogger(__name__)


class InMemoryLedgerStore(LedgerStore):
    """Dict-backed ledger store.

    Thread-safe. State lives only as long as the instance, so two
    registries sharing one instance behave like two processes sharing a
    ledger.
    """

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})
        self._lock = Lock()

    def read(self, key: str) -> bytes:
        with self._lock:
            try:
                value = self._data[key]
            except KeyError:
                raise LedgerKeyNotFoundError(key) from None
        logger.debug(f"Read {len(value)} bytes from {key}")
        return value

    def write(self, key: str, value: bytes) -> None:
        with self._lock:
            self._data[key] = bytes(value)
        logger.debug(f"Wrote {len(value)} bytes to {key}")

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._data)

    def __len__(self) -> int:
        return len(self._data)
