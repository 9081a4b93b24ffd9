"""
File-based ledger store.

Stores each key as one file under a base directory:
- File names are the SHA-256 of the key, so any key fits the name limit
- The first line of each file is the key as a JSON string, the rest is
  the stored value
- Writes are atomic using temp file + rename
- A failed write leaves the previous value untouched
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import tempfile
from pathlib import Path

from ..exceptions import LedgerKeyNotFoundError, PersistenceError
from .base import LedgerStore

logger = logging.getLogger(__name__)

RECORD_SUFFIX = ".rec"


def _key_to_filename(key: str) -> str:
    return hashlib.sha256(key.encode("utf-8")).hexdigest() + RECORD_SUFFIX


def _encode_header(key: str) -> bytes:
    # json.dumps escapes newlines, so the header is always a single line
    return json.dumps(key).encode("utf-8") + b"\n"


def _decode_header(line: bytes) -> str:
    """Parse a header line back into its key.

    Raises ValueError on malformed input.
    """
    try:
        key = json.loads(line.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise ValueError("Malformed record header") from None
    if not isinstance(key, str):
        raise ValueError("Malformed record header")
    return key


class FileLedgerStore(LedgerStore):
    """
    Ledger store backed by a local directory.

    Contract:
    - Inputs: key (str), value (bytes)
    - Side Effects: Filesystem writes to base_dir/{sha256(key)}.rec
    - Temp files start with ".tmp_" and are never reported as keys
    """

    def __init__(self, base_dir: Path | str):
        """Initialize with base directory for records.

        Args:
            base_dir: Directory holding one file per ledger key.
                      Created if it does not exist.
        """
        self.base_dir = Path(base_dir).expanduser()
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError("create_directory", str(self.base_dir), e) from e

    def path_for(self, key: str) -> Path:
        """Return the file that holds ``key``."""
        return self.base_dir / _key_to_filename(key)

    def read(self, key: str) -> bytes:
        path = self.path_for(key)
        try:
            content = path.read_bytes()
        except FileNotFoundError:
            raise LedgerKeyNotFoundError(key) from None
        except OSError as e:
            raise PersistenceError("read", key, e) from e

        header, _, value = content.partition(b"\n")
        try:
            stored_key = _decode_header(header)
        except ValueError as e:
            raise PersistenceError("read", key, e) from e
        if stored_key != key:
            raise PersistenceError("read", key, ValueError(f"record holds key {stored_key!r}"))

        logger.debug(f"Read {len(value)} bytes from {path}")
        return value

    def write(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        fd, temp_path = tempfile.mkstemp(dir=self.base_dir, prefix=".tmp_", suffix=RECORD_SUFFIX)
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(_encode_header(key))
                f.write(value)
                f.flush()
                os.fsync(f.fileno())

            # Atomic rename
            os.replace(temp_path, path)
        except OSError as e:
            try:
                os.remove(temp_path)
            except OSError:
                pass
            raise PersistenceError("write", key, e) from e
        logger.debug(f"Wrote {len(value)} bytes to {path}")

    def keys(self) -> list[str]:
        keys = []
        try:
            for entry in self.base_dir.iterdir():
                if not entry.is_file() or entry.name.startswith("."):
                    continue
                if not entry.name.endswith(RECORD_SUFFIX):
                    continue
                with open(entry, "rb") as f:
                    header = f.readline().rstrip(b"\n")
                try:
                    keys.append(_decode_header(header))
                except ValueError:
                    logger.warning(f"Ignoring record without a valid key header: {entry}")
        except OSError as e:
            raise PersistenceError("list_keys", str(self.base_dir), e) from e
        return keys
