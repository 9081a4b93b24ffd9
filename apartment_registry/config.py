"""
Registry configuration.

Configuration can be provided directly, via environment variables, or
from a YAML settings file:

```yaml
registry:
  backend: file
  data_dir: ~/.apartment_registry/ledger
  index_key: blocksIdCache
  reload_index: true
  reconcile_on_start: false
  log_level: INFO
  log_json: false
```

Environment Variables:
    APARTMENT_REGISTRY_BACKEND: memory, file or cosmos (default: memory)
    APARTMENT_REGISTRY_DATA_DIR: Directory for the file backend
    APARTMENT_REGISTRY_INDEX_KEY: Reserved key of the existence index
    APARTMENT_REGISTRY_RELOAD_INDEX: Reload the index on every invocation
    APARTMENT_REGISTRY_RECONCILE_ON_START: Adopt orphan blocks at startup
    APARTMENT_REGISTRY_LOG_LEVEL: Logging level name
    APARTMENT_REGISTRY_LOG_JSON: Emit JSON log lines
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError
from .id_utils import BLOCKS_INDEX_KEY
from .ledger import (
    CosmosLedgerConfig,
    CosmosLedgerStore,
    FileLedgerStore,
    InMemoryLedgerStore,
    LedgerStore,
)

ENV_PREFIX = "APARTMENT_REGISTRY_"
DEFAULT_DATA_DIR = Path.home() / ".apartment_registry" / "ledger"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class LedgerBackend(Enum):
    """Available ledger store backends."""

    MEMORY = "memory"
    FILE = "file"
    COSMOS = "cosmos"


def _parse_bool(setting: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigurationError(setting, f"expected a boolean, got {value!r}")


@dataclass
class RegistryConfig:
    """Configuration for a registry host.

    Attributes:
        backend: Which ledger store to use
        data_dir: Directory for the file backend
        index_key: Reserved ledger key of the existence index
        reload_index: Reload the index at the start of every operation
        reconcile_on_start: Adopt unindexed block records during init
        log_level: Logging level name
        log_json: Emit structured JSON log lines
    """

    backend: LedgerBackend = LedgerBackend.MEMORY
    data_dir: Path = DEFAULT_DATA_DIR
    index_key: str = BLOCKS_INDEX_KEY
    reload_index: bool = True
    reconcile_on_start: bool = False
    log_level: str = "INFO"
    log_json: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.backend, LedgerBackend):
            try:
                self.backend = LedgerBackend(str(self.backend).lower())
            except ValueError:
                choices = ", ".join(b.value for b in LedgerBackend)
                raise ConfigurationError(
                    "backend", f"unknown backend {self.backend!r}, expected one of {choices}"
                ) from None
        self.data_dir = Path(self.data_dir).expanduser()
        self.reload_index = _parse_bool("reload_index", self.reload_index)
        self.reconcile_on_start = _parse_bool("reconcile_on_start", self.reconcile_on_start)
        self.log_json = _parse_bool("log_json", self.log_json)
        self.log_level = str(self.log_level).upper()
        if self.log_level not in logging.getLevelNamesMapping():
            raise ConfigurationError("log_level", f"unknown logging level {self.log_level!r}")
        if not self.index_key:
            raise ConfigurationError("index_key", "cannot be empty")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RegistryConfig:
        """Create config from a mapping, rejecting unknown settings."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(unknown[0], "unknown setting")
        return cls(**data)

    @classmethod
    def from_env(cls) -> RegistryConfig:
        """Create config from APARTMENT_REGISTRY_* environment variables."""
        data: dict[str, Any] = {}
        for f in fields(cls):
            value = os.environ.get(ENV_PREFIX + f.name.upper())
            if value is not None:
                data[f.name] = value
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path | str) -> RegistryConfig:
        """Load config from the ``registry`` section of a YAML file."""
        path = Path(path).expanduser()
        try:
            with open(path, encoding="utf-8") as f:
                document = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError("config_file", f"cannot read {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError("config_file", f"invalid YAML in {path}: {e}") from e

        if not isinstance(document, dict):
            raise ConfigurationError("config_file", f"{path} must contain a mapping")
        section = document.get("registry", {})
        if not isinstance(section, dict):
            raise ConfigurationError("registry", "section must be a mapping")
        return cls.from_dict(section)


def create_ledger_store(config: RegistryConfig) -> LedgerStore:
    """Build the ledger store selected by the config."""
    if config.backend is LedgerBackend.FILE:
        return FileLedgerStore(config.data_dir)
    if config.backend is LedgerBackend.COSMOS:
        return CosmosLedgerStore.from_config(CosmosLedgerConfig.from_env())
    return InMemoryLedgerStore()
