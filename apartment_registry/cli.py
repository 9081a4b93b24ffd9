"""
Command-line entry point.

Usage:
    python -m apartment_registry --backend file --data-dir ./ledger createBlock "Elm St" 12 4
    python -m apartment_registry --backend file --data-dir ./ledger blocksCount
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from dataclasses import replace
from pathlib import Path

from .config import RegistryConfig
from .dispatcher import ALIASES, OPERATIONS
from .exceptions import RegistryError
from .host import RegistryHost
from .logging_utils import configure_structured_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apartment-registry",
        description="Register apartment blocks and their renters on a ledger.",
    )
    parser.add_argument("--config", type=Path, help="YAML settings file")
    parser.add_argument("--backend", choices=["memory", "file", "cosmos"], help="Ledger backend")
    parser.add_argument("--data-dir", type=Path, help="Directory for the file backend")
    parser.add_argument("--log-level", help="Logging level (default: from config)")
    parser.add_argument(
        "operation",
        help="Operation name: " + ", ".join(sorted([*OPERATIONS, *ALIASES])),
    )
    parser.add_argument("args", nargs="*", help="Operation arguments")
    return parser


def load_config(options: argparse.Namespace) -> RegistryConfig:
    config = RegistryConfig.from_yaml(options.config) if options.config else RegistryConfig.from_env()
    overrides = {}
    if options.backend:
        overrides["backend"] = options.backend
    if options.data_dir:
        overrides["data_dir"] = options.data_dir
    if options.log_level:
        overrides["log_level"] = options.log_level
    if overrides:
        config = replace(config, **overrides)
    return config


def main(argv: Sequence[str] | None = None) -> int:
    options = build_parser().parse_args(argv)

    try:
        config = load_config(options)
        configure_structured_logging(config.log_level, "apartment_registry", config.log_json)
        host = RegistryHost.from_config(config)
    except RegistryError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return 2

    result = host.init()
    if result.success:
        result = host.invoke(options.operation, options.args)
    if not result.success:
        print(f"error: {result.error}", file=sys.stderr)
        return 1

    print(result.payload.decode("utf-8"))
    return 0
