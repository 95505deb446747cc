"""Loading of the currency configuration.

The location of the configuration file is read from the `WALLET_CURRENCY_CONFIG` environment
variable (a `.env` file in the working directory is honored). The file is JSON and holds the
currency records either under a top-level "currency" key or at the top level:

    {
        "currency": {
            "coin": {"name": "Coin", "decimals": 2, "rate": "100", "types": {...}},
            "point": {"decimals": 0, "rate": "1", "types": {"fromcoin": {}}}
        }
    }
"""
from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from wallet_currency.domain.monetary.currency_registry import CurrencyRegistry

logger = logging.getLogger(__name__)

load_dotenv()

CURRENCY_CONFIG_ENV = "WALLET_CURRENCY_CONFIG"
CURRENCY_SECTION = "currency"


def get_config_path() -> Path | None:
    """Return the configuration path named by `WALLET_CURRENCY_CONFIG`, or None if unset."""
    value = os.environ.get(CURRENCY_CONFIG_ENV)
    return Path(value) if value else None


def load_currency_config(path: str | Path | None = None) -> dict[str, dict[str, Any]]:
    """Read the currency configuration from $path (default: `WALLET_CURRENCY_CONFIG`).

    Returns:
        Map from currency code to its raw record. Empty when no path is configured.

    Raises:
        FileNotFoundError: If $path does not exist.
        ValueError: If the file is not valid JSON or does not describe currencies as a mapping.
    """
    path = Path(path) if path is not None else get_config_path()
    if path is None:
        logger.debug(f"No currency configuration: ${CURRENCY_CONFIG_ENV} is not set")
        return {}

    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Cannot call `load_currency_config` because file at $path ('{path}') is not valid JSON") from e

    # Raise: the document must be a JSON object
    if not isinstance(document, Mapping):
        raise ValueError(f"Cannot call `load_currency_config` because file at $path ('{path}') does not hold a JSON object")

    section = document.get(CURRENCY_SECTION, document)
    # Raise: the currency section must be an object of records
    if not isinstance(section, Mapping) or not all(isinstance(record, Mapping) for record in section.values()):
        raise ValueError(f"Cannot call `load_currency_config` because '{CURRENCY_SECTION}' in '{path}' is not a mapping of currency records")

    logger.info(f"Loaded {len(section)} currency definition(s) from '{path}'")
    return {str(code): dict(record) for code, record in section.items()}


def create_registry(path: str | Path | None = None) -> CurrencyRegistry:
    """Build a `CurrencyRegistry` from the configuration at $path (default: `WALLET_CURRENCY_CONFIG`)."""
    return CurrencyRegistry(load_currency_config(path))
