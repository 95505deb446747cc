from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Iterator, Mapping
from types import MappingProxyType
from typing import Any

from wallet_currency.domain.monetary.currency import Currency

logger = logging.getLogger(__name__)


class CurrencyRegistry:
    """Lazily builds and caches one `Currency` per configured code.

    The registry is an explicit object: build it once at startup from the currency configuration
    and pass it to whoever needs currencies. Instances are created on first lookup and reused
    afterwards; concurrent lookups of the same code never build two instances.

    Args:
        config: Map from currency code to its raw configuration record.
    """

    # region Init

    def __init__(self, config: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        # Raise: configuration must map codes to records
        if config is not None and not isinstance(config, Mapping):
            raise TypeError(f"Cannot call `CurrencyRegistry.__init__` because $config is not a Mapping (got type '{type(config).__name__}')")

        self._config: Mapping[str, Mapping[str, Any]] = MappingProxyType(copy.deepcopy(dict(config or {})))
        self._currencies: dict[str, Currency] = {}
        self._lock = threading.Lock()

    # endregion

    # region Main

    def get(self, code: str) -> Currency | None:
        """Return the Currency for $code, building it on first use.

        Returns:
            Currency, or None if $code is not configured.
        """
        currency = self._currencies.get(code)
        if currency is not None:
            return currency

        if code not in self._config:
            return None

        with self._lock:
            # Another thread may have built it while we waited for the lock
            currency = self._currencies.get(code)
            if currency is None:
                currency = Currency(code, self._config[code])
                self._currencies[code] = currency
                logger.debug(f"CurrencyRegistry built Currency '{code}'")
        return currency

    def require(self, code: str) -> Currency:
        """Return the Currency for $code.

        Raises:
            ValueError: If $code is not configured.
        """
        currency = self.get(code)
        # Raise: unknown code
        if currency is None:
            raise ValueError(f"Currency with code '{code}' not found in registry. Available currencies: {list(self._config.keys())}")
        return currency

    def currencies(self) -> dict[str, Currency]:
        """Build (if needed) and return all configured currencies by code, in configuration order."""
        return {code: self.require(code) for code in self._config}

    # endregion

    # region Properties

    @property
    def codes(self) -> list[str]:
        """Get the configured currency codes."""
        return list(self._config.keys())

    # endregion

    # region Magic

    def __contains__(self, code: object) -> bool:
        return code in self._config

    def __iter__(self) -> Iterator[str]:
        return iter(self._config)

    def __len__(self) -> int:
        return len(self._config)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(codes={self.codes}, built={len(self._currencies)})"

    # endregion
