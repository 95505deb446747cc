from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from types import MappingProxyType
from typing import Any

from wallet_currency.utils.numeric_tools import as_flag, as_non_negative_decimal, as_non_negative_int

logger = logging.getLogger(__name__)

DEFAULT_DECIMALS = 3
DEFAULT_SCALE = 6


def _freeze(value: Any) -> Any:
    """Return a read-only copy of $value when it is a mapping (recursively)."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    return value


@dataclass(frozen=True)
class CurrencyConfig:
    """Immutable configuration of one currency.

    Attributes:
        id (str): Currency code, unique within a registry.
        name (str): Human-readable name; defaults to $id.
        symbol (str): Display symbol; defaults to upper-cased $id.
        withdraw (bool): Whether withdrawal is permitted for this currency.
        decimals (int): Number of minor-unit digits (precision exponent).
        scale (int): Maximum fractional digits shown when converting back to display form.
        rate (Decimal): Exchange rate against the common reference unit; 0 means not exchangeable.
        types (Mapping): Read-only map from income-type name to its read-only record. Also holds
            the exchange permission keys ("from" + source code).
    """

    id: str
    name: str
    symbol: str
    withdraw: bool = False
    decimals: int = DEFAULT_DECIMALS
    scale: int = DEFAULT_SCALE
    rate: Decimal = Decimal("0")
    types: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_mapping(cls, code: str, options: Mapping[str, Any] | None = None) -> CurrencyConfig:
        """Build a configuration for $code from loosely typed $options.

        Every field is optional. Missing or unreadable values fall back to safe defaults, so this
        never raises for bad option values:

        - $decimals and $scale become non-negative integers (defaults 3 and 6).
        - $rate becomes a finite non-negative Decimal (default 0, i.e. not exchangeable).
        - $types is deep-copied into read-only mappings.

        Args:
            code: Currency code.
            options: Raw configuration record for the currency.

        Returns:
            CurrencyConfig: Sanitized immutable configuration.
        """
        options = dict(options or {})

        types = options.get("types") or {}
        if not isinstance(types, Mapping):
            logger.debug(f"Ignoring $types of currency '{code}' because it is not a mapping (got type '{type(types).__name__}')")
            types = {}

        return cls(
            id=code,
            name=str(options.get("name") or code),
            symbol=str(options.get("symbol") or code.upper()),
            withdraw=as_flag(options.get("withdraw", False)),
            decimals=as_non_negative_int(options.get("decimals"), DEFAULT_DECIMALS),
            scale=as_non_negative_int(options.get("scale"), DEFAULT_SCALE),
            rate=as_non_negative_decimal(options.get("rate")),
            types=_freeze(types),
        )

    def as_dict(self) -> dict[str, Any]:
        """Return a plain mutable copy of this configuration (e.g. for serialization)."""

        def thaw(value: Any) -> Any:
            if isinstance(value, Mapping):
                return {key: thaw(item) for key, item in value.items()}
            return value

        return {
            "id": self.id,
            "name": self.name,
            "symbol": self.symbol,
            "withdraw": self.withdraw,
            "decimals": self.decimals,
            "scale": self.scale,
            "rate": self.rate,
            "types": thaw(self.types),
        }
