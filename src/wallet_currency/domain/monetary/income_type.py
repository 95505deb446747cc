from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from wallet_currency.utils.numeric_tools import as_flag


@dataclass(frozen=True)
class IncomeType:
    """Validated income type (deposit category) of a currency.

    Attributes:
        key: Name under which the type is declared in the currency's $types.
        name: Human-readable name of the type.
        subject: Ledger subject code deposits of this type are booked under, or None when missing.
        withdraw: Whether money deposited under this type may be withdrawn (defaults to False).
        options: Full read-only record as configured, with `withdraw` always present.
    """

    key: str
    name: str
    subject: str | None
    withdraw: bool
    options: Mapping[str, Any]

    @classmethod
    def from_record(cls, key: str, record: Mapping[str, Any]) -> IncomeType:
        """Build an IncomeType from configured $record, injecting `withdraw=False` when omitted."""
        merged = {"withdraw": False, **record}
        subject = merged.get("subject")
        return cls(
            key=key,
            name=str(merged["name"]),
            subject=str(subject) if subject else None,
            withdraw=as_flag(merged["withdraw"]),
            options=MappingProxyType(merged),
        )

    def __getitem__(self, item: str) -> Any:
        return self.options[item]

    def get(self, item: str, default: Any = None) -> Any:
        return self.options.get(item, default)
