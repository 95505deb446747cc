from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import NamedTuple, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from wallet_currency.domain.monetary.currency import Currency


class EntryKind(Enum):
    """Kinds of ledger entries."""

    DEPOSIT = "DEPOSIT"
    OUTLAY = "OUTLAY"
    EXCHANGE_OUT = "EXCHANGE_OUT"
    EXCHANGE_IN = "EXCHANGE_IN"


class LedgerEntry(NamedTuple):
    """Immutable record of one balance movement, in minor units.

    Attributes:
        timestamp: When the entry was recorded.
        kind: What caused the movement.
        currency_id: Code of the currency whose balance moved.
        amount_minor: Signed amount in minor units (credits positive, debits negative).
        subject: Ledger subject code (income-type subject, outlay subject, or counter currency for exchanges).
        subject_id: Identifier of the business object behind the movement.
        income_type: Income type for deposits, otherwise None.
    """

    timestamp: datetime
    kind: EntryKind
    currency_id: str
    amount_minor: int
    subject: str
    subject_id: str
    income_type: str | None = None


class Ledger(Protocol):
    """Protocol for the ledger that stores balances and records money movement.

    `Currency` validates and converts amounts before calling these methods, so every amount is a
    non-negative integer number of minor units. The ledger owns atomicity, balance checks,
    withdrawal permission and the discount arithmetic of exchanges.
    """

    # region Interface

    def record_deposit(self, currency: Currency, amount_minor: int, type: str, subject: str, subject_id: str) -> bool:
        """Credit $amount_minor of $currency under income $type and ledger $subject."""
        ...

    def record_outlay(self, currency: Currency, amount_minor: int, subject: str, subject_id: str) -> bool:
        """Debit $amount_minor of $currency for ledger $subject."""
        ...

    def record_exchange(self, from_currency: Currency, to_currency: Currency, amount_minor: int, discount: float = 1.0) -> str | None:
        """Debit $amount_minor of $from_currency and credit the exchanged amount of $to_currency.

        Returns:
            Credited minor units of $to_currency as integer string, or None on failure.
        """
        ...

    # endregion
