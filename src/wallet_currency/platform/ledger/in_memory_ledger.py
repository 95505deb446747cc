from __future__ import annotations

import logging
import threading
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from decimal import ROUND_DOWN, Decimal, localcontext

from wallet_currency.domain.monetary.currency import Currency
from wallet_currency.domain.monetary.errors import NotExchangeableError
from wallet_currency.platform.ledger.ledger import EntryKind, Ledger, LedgerEntry
from wallet_currency.utils.numeric_tools import as_decimal, exact_precision

logger = logging.getLogger(__name__)


class InMemoryLedger(Ledger):
    """Keeps one wallet's balances per currency in memory.

    We store:
    - Balance per currency id, as an integer number of minor units
    - Journal of `LedgerEntry` records in recording order

    All state changes happen under one lock, so each deposit, outlay and exchange is atomic.
    """

    # region Init

    def __init__(self, *, id: str = "wallet", initial_balances: Mapping[str, int] | None = None) -> None:
        self._id = id
        self._balances_by_currency: dict[str, int] = dict(initial_balances or {})
        self._entries: list[LedgerEntry] = []
        self._lock = threading.RLock()

    # endregion

    # region Protocol Ledger

    def record_deposit(self, currency: Currency, amount_minor: int, type: str, subject: str, subject_id: str) -> bool:
        """Implements: Ledger.record_deposit

        Credit $amount_minor to the balance of $currency.

        Raises:
            ValueError: If $amount_minor is not positive.
        """
        # Raise: deposits must be strictly positive
        if amount_minor <= 0:
            raise ValueError(f"Cannot call `record_deposit` because $amount_minor ({amount_minor}) is not positive")

        with self._lock:
            self._change_balance(currency.id, amount_minor)
            self._entries.append(LedgerEntry(self._now(), EntryKind.DEPOSIT, currency.id, amount_minor, subject, subject_id, type))

        logger.info(f"Ledger '{self._id}' recorded deposit of {amount_minor} minor units of {currency.id} as '{type}'")
        return True

    def record_outlay(self, currency: Currency, amount_minor: int, subject: str, subject_id: str) -> bool:
        """Implements: Ledger.record_outlay

        Debit $amount_minor from the balance of $currency.

        Returns:
            False (and records nothing) when the balance is insufficient.

        Raises:
            ValueError: If $amount_minor is not positive.
        """
        # Raise: outlays must be strictly positive
        if amount_minor <= 0:
            raise ValueError(f"Cannot call `record_outlay` because $amount_minor ({amount_minor}) is not positive")

        with self._lock:
            if self.get_balance(currency) < amount_minor:
                logger.warning(f"Ledger '{self._id}' refused outlay of {amount_minor} minor units of {currency.id}: insufficient balance")
                return False

            self._change_balance(currency.id, -amount_minor)
            self._entries.append(LedgerEntry(self._now(), EntryKind.OUTLAY, currency.id, -amount_minor, subject, subject_id))

        logger.info(f"Ledger '{self._id}' recorded outlay of {amount_minor} minor units of {currency.id} on '{subject}'")
        return True

    def record_exchange(self, from_currency: Currency, to_currency: Currency, amount_minor: int, discount: float = 1.0) -> str | None:
        """Implements: Ledger.record_exchange

        Debit $amount_minor of $from_currency and credit the exchanged amount of $to_currency.

        The credited amount is the base exchange amount multiplied by $discount, truncated toward
        zero.

        Returns:
            Credited minor units as integer string, or None (recording nothing) when the balance is
            insufficient or the credited amount truncates to zero.

        Raises:
            NotExchangeableError: If the currencies cannot be exchanged.
            ValueError: If $amount_minor or $discount is not positive.
        """
        # Raise: exchanged amounts must be strictly positive
        if amount_minor <= 0:
            raise ValueError(f"Cannot call `record_exchange` because $amount_minor ({amount_minor}) is not positive")

        factor = as_decimal(discount)
        # Raise: discount must be a positive multiplier
        if not factor.is_finite() or factor <= 0:
            raise ValueError(f"Cannot call `record_exchange` because $discount ({discount}) is not positive")

        base_amount = from_currency.exchange_minor_amount(to_currency, amount_minor)
        # Raise: rates or permission are missing
        if base_amount is None:
            raise NotExchangeableError(from_currency.id, to_currency.id)

        credited = self._apply_discount(int(base_amount), factor)
        if credited <= 0:
            logger.warning(f"Ledger '{self._id}' refused exchange of {amount_minor} minor units of {from_currency.id}: credit in {to_currency.id} truncates to zero")
            return None

        with self._lock:
            if self.get_balance(from_currency) < amount_minor:
                logger.warning(f"Ledger '{self._id}' refused exchange of {amount_minor} minor units of {from_currency.id}: insufficient balance")
                return None

            now = self._now()
            self._change_balance(from_currency.id, -amount_minor)
            self._change_balance(to_currency.id, credited)
            self._entries.append(LedgerEntry(now, EntryKind.EXCHANGE_OUT, from_currency.id, -amount_minor, to_currency.id, from_currency.id))
            self._entries.append(LedgerEntry(now, EntryKind.EXCHANGE_IN, to_currency.id, credited, from_currency.id, from_currency.id))

        logger.info(f"Ledger '{self._id}' exchanged {amount_minor} minor units of {from_currency.id} into {credited} minor units of {to_currency.id}")
        return str(credited)

    # endregion

    # region Queries

    @property
    def id(self) -> str:
        """Get the ledger identifier."""
        return self._id

    def get_balance(self, currency: Currency) -> int:
        """Return the balance of $currency in minor units (0 if never touched)."""
        return self._balances_by_currency.get(currency.id, 0)

    def get_all_balances(self) -> Mapping[str, int]:
        """Return balances in minor units by currency id, sorted by id."""
        with self._lock:
            return {currency_id: self._balances_by_currency[currency_id] for currency_id in sorted(self._balances_by_currency)}

    def list_entries(self) -> Sequence[LedgerEntry]:
        """Return a copy of the journal in recording order."""
        with self._lock:
            return list(self._entries)

    # endregion

    # region Utilities

    def _change_balance(self, currency_id: str, delta: int) -> None:
        self._balances_by_currency[currency_id] = self._balances_by_currency.get(currency_id, 0) + delta

    @staticmethod
    def _apply_discount(amount_minor: int, factor: Decimal) -> int:
        if factor == 1:
            return amount_minor
        amount = Decimal(amount_minor)
        with localcontext() as ctx:
            ctx.prec = exact_precision(amount, factor)
            ctx.rounding = ROUND_DOWN
            return int((amount * factor).to_integral_value(rounding=ROUND_DOWN))

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    # endregion

    # region Magic

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id}, balances={self._balances_by_currency}, entries={len(self._entries)})"

    # endregion
