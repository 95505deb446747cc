import logging
from collections.abc import Iterable

import pandas as pd

from wallet_currency.domain.monetary.currency_registry import CurrencyRegistry
from wallet_currency.platform.ledger.ledger import LedgerEntry

logger = logging.getLogger(__name__)

COLUMNS = ["timestamp", "kind", "currency", "amount_minor", "amount", "subject", "subject_id", "income_type"]


def entries_to_dataframe(entries: Iterable[LedgerEntry], registry: CurrencyRegistry) -> pd.DataFrame:
    """Tabulate ledger $entries with amounts in both minor units and display form.

    Display amounts are produced by the entry's currency from $registry. Entries whose currency
    is not in $registry keep their minor-unit text as display amount.

    Returns:
        DataFrame with one row per entry and columns `COLUMNS`, in journal order.
    """
    rows = []
    for entry in entries:
        currency = registry.get(entry.currency_id)
        amount_minor = str(entry.amount_minor)
        if currency is None:
            logger.warning(f"Currency '{entry.currency_id}' of ledger entry is not in registry; reporting minor units")
            amount = amount_minor
        else:
            amount = currency.from_minor_unit(amount_minor)

        rows.append(
            {
                "timestamp": entry.timestamp,
                "kind": entry.kind.value,
                "currency": entry.currency_id,
                "amount_minor": entry.amount_minor,
                "amount": amount,
                "subject": entry.subject,
                "subject_id": entry.subject_id,
                "income_type": entry.income_type,
            }
        )

    return pd.DataFrame(rows, columns=COLUMNS)


def balances_to_dataframe(balances: dict[str, int], registry: CurrencyRegistry) -> pd.DataFrame:
    """Tabulate minor-unit $balances (by currency id) with display amounts and symbols."""
    rows = []
    for currency_id, amount_minor in balances.items():
        currency = registry.get(currency_id)
        rows.append(
            {
                "currency": currency_id,
                "symbol": currency.symbol if currency is not None else currency_id.upper(),
                "amount_minor": amount_minor,
                "amount": currency.from_minor_unit(str(amount_minor)) if currency is not None else str(amount_minor),
            }
        )
    return pd.DataFrame(rows, columns=["currency", "symbol", "amount_minor", "amount"])
