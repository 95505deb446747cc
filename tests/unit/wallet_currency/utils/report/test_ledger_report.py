from __future__ import annotations

from wallet_currency.platform.ledger.in_memory_ledger import InMemoryLedger
from wallet_currency.utils.report.ledger_report import COLUMNS, balances_to_dataframe, entries_to_dataframe
from tests.helpers import helper_currency


def test_entries_to_dataframe() -> None:
    registry = helper_currency.create_registry()
    coin = registry.require("coin")
    point = registry.require("point")
    ledger = InMemoryLedger()

    coin.deposit(ledger, "10", "bonus", "ref-1")
    coin.exchange(ledger, point, "2.5")

    df = entries_to_dataframe(ledger.list_entries(), registry)
    assert list(df.columns) == COLUMNS
    assert len(df) == 3
    assert list(df["kind"]) == ["DEPOSIT", "EXCHANGE_OUT", "EXCHANGE_IN"]
    assert list(df["amount_minor"]) == [1000, -250, 500]
    assert list(df["amount"]) == ["10", "-2.5", "0.5"]
    assert df.loc[0, "income_type"] == "bonus"


def test_entries_to_dataframe_empty() -> None:
    df = entries_to_dataframe([], helper_currency.create_registry())
    assert df.empty
    assert list(df.columns) == COLUMNS


def test_balances_to_dataframe() -> None:
    registry = helper_currency.create_registry()
    df = balances_to_dataframe({"coin": 1234, "unknown": 7}, registry)

    assert list(df["symbol"]) == ["CN", "UNKNOWN"]
    assert list(df["amount"]) == ["12.34", "7"]
