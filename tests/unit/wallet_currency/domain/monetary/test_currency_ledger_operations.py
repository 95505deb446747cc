from __future__ import annotations

import logging

import pytest

from wallet_currency.domain.monetary.currency import Currency
from wallet_currency.domain.monetary.errors import (
    InvalidAmountFormatError,
    MisconfiguredIncomeTypeError,
    UnknownIncomeTypeError,
    WalletError,
)
from tests.helpers import helper_currency


class RecordingLedger:
    """Ledger double that stores every call it receives."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def record_deposit(self, currency: Currency, amount_minor: int, type: str, subject: str, subject_id: str) -> bool:
        self.calls.append(("deposit", currency.id, amount_minor, type, subject, subject_id))
        return True

    def record_outlay(self, currency: Currency, amount_minor: int, subject: str, subject_id: str) -> bool:
        self.calls.append(("outlay", currency.id, amount_minor, subject, subject_id))
        return True

    def record_exchange(self, from_currency: Currency, to_currency: Currency, amount_minor: int, discount: float = 1.0) -> str | None:
        self.calls.append(("exchange", from_currency.id, to_currency.id, amount_minor, discount))
        return "42"


def test_deposit_delegates_converted_amount_and_subject() -> None:
    ledger = RecordingLedger()
    coin = helper_currency.create_coin()

    assert coin.deposit(ledger, "12.345", "bonus", "order-7") is True
    assert ledger.calls == [("deposit", "coin", 1234, "bonus", "referral", "order-7")]


def test_deposit_unknown_type_raises() -> None:
    ledger = RecordingLedger()
    coin = helper_currency.create_coin()

    with pytest.raises(UnknownIncomeTypeError) as exc_info:
        coin.deposit(ledger, "1", "lottery", "x")
    assert exc_info.value.income_type == "lottery"
    assert isinstance(exc_info.value, WalletError)

    with pytest.raises(UnknownIncomeTypeError):
        coin.deposit(ledger, "1", "", "x")
    assert ledger.calls == []


def test_deposit_type_without_subject_raises() -> None:
    ledger = RecordingLedger()
    coin = helper_currency.create_coin()

    with pytest.raises(MisconfiguredIncomeTypeError):
        coin.deposit(ledger, "1", "gift", "x")
    assert ledger.calls == []


@pytest.mark.parametrize("amount", ["-1", "abc", "1.2.3", ""])
def test_money_movement_rejects_invalid_amount(amount: str) -> None:
    ledger = RecordingLedger()
    coin = helper_currency.create_coin()
    point = helper_currency.create_point()

    with pytest.raises(InvalidAmountFormatError):
        coin.deposit(ledger, amount, "bonus", "x")
    with pytest.raises(InvalidAmountFormatError):
        coin.outlay(ledger, amount, "shop", "x")
    with pytest.raises(ValueError):
        coin.exchange(ledger, point, amount)
    assert ledger.calls == []


def test_outlay_delegates_without_local_checks() -> None:
    ledger = RecordingLedger()
    coin = helper_currency.create_coin()

    assert coin.outlay(ledger, "3", "shop", "order-1") is True
    assert ledger.calls == [("outlay", "coin", 300, "shop", "order-1")]


def test_exchange_passes_discount_through() -> None:
    ledger = RecordingLedger()
    coin = helper_currency.create_coin()
    point = helper_currency.create_point()

    assert coin.exchange(ledger, point, "5") == "42"
    assert coin.exchange(ledger, point, "5", discount=0.8) == "42"
    assert ledger.calls == [
        ("exchange", "coin", "point", 500, 1.0),
        ("exchange", "coin", "point", 500, 0.8),
    ]


def test_exchange_not_permitted_returns_none(caplog: pytest.LogCaptureFixture) -> None:
    ledger = RecordingLedger()
    coin = helper_currency.create_coin()
    ticket = helper_currency.create_ticket()

    with caplog.at_level(logging.WARNING):
        assert coin.exchange(ledger, ticket, "5") is None
    assert ledger.calls == []
    assert "Refusing exchange" in caplog.text


@pytest.mark.parametrize("discount", [0, -0.5, float("nan"), float("inf"), True, "0.5"])
def test_exchange_rejects_bad_discount(discount) -> None:
    ledger = RecordingLedger()
    coin = helper_currency.create_coin()
    point = helper_currency.create_point()

    with pytest.raises(ValueError):
        coin.exchange(ledger, point, "5", discount=discount)
    assert ledger.calls == []
