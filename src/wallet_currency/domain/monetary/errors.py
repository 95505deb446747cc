"""Exceptions raised by money-moving wallet operations.

Pure conversions never raise for malformed input (they return None or "0"). The exceptions below
guard deposits, outlays and exchanges, where silently accepting bad input would move money.
"""


class WalletError(Exception):
    """Base class for all wallet errors."""


class InvalidAmountFormatError(WalletError, ValueError):
    """Raised when a money-moving operation receives an amount that is not a valid display amount."""

    def __init__(self, amount: str, currency_id: str):
        self.amount = amount
        self.currency_id = currency_id
        super().__init__(f"Amount '{amount}' is not a valid non-negative decimal for currency '{currency_id}'")


class UnknownIncomeTypeError(WalletError):
    """Raised when a deposit names an income type the currency does not declare."""

    def __init__(self, income_type: str, currency_id: str):
        self.income_type = income_type
        self.currency_id = currency_id
        super().__init__(f"Unknown income type '{income_type}' for currency '{currency_id}'")


class MisconfiguredIncomeTypeError(WalletError):
    """Raised when an income type exists but has no ledger subject configured."""

    def __init__(self, income_type: str, currency_id: str):
        self.income_type = income_type
        self.currency_id = currency_id
        super().__init__(f"Income type '{income_type}' of currency '{currency_id}' has no subject configured")


class NotExchangeableError(WalletError):
    """Raised by a ledger when asked to record an exchange whose rate or permission checks fail."""

    def __init__(self, from_currency_id: str, to_currency_id: str):
        self.from_currency_id = from_currency_id
        self.to_currency_id = to_currency_id
        super().__init__(f"Currency '{from_currency_id}' cannot be exchanged into '{to_currency_id}'")
