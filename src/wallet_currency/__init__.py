__version__ = "0.0.1"

from wallet_currency.domain.monetary.currency import Currency
from wallet_currency.domain.monetary.currency_registry import CurrencyRegistry
from wallet_currency.platform.ledger.in_memory_ledger import InMemoryLedger
from wallet_currency.platform.ledger.ledger import Ledger

__all__ = ["Currency", "CurrencyRegistry", "InMemoryLedger", "Ledger"]
