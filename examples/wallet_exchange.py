from __future__ import annotations

import logging

from wallet_currency.domain.monetary.currency_registry import CurrencyRegistry
from wallet_currency.platform.ledger.in_memory_ledger import InMemoryLedger
from wallet_currency.utils.report.ledger_report import balances_to_dataframe, entries_to_dataframe

logger = logging.getLogger(__name__)

CURRENCIES = {
    "coin": {
        "name": "Coin",
        "decimals": 2,
        "scale": 2,
        "rate": "1",
        "types": {
            "recharge": {"name": "Recharge", "subject": "recharge", "withdraw": 1},
        },
    },
    "point": {
        "name": "Point",
        "decimals": 2,
        "rate": "100",
        "types": {
            "fromcoin": {"name": "Exchanged from coin", "subject": "exchange"},
        },
    },
}


def main() -> None:
    registry = CurrencyRegistry(CURRENCIES)
    coin = registry.require("coin")
    point = registry.require("point")
    ledger = InMemoryLedger(id="demo")

    coin.deposit(ledger, "25.50", "recharge", "payment-1")
    coin.outlay(ledger, "3.2", "shop", "order-1")
    # 10 coin * 100 points per coin, 5% discount
    credited = coin.exchange(ledger, point, "10", discount=0.95)
    logger.info(f"Credited {point.format(credited)}")

    print(entries_to_dataframe(ledger.list_entries(), registry).to_string(index=False))
    print()
    print(balances_to_dataframe(dict(ledger.get_all_balances()), registry).to_string(index=False))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    main()
