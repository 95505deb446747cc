from __future__ import annotations

import threading

import pytest

from wallet_currency.domain.monetary.currency import Currency
from wallet_currency.domain.monetary.currency_registry import CurrencyRegistry
from tests.helpers.test_assistant import TEST_ASSISTANT


def test_get_builds_once_and_reuses_instance() -> None:
    registry = TEST_ASSISTANT.currency.create_registry()

    coin = registry.get("coin")
    assert isinstance(coin, Currency)
    assert registry.get("coin") is coin
    assert coin.decimals == 2


def test_unknown_code() -> None:
    registry = TEST_ASSISTANT.currency.create_registry()

    assert registry.get("gold") is None
    with pytest.raises(ValueError):
        registry.require("gold")


def test_currencies_builds_all_in_configuration_order() -> None:
    registry = TEST_ASSISTANT.currency.create_registry()

    currencies = registry.currencies()
    assert list(currencies) == ["coin", "point", "ticket"]
    assert currencies["point"] is registry.get("point")
    assert registry.codes == ["coin", "point", "ticket"]
    assert "coin" in registry
    assert "gold" not in registry
    assert len(registry) == 3
    assert list(registry) == ["coin", "point", "ticket"]


def test_registry_is_independent_of_source_mapping() -> None:
    config = TEST_ASSISTANT.currency.currency_config()
    registry = CurrencyRegistry(config)
    config["gold"] = {"decimals": 4}

    assert registry.get("gold") is None


def test_empty_registry_and_bad_config() -> None:
    assert len(CurrencyRegistry()) == 0
    with pytest.raises(TypeError):
        CurrencyRegistry(["coin"])  # type: ignore[arg-type]


def test_concurrent_lookup_builds_single_instance() -> None:
    registry = TEST_ASSISTANT.currency.create_registry()
    barrier = threading.Barrier(16)
    seen: list[Currency] = []
    seen_lock = threading.Lock()

    def lookup() -> None:
        barrier.wait()
        currency = registry.get("point")
        with seen_lock:
            seen.append(currency)

    threads = [threading.Thread(target=lookup) for _ in range(16)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(seen) == 16
    assert all(currency is seen[0] for currency in seen)
