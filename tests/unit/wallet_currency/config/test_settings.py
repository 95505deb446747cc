from __future__ import annotations

import json
from pathlib import Path

import pytest

from wallet_currency.config.settings import CURRENCY_CONFIG_ENV, create_registry, load_currency_config
from tests.helpers import helper_currency


def _write(path: Path, document) -> Path:
    path.write_text(json.dumps(document), encoding="utf-8")
    return path


def test_load_currency_section(tmp_path: Path) -> None:
    path = _write(tmp_path / "wallet.json", {"currency": helper_currency.currency_config(), "other": {"x": 1}})

    config = load_currency_config(path)
    assert list(config) == ["coin", "point", "ticket"]
    assert config["coin"]["decimals"] == 2


def test_load_top_level_mapping(tmp_path: Path) -> None:
    path = _write(tmp_path / "currencies.json", {"gold": {"decimals": 4, "rate": "0.5"}})

    assert load_currency_config(path) == {"gold": {"decimals": 4, "rate": "0.5"}}


def test_load_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(tmp_path / "wallet.json", {"currency": helper_currency.currency_config()})
    monkeypatch.setenv(CURRENCY_CONFIG_ENV, str(path))

    registry = create_registry()
    assert registry.require("coin").symbol == "CN"
    assert registry.require("point").exchange_amount(registry.require("coin"), "1") == "500"


def test_missing_environment_gives_empty_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CURRENCY_CONFIG_ENV, raising=False)

    assert load_currency_config() == {}
    assert len(create_registry()) == 0


def test_invalid_files(tmp_path: Path) -> None:
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_currency_config(broken)

    with pytest.raises(ValueError):
        load_currency_config(_write(tmp_path / "list.json", ["coin"]))

    with pytest.raises(ValueError):
        load_currency_config(_write(tmp_path / "flat.json", {"currency": {"coin": 3}}))

    with pytest.raises(FileNotFoundError):
        load_currency_config(tmp_path / "absent.json")
