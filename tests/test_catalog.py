"""Tests for the in-memory currency catalog."""

from __future__ import annotations

from accounts.catalog import CurrencyCatalog, StaticCurrencyCatalog
from accounts.models import CurrencyMetadata


def test_resolve_known(catalog: StaticCurrencyCatalog) -> None:
    btc = catalog.resolve("btc")
    assert btc.name == "Bitcoin"
    assert btc.is_cryptocurrency
    assert not btc.is_hashrate


def test_resolve_case_insensitive(catalog: StaticCurrencyCatalog) -> None:
    assert catalog.resolve("BTC") is catalog.resolve("btc")
    assert "DOGE" in catalog


def test_resolve_unknown(catalog: StaticCurrencyCatalog) -> None:
    assert catalog.resolve("xyz") is None
    assert "xyz" not in catalog


def test_hashrate_and_fiat_flags(catalog: StaticCurrencyCatalog) -> None:
    assert catalog.resolve("ghs").is_hashrate
    assert catalog.resolve("usd").is_fiat
    assert not catalog.resolve("usd").is_cryptocurrency


def test_codes_sorted(catalog: StaticCurrencyCatalog) -> None:
    assert catalog.codes == ["btc", "doge", "ghs", "ltc", "usd"]
    assert len(catalog) == 5


def test_mixed_case_codes_normalised() -> None:
    cat = StaticCurrencyCatalog([CurrencyMetadata(code="NMC", name="Namecoin")])
    assert cat.resolve("nmc").name == "Namecoin"


def test_satisfies_protocol(catalog: StaticCurrencyCatalog) -> None:
    assert isinstance(catalog, CurrencyCatalog)
