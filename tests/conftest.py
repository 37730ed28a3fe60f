"""Shared test fixtures for all test modules."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any
from unittest.mock import MagicMock

import pytest

from accounts.account_type import AccountType
from accounts.catalog import StaticCurrencyCatalog
from accounts.config import Settings
from accounts.fetcher import BalanceFetcher
from accounts.models import AccountTypeDescriptor, CurrencyMetadata, FieldDescriptor
from accounts.registry import AccountTypeRegistry


class FakeSource:
    """Scriptable balance source that records how often it was called."""

    def __init__(
        self,
        currencies: Iterable[Any] = ("btc", "ltc"),
        balances: Any = None,
        error: Exception | None = None,
        balance_error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.currencies = currencies
        self.balances = balances if balances is not None else {
            "btc": {"confirmed": 1.5, "unconfirmed": 0.25, "hashrate": 1.2e12, "workers": 3},
            "ltc": {"confirmed": 0.0},
        }
        self.error = error
        self.balance_error = balance_error
        self.delay = delay
        self.supported_calls = 0
        self.balance_calls = 0
        self.seen_credentials: list[Mapping[str, Any]] = []

    async def fetch_supported_currencies(self, catalog, sink):
        self.supported_calls += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.currencies

    async def fetch_balances(self, credentials, catalog, sink):
        self.balance_calls += 1
        self.seen_credentials.append(credentials)
        if self.balance_error is not None:
            raise self.balance_error
        return self.balances


@pytest.fixture
def settings() -> Settings:
    """Test settings with a short deadline."""
    return Settings(
        log_level="DEBUG",
        request_timeout_seconds=2.0,
        http_user_agent="accounts-tests/1.0",
    )


@pytest.fixture
def catalog() -> StaticCurrencyCatalog:
    return StaticCurrencyCatalog([
        CurrencyMetadata(code="btc", name="Bitcoin"),
        CurrencyMetadata(code="ltc", name="Litecoin"),
        CurrencyMetadata(code="doge", name="Dogecoin"),
        CurrencyMetadata(code="usd", name="US Dollar", is_cryptocurrency=False, is_fiat=True),
        CurrencyMetadata(code="ghs", name="SHA256 hash rate", is_hashrate=True),
    ])


@pytest.fixture
def expool_descriptor() -> AccountTypeDescriptor:
    return AccountTypeDescriptor(
        name="Example Pool",
        code="expool",
        fields=(FieldDescriptor(name="api_key", required=True),),
    )


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def make_source() -> type[FakeSource]:
    return FakeSource


@pytest.fixture
def account_type(expool_descriptor: AccountTypeDescriptor, source: FakeSource) -> AccountType:
    return AccountType(descriptor=expool_descriptor, source=source)


@pytest.fixture
def registry() -> AccountTypeRegistry:
    return AccountTypeRegistry()


@pytest.fixture
def fetcher(settings: Settings) -> BalanceFetcher:
    return BalanceFetcher(settings)


@pytest.fixture
def sink() -> MagicMock:
    """Diagnostic sink that records info/warning/error calls."""
    return MagicMock()
