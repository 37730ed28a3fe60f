"""Account type capability object — a descriptor paired with its balance source.

Every third-party account kind (mining pool, exchange, wallet) is an
AccountType: static metadata plus a BalanceSource that knows how to talk to
the provider. Sources are plain objects satisfying the protocol; nothing
inherits from a framework base class.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from accounts.catalog import CurrencyCatalog
from accounts.diagnostics import DiagnosticSink
from accounts.models import AccountCredentials, AccountTypeDescriptor

# Raw provider output: currency code -> {"confirmed": ..., "unconfirmed": ..., ...}
RawBalances = Mapping[str, Mapping[str, Any]]


@runtime_checkable
class BalanceSource(Protocol):
    """Provider-specific half of an account type.

    Both methods may perform network I/O. Implementations raise the
    accounts.errors upstream errors (usually via accounts.http) and
    should not retry.
    """

    async def fetch_supported_currencies(
        self, catalog: CurrencyCatalog, sink: DiagnosticSink
    ) -> Iterable[str]: ...

    async def fetch_balances(
        self,
        credentials: AccountCredentials,
        catalog: CurrencyCatalog,
        sink: DiagnosticSink,
    ) -> RawBalances: ...


@dataclass(frozen=True)
class AccountType:
    descriptor: AccountTypeDescriptor
    source: BalanceSource

    @property
    def code(self) -> str:
        return self.descriptor.code

    @property
    def name(self) -> str:
        return self.descriptor.name
