"""Balance fetcher — supported currencies and balances for one account.

Every operation is a coroutine that runs to completion or raises; the
fetcher creates no tasks of its own. Orchestrators fan out across accounts
with asyncio.gather(), one call per account. Calls share nothing mutable,
enforce a deadline and never retry.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from accounts.diagnostics import DiagnosticSink, default_sink
from accounts.errors import AccountError, TimeoutError, UpstreamProtocolError
from accounts.models import AccountCredentials, Balance, CurrencyBalance

if TYPE_CHECKING:
    from accounts.account_type import AccountType
    from accounts.catalog import CurrencyCatalog
    from accounts.config import Settings


class BalanceFetcher:
    """Runs an account type's balance source under a deadline and checks its output."""

    def __init__(self, settings: Settings) -> None:
        self._default_timeout = settings.request_timeout_seconds

    async def _with_deadline(
        self,
        account_type: AccountType,
        sink: DiagnosticSink,
        operation: str,
        coro: Any,
        timeout: float | None,
    ) -> Any:
        deadline = self._default_timeout if timeout is None else timeout
        try:
            return await asyncio.wait_for(coro, timeout=deadline)
        except asyncio.TimeoutError as exc:
            if isinstance(exc, AccountError):
                sink.error(f"{operation} failed for '{account_type.code}': {exc}")
                raise
            sink.error(f"{operation} for '{account_type.code}' exceeded {deadline}s")
            raise TimeoutError(
                f"{operation} for '{account_type.code}' exceeded {deadline}s",
                code=account_type.code,
            ) from exc
        except AccountError as exc:
            sink.error(f"{operation} failed for '{account_type.code}': {exc}")
            raise

    # --- Currency capability --------------------------------------------------

    async def _supported(
        self,
        account_type: AccountType,
        catalog: CurrencyCatalog,
        sink: DiagnosticSink,
    ) -> frozenset[str]:
        raw = await account_type.source.fetch_supported_currencies(catalog, sink)
        if isinstance(raw, (str, bytes)) or not isinstance(raw, Iterable):
            raise UpstreamProtocolError(
                f"expected a collection of currency codes, got {type(raw).__name__}",
                code=account_type.code,
            )

        supported: set[str] = set()
        for cur in raw:
            if not isinstance(cur, str) or not cur:
                raise UpstreamProtocolError(
                    f"invalid currency code {cur!r}", code=account_type.code
                )
            code = cur.lower()
            if catalog.resolve(code) is None:
                sink.warning(f"'{account_type.code}' reported unknown currency '{code}', ignoring")
                continue
            supported.add(code)
        return frozenset(supported)

    async def fetch_supported_currencies(
        self,
        account_type: AccountType,
        catalog: CurrencyCatalog,
        sink: DiagnosticSink | None = None,
        *,
        timeout: float | None = None,
    ) -> frozenset[str]:
        """Currencies this account type supports, as lowercase catalog codes. May block."""
        sink = sink or default_sink(account_type.code)
        supported = await self._with_deadline(
            account_type, sink, "fetch_supported_currencies",
            self._supported(account_type, catalog, sink), timeout,
        )
        sink.info(f"'{account_type.code}' supports {sorted(supported)}")
        return supported

    # --- Balances -------------------------------------------------------------

    def _parse_balances(
        self,
        account_type: AccountType,
        raw: Any,
        supported: frozenset[str],
        sink: DiagnosticSink,
    ) -> CurrencyBalance:
        if not isinstance(raw, Mapping):
            raise UpstreamProtocolError(
                f"expected a mapping of balances, got {type(raw).__name__}",
                code=account_type.code,
            )

        balances: CurrencyBalance = {}
        for cur, record in raw.items():
            if not isinstance(cur, str) or not cur:
                raise UpstreamProtocolError(
                    f"invalid currency code {cur!r}", code=account_type.code
                )
            code = cur.lower()
            if code not in supported:
                sink.warning(
                    f"'{account_type.code}' returned a balance for unsupported currency '{code}', ignoring"
                )
                continue
            if code in balances:
                raise UpstreamProtocolError(
                    f"duplicate balance entries for '{code}'", code=account_type.code
                )
            try:
                balances[code] = (
                    record if isinstance(record, Balance) else Balance.model_validate(record)
                )
            except ValidationError as exc:
                raise UpstreamProtocolError(
                    f"malformed balance for '{code}': {exc.errors()[0]['msg']}",
                    code=account_type.code,
                ) from exc
        return balances

    async def _balances(
        self,
        account_type: AccountType,
        credentials: AccountCredentials,
        catalog: CurrencyCatalog,
        sink: DiagnosticSink,
    ) -> CurrencyBalance:
        supported = await self._supported(account_type, catalog, sink)
        raw = await account_type.source.fetch_balances(credentials, catalog, sink)
        return self._parse_balances(account_type, raw, supported, sink)

    async def fetch_balances(
        self,
        account_type: AccountType,
        credentials: AccountCredentials,
        catalog: CurrencyCatalog,
        sink: DiagnosticSink | None = None,
        *,
        timeout: float | None = None,
    ) -> CurrencyBalance:
        """All balances for the account, keyed by lowercase currency code. May block.

        Credentials must already have passed check_fields(). Any failure fails
        the whole call; there are no partial results.
        """
        sink = sink or default_sink(account_type.code)
        balances = await self._with_deadline(
            account_type, sink, "fetch_balances",
            self._balances(account_type, credentials, catalog, sink), timeout,
        )
        sink.info(f"'{account_type.code}' returned balances for {sorted(balances)}")
        return balances

    async def _balance(
        self,
        currency: str,
        account_type: AccountType,
        credentials: AccountCredentials,
        catalog: CurrencyCatalog,
        sink: DiagnosticSink,
    ) -> Balance | None:
        supported = await self._supported(account_type, catalog, sink)
        if currency not in supported:
            return None
        raw = await account_type.source.fetch_balances(credentials, catalog, sink)
        return self._parse_balances(account_type, raw, supported, sink).get(currency)

    async def fetch_balance(
        self,
        currency: str,
        account_type: AccountType,
        credentials: AccountCredentials,
        catalog: CurrencyCatalog,
        sink: DiagnosticSink | None = None,
        *,
        timeout: float | None = None,
    ) -> Balance | None:
        """Balance for one currency, or None if the account doesn't hold or support it."""
        sink = sink or default_sink(account_type.code)
        return await self._with_deadline(
            account_type, sink, "fetch_balance",
            self._balance(currency.lower(), account_type, credentials, catalog, sink),
            timeout,
        )

    async def fetch_confirmed_balance(
        self,
        currency: str,
        account_type: AccountType,
        credentials: AccountCredentials,
        catalog: CurrencyCatalog,
        sink: DiagnosticSink | None = None,
        *,
        timeout: float | None = None,
    ) -> float:
        """Confirmed balance for one currency; 0.0 when absent."""
        balance = await self.fetch_balance(
            currency, account_type, credentials, catalog, sink, timeout=timeout
        )
        if balance is None or balance.confirmed is None:
            return 0.0
        return balance.confirmed
