"""Currency catalog — resolves currency codes to metadata.

The catalog is owned by the caller. Account types only query it, to tell
real coins apart from hash-rate-only pseudo-currencies and the like.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from accounts.models import CurrencyMetadata


@runtime_checkable
class CurrencyCatalog(Protocol):
    def resolve(self, code: str) -> CurrencyMetadata | None:
        """Metadata for a currency code, or None if the code is unknown."""
        ...


class StaticCurrencyCatalog:
    """In-memory catalog over a fixed set of currencies. Lookups are case-insensitive."""

    def __init__(self, currencies: Iterable[CurrencyMetadata]) -> None:
        self._by_code: dict[str, CurrencyMetadata] = {}
        for c in currencies:
            self._by_code[c.code.lower()] = c

    def resolve(self, code: str) -> CurrencyMetadata | None:
        return self._by_code.get(code.lower())

    @property
    def codes(self) -> list[str]:
        return sorted(self._by_code)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.lower() in self._by_code

    def __len__(self) -> int:
        return len(self._by_code)
