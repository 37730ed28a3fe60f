"""Account type registry — maps unique codes to account type implementations."""

from __future__ import annotations

from loguru import logger

from accounts.account_type import AccountType, BalanceSource
from accounts.errors import DuplicateCodeError, NotFoundError
from accounts.models import AccountTypeDescriptor


class AccountTypeRegistry:
    """Registry populated once at startup, then read concurrently.

    Lookups are plain dict reads; call freeze() once initialisation is done
    so later registrations fail loudly instead of racing readers.
    """

    def __init__(self) -> None:
        self._types: dict[str, AccountType] = {}
        self._frozen = False

    def register(
        self, descriptor: AccountTypeDescriptor, implementation: BalanceSource
    ) -> AccountType:
        """Register an implementation under its descriptor's code."""
        if self._frozen:
            raise RuntimeError(
                f"Registry is frozen; cannot register '{descriptor.code}'"
            )
        if descriptor.code in self._types:
            raise DuplicateCodeError(descriptor.code)

        account_type = AccountType(descriptor=descriptor, source=implementation)
        self._types[descriptor.code] = account_type
        logger.debug(f"Registered account type '{descriptor.code}' ({descriptor.name})")
        return account_type

    def lookup(self, code: str) -> AccountType:
        """Direct lookup by code."""
        account_type = self._types.get(code)
        if account_type is None:
            raise NotFoundError(code)
        return account_type

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def codes(self) -> list[str]:
        return sorted(self._types)

    @property
    def all_types(self) -> list[AccountType]:
        """All registered account types, in registration order."""
        return list(self._types.values())

    def __contains__(self, code: object) -> bool:
        return code in self._types

    def __len__(self) -> int:
        return len(self._types)
