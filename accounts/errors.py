"""Exceptions raised by the registry and the fetch operations.

Schema validation problems are not here: check_fields() returns them as data.
"""

from __future__ import annotations

import builtins


class AccountError(Exception):
    """Base class for all account framework errors."""


class NotFoundError(AccountError, KeyError):
    """No account type is registered under the requested code."""

    def __init__(self, code: str) -> None:
        super().__init__(f"No account type registered with code '{code}'")
        self.code = code

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class DuplicateCodeError(AccountError):
    """An account type with this code is already registered."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Account type code '{code}' is already registered")
        self.code = code


class UpstreamError(AccountError):
    """A failure talking to the third party behind an account type."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class InvalidCredentialsError(UpstreamError):
    """The third party rejected well-formed credentials (e.g. a revoked API key)."""


class UpstreamUnavailableError(UpstreamError):
    """The third party could not be reached or is temporarily refusing requests."""


class UpstreamProtocolError(UpstreamError):
    """The third party answered, but not in the shape we expected."""


class TimeoutError(UpstreamError, builtins.TimeoutError):
    """A fetch operation exceeded its deadline."""
