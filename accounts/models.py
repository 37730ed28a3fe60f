from __future__ import annotations

import re
from collections.abc import Mapping
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_MAX_CODE_LENGTH = 32

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class FieldRule(StrEnum):
    NON_EMPTY = "non_empty"
    NUMERIC = "numeric"
    HEX = "hex"
    PATTERN = "pattern"  # Uses FieldDescriptor.pattern


# ---------------------------------------------------------------------------
# Account type metadata
# ---------------------------------------------------------------------------

class FieldDescriptor(BaseModel):
    """One credential field an account type needs, e.g. an API key."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    title: str = ""
    required: bool = True
    rule: FieldRule = FieldRule.NON_EMPTY
    pattern: str | None = None
    note: str | None = None

    @model_validator(mode="after")
    def check_pattern(self) -> FieldDescriptor:
        if self.rule == FieldRule.PATTERN:
            if not self.pattern:
                raise ValueError(f"field '{self.name}' uses the pattern rule but has no pattern")
            try:
                re.compile(self.pattern)
            except re.error as exc:
                raise ValueError(f"field '{self.name}' has an invalid pattern: {exc}") from exc
        return self

    @property
    def label(self) -> str:
        return self.title or self.name


class AccountTypeDescriptor(BaseModel):
    """Immutable metadata for an account type: display name, code and fields."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    code: str
    fields: tuple[FieldDescriptor, ...] = ()

    @field_validator("code")
    @classmethod
    def check_code(cls, v: str) -> str:
        if not 1 <= len(v) <= _MAX_CODE_LENGTH:
            raise ValueError(f"code must be 1-{_MAX_CODE_LENGTH} characters, got {len(v)}")
        if v != v.lower():
            raise ValueError(f"code must be lowercase, got '{v}'")
        if any(ch.isspace() for ch in v):
            raise ValueError(f"code must not contain whitespace, got '{v}'")
        return v

    @field_validator("fields")
    @classmethod
    def check_unique_fields(cls, v: tuple[FieldDescriptor, ...]) -> tuple[FieldDescriptor, ...]:
        seen: set[str] = set()
        for f in v:
            if f.name in seen:
                raise ValueError(f"duplicate field name '{f.name}'")
            seen.add(f.name)
        return v

    def field(self, name: str) -> FieldDescriptor | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def required_fields(self) -> list[str]:
        return [f.name for f in self.fields if f.required]


# ---------------------------------------------------------------------------
# Currencies
# ---------------------------------------------------------------------------

class CurrencyMetadata(BaseModel):
    """What the currency catalog knows about a currency code."""
    model_config = ConfigDict(frozen=True)

    code: str
    name: str = ""
    is_cryptocurrency: bool = True
    is_fiat: bool = False
    # Hash-rate-only pseudo-currency: reports hashrate/workers, never a coin balance
    is_hashrate: bool = False


# ---------------------------------------------------------------------------
# Balances
# ---------------------------------------------------------------------------

class Balance(BaseModel):
    """Raw balance record for one currency.

    Amounts are unscaled, in the currency's natural unit (1.0 = 1 BTC);
    hashrate is raw units per second. None means the value does not apply
    to this currency/provider, 0 means nothing was observed.
    """
    model_config = ConfigDict(frozen=True, extra="forbid", allow_inf_nan=False)

    confirmed: float | None = Field(default=None, ge=0)
    unconfirmed: float | None = Field(default=None, ge=0)
    hashrate: float | None = Field(default=None, ge=0)
    workers: int | None = Field(default=None, ge=0)


# Type aliases shared across the package
AccountCredentials = Mapping[str, str | None]
CurrencyBalance = dict[str, Balance]
# Field name -> error messages; empty means the credentials passed
ValidationResult = dict[str, list[str]]
