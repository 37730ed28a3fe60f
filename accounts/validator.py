from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from accounts.models import (
    AccountCredentials,
    AccountTypeDescriptor,
    FieldDescriptor,
    FieldRule,
    ValidationResult,
)

REQUIRED = "required"
INVALID_FORMAT = "invalid format"
UNRECOGNISED = "unrecognised field"

_HEX_RE = re.compile(r"[0-9a-fA-F]+")


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_numeric(value: str) -> bool:
    try:
        number = Decimal(value.strip())
    except InvalidOperation:
        return False
    return number.is_finite()


def _matches_rule(field: FieldDescriptor, value: object) -> bool:
    if not isinstance(value, str):
        return False
    if field.rule == FieldRule.NON_EMPTY:
        return bool(value.strip())
    if field.rule == FieldRule.NUMERIC:
        return _is_numeric(value)
    if field.rule == FieldRule.HEX:
        return _HEX_RE.fullmatch(value) is not None
    if field.rule == FieldRule.PATTERN:
        return re.fullmatch(field.pattern or "", value) is not None
    return False


def check_fields(
    descriptor: AccountTypeDescriptor,
    credentials: AccountCredentials,
) -> ValidationResult:
    """Check credentials against the descriptor's field schema. Pure, no I/O.

    Returns an empty dict when everything passes, otherwise a mapping of
    field name to error messages. Errors for one field never touch another
    field's entry; unknown keys are reported under their own name.
    """
    errors: ValidationResult = {}

    for field in descriptor.fields:
        value = credentials.get(field.name)

        if _is_blank(value):
            if field.required:
                errors.setdefault(field.name, []).append(REQUIRED)
            continue

        if not _matches_rule(field, value):
            errors.setdefault(field.name, []).append(INVALID_FORMAT)

    declared = {f.name for f in descriptor.fields}
    for key in credentials:
        if key not in declared:
            errors.setdefault(key, []).append(UNRECOGNISED)

    return errors
