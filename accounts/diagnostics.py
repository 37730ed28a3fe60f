from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from loguru import logger


@runtime_checkable
class DiagnosticSink(Protocol):
    """Receives log events during fetch operations. A loguru logger qualifies."""

    def info(self, message: str, *args: Any, **kwargs: Any) -> None: ...

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None: ...

    def error(self, message: str, *args: Any, **kwargs: Any) -> None: ...


def default_sink(account_code: str) -> DiagnosticSink:
    """Loguru logger tagged with the account type code."""
    return logger.bind(account_type=account_code)
