from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from accounts.config import Settings

# Placeholder for records not bound to an account type (startup, registry)
_NO_ACCOUNT = "-"

_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[account_type]: <12}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

_FILE_FORMAT = (
    "{time:YYYY-MM-DDTHH:mm:ss.SSSZ} | {level} | account={extra[account_type]} | "
    "{name}:{function}:{line} | {message}"
)


def setup_logger(settings: Settings) -> logger.__class__:
    """Configure Loguru so every line carries the account type it concerns.

    Fetch operations log through logger.bind(account_type=...); anything
    logged outside a fetch shows "-" in that column.
    """
    logger.remove()
    logger.configure(extra={"account_type": _NO_ACCOUNT})

    logger.add(
        sys.stderr,
        level=settings.log_level,
        format=_CONSOLE_FORMAT,
        colorize=True,
    )

    # JSON lines, rotated daily, kept 30 days; record.extra holds account_type
    if settings.log_to_file:
        logger.add(
            str(Path(settings.log_dir) / "accounts_{time:YYYY-MM-DD}.log"),
            level="DEBUG",
            format=_FILE_FORMAT,
            rotation="00:00",
            retention="30 days",
            compression="gz",
            serialize=True,
        )

    logger.info(
        f"Logger initialised (level={settings.log_level}, file={settings.log_to_file})"
    )

    return logger
