from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # --- Logging ---
    log_level: str = "INFO"
    log_dir: str = "logs"
    log_to_file: bool = False

    # --- Upstream requests ---
    request_timeout_seconds: float = Field(default=30.0, gt=0)
    http_user_agent: str = "accounts-balance-client/0.1"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalise_log_level(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def validate_for_startup(self) -> list[str]:
        """Return a list of configuration errors. Empty list means valid."""
        errors: list[str] = []
        if self.log_level not in _LOG_LEVELS:
            errors.append(f"LOG_LEVEL '{self.log_level}' is not a recognised level")
        if self.log_to_file and not self.log_dir:
            errors.append("LOG_DIR is required when LOG_TO_FILE is enabled")
        if not self.http_user_agent:
            errors.append("HTTP_USER_AGENT must not be empty")
        return errors
