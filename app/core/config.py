# app/core/config.py
from enum import Enum
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StatusResolutionOrder(str, Enum):
    """
    Precedence used when deciding a user's status on project update.

    - CONFIRMED_FIRST: a confirmed project starting today wins over the
      completed-based default.
    - LEGACY: the completed-based default always overwrites the
      confirmed/today value (only a future start overrides it).
    """

    CONFIRMED_FIRST = "confirmed_first"
    LEGACY = "legacy"


class Settings(BaseSettings):
    """
    Global application configuration.

    Values are loaded from environment variables at runtime.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    APP_NAME: str = "Staffing Status Service"
    APP_ENV: str = Field("local", description="Environment name: local/dev/stage/prod")

    DB_URL: str = Field(
        "sqlite+aiosqlite:///./staffing.db",
        description="SQLAlchemy-compatible database URL",
    )

    INTERNAL_API_KEY: str | None = Field(
        default=None,
        description="API key required for hitting /internal endpoints",
    )

    # --- Logging ---
    LOG_LEVEL: str = Field(default="INFO", description="Root log level.")
    LOG_JSON: bool = Field(
        default=True,
        description="Render logs as JSON lines. Disable for colored console output.",
    )

    # --- Status engine ---
    STATUS_TIMEZONE: str = Field(
        default="UTC",
        description=(
            "IANA timezone used to compute 'today' and the calendar-day window "
            "of the status history ledger."
        ),
    )
    STATUS_RESOLUTION_ORDER: StatusResolutionOrder = Field(
        default=StatusResolutionOrder.CONFIRMED_FIRST,
        description=(
            "Precedence between the confirmed/starts-today rule and the "
            "completed-based default when a project is updated."
        ),
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Cached accessor for application settings.

    Using LRU cache ensures settings are read and validated only once,
    while still being easily importable across the app.
    """
    return Settings()
