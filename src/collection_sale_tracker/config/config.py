# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, API__MAGIC_EDEN_HOST.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "collection-sale-tracker"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/sale_tracker.log"
    # TimedRotatingFileHandler: when to rotate (S/M/H/D/W0–W6/midnight), interval, backups to keep
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # Main output format: JSONRenderer if True, ConsoleRenderer if False
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class ApiSettings(BaseSettings):
    """Configuration for the Magic Eden RTP API (HTTP)."""

    model_config = SettingsConfigDict(extra="ignore")

    magic_eden_host: str = Field(
        default="https://api-mainnet.magiceden.dev",
        description="Magic Eden API base URL.",
    )
    chain: str = Field(
        default="monad-testnet",
        description="Chain segment used in /v3/rtp/{chain}/... paths.",
    )
    marketplace_url: str = Field(
        default="https://magiceden.io/collections",
        description="Public collection page base URL (used in notifications).",
    )
    currency_symbol: str = Field(default="MON", description="Display symbol for prices.")
    api_key: Optional[str] = Field(default=None, description="Optional Magic Eden API key.")
    timeout_seconds: float = Field(
        default=10.0,
        ge=1.0,
        le=120.0,
        description="HTTP request timeout in seconds.",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Maximum number of attempts for a failed request.",
    )
    backoff_base_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Delay before the second attempt; doubles on every further attempt.",
    )
    backoff_max_seconds: float = Field(default=8.0, ge=0.0, le=300.0)
    backoff_jitter_seconds: float = Field(default=0.0, ge=0.0, le=10.0)


class TelegramNotificationSettings(BaseSettings):
    """Telegram notifications (from env TELEGRAM__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = False
    api_key: Optional[str] = Field(default=None, description="Telegram bot API key.")
    chat_id: Optional[str] = Field(
        default=None,
        description="Default chat ID (used for operator alerts and subscribers without a chat).",
    )
    messages_per_minute: int = Field(default=30, ge=1, le=120)
    max_retries: int = Field(default=5, ge=1, le=20)
    backoff_base_seconds: float = Field(default=1.0, ge=0.1, le=60.0)
    connect_timeout: float = Field(default=10.0, ge=0.1, le=60.0)
    read_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    write_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    pool_timeout: float = Field(default=10.0, ge=0.1, le=60.0)


class ConsoleNotificationSettings(BaseSettings):
    """Console notification settings."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = True


class TrackingSettings(BaseSettings):
    """Configuration for collection stats polling and sale deduplication."""

    model_config = SettingsConfigDict(extra="ignore")

    # Raw string from env so pydantic-settings does not try to JSON-decode it (list[str] would trigger json.loads).
    target_collections_raw: str = Field(
        default="",
        description=(
            "Collections to track, comma-separated addresses or marketplace URLs. "
            "Env: TRACKING__TARGET_COLLECTIONS."
        ),
        validation_alias="target_collections",
    )
    subscriber_id: str = Field(
        default="default",
        description="Subscriber that owns the env-configured collections (e.g. a Telegram chat id).",
    )
    poll_seconds: float = Field(
        default=60.0,
        ge=1.0,
        le=3600.0,
        description="Polling interval in seconds between cycles.",
    )
    max_concurrent_fetches: int = Field(
        default=4,
        ge=1,
        le=64,
        description="Upper bound of parallel stats fetches within one cycle.",
    )
    dedup_capacity: int = Field(
        default=50,
        ge=1,
        le=10_000,
        description="Maximum remembered sale ids per collection (FIFO eviction).",
    )
    dedup_retention_seconds: float = Field(
        default=3600.0,
        ge=1.0,
        le=7 * 24 * 3600.0,
        description="Sale ids older than this are purged at the start of every cycle.",
    )
    metadata_cache_size: int = Field(
        default=4096,
        ge=1,
        le=100_000,
        description="Maximum number of collections kept in the metadata cache.",
    )
    cold_start_mode: Literal["catch_up", "suppress"] = Field(
        default="catch_up",
        description=(
            "catch_up: deliver the first sale inferred after a restart. "
            "suppress: admit it without delivering. Only affects collections "
            "whose snapshot store was seeded before start; an empty store "
            "baselines on the first poll and delivers nothing for it."
        ),
    )

    @computed_field
    @property
    def target_collections(self) -> list[str]:
        """Parse comma-separated target_collections_raw into list of stripped strings."""
        if not self.target_collections_raw or not self.target_collections_raw.strip():
            return []
        return [s.strip() for s in self.target_collections_raw.split(",") if s.strip()]


class Settings(BaseSettings):
    """Root application configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, TRACKING__POLL_SECONDS.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    tracking: TrackingSettings = Field(default_factory=TrackingSettings)
    telegram: TelegramNotificationSettings = Field(default_factory=TelegramNotificationSettings)
    console: ConsoleNotificationSettings = Field(default_factory=ConsoleNotificationSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as nested dicts, e.g.:
        - from_env(api={"timeout_seconds": 30})
        - from_env(tracking={"dedup_capacity": 10})

        Returns:
            A new Settings instance.
        """
        return cls(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from collection_sale_tracker.config import get_settings

        settings = get_settings()
        timeout = settings.api.timeout_seconds
        capacity = settings.tracking.dedup_capacity
    """
    return Settings()
