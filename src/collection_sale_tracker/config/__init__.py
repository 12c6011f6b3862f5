"""Configuration subpackage."""

from collection_sale_tracker.config.config import (
    ApiSettings,
    AppSettings,
    ConsoleNotificationSettings,
    LoggingSettings,
    Settings,
    TelegramNotificationSettings,
    TrackingSettings,
    get_settings,
)

__all__ = [
    "ApiSettings",
    "AppSettings",
    "LoggingSettings",
    "Settings",
    "TelegramNotificationSettings",
    "ConsoleNotificationSettings",
    "TrackingSettings",
    "get_settings",
]
