"""Settings and structured logging for the inventory ledger."""

from src.config.logging import configure_logging, get_logger
from src.config.settings import APISettings, Settings, StorageSettings, get_settings, reset_settings

__all__ = [
    "Settings",
    "StorageSettings",
    "APISettings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
]
