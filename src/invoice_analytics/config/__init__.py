"""Configuration module."""

from invoice_analytics.config.logging import configure_logging, get_logger
from invoice_analytics.config.settings import (
    APISettings,
    LLMSettings,
    QuerySettings,
    Settings,
    StorageSettings,
    get_settings,
    reset_settings,
)

__all__ = [
    "Settings",
    "LLMSettings",
    "StorageSettings",
    "QuerySettings",
    "APISettings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
]
