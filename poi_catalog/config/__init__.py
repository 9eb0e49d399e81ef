"""
Configuration package for the POI Catalog API.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    DatabaseSettings,
    QuerySettings,
    ImportSettings,
    SecuritySettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "DatabaseSettings",
    "QuerySettings",
    "ImportSettings",
    "SecuritySettings",
    "settings",
    "get_settings",
    "reload_settings",
]
