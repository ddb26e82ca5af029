"""Configuration loaded from environment variables."""

from .settings import (
    CleanupSettings,
    FileLimits,
    PaginationSettings,
    Settings,
    StorageSettings,
    TempLinkLimits,
)

__all__ = [
    "CleanupSettings",
    "FileLimits",
    "PaginationSettings",
    "Settings",
    "StorageSettings",
    "TempLinkLimits",
]
