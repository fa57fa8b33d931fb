"""Configuration module for scrobblefetch."""

from .settings import (
    API_MAX_LIMIT,
    LastfmSettings,
    ObservabilitySettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_settings,
)

__all__ = [
    "API_MAX_LIMIT",
    "LastfmSettings",
    "ObservabilitySettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_settings",
]
