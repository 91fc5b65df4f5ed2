"""Configuration models and helpers."""

from __future__ import annotations

from .settings import (
    AppSettings,
    AvailabilitySettings,
    HttpSettings,
    LlmSettings,
    QuotaSettings,
    RetrievalSettings,
    StorageSettings,
    SupabaseSettings,
    get_settings,
)

__all__ = [
    "AppSettings",
    "AvailabilitySettings",
    "HttpSettings",
    "LlmSettings",
    "QuotaSettings",
    "RetrievalSettings",
    "StorageSettings",
    "SupabaseSettings",
    "get_settings",
]
