"""Data access layer."""

from __future__ import annotations

from .supabase import SupabaseGateway

__all__ = ["SupabaseGateway"]
