"""Supabase repositories backing the copilot's external collaborators."""

from __future__ import annotations

from .calendar import CalendarEventRepository
from .profiles import BusinessProfileRepository
from .quota import QuotaRepository
from .similarity import SimilaritySearchRepository

__all__ = [
    "BusinessProfileRepository",
    "CalendarEventRepository",
    "QuotaRepository",
    "SimilaritySearchRepository",
]
