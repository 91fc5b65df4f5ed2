"""Domain models for the sales copilot context engine."""

from __future__ import annotations

from .enums import BusinessType, CalendarStatus, DayStatus, OutcomeStatus, PlanType, RetrievalSource
from .errors import (
    CalendarFetchFailed,
    CalendarNotConnected,
    CopilotError,
    EmbeddingGenerationFailed,
    QuotaCommitFailed,
    QuotaExceeded,
    SourceUnavailable,
    SupabaseNotInitializedError,
)
from .models import (
    AggregatedContext,
    BusinessProfile,
    BusyInterval,
    CalendarEvent,
    ChatMessage,
    ContextPayload,
    CopilotReply,
    CopilotRequest,
    DayAvailability,
    FreeSlot,
    QuotaDecision,
    QuotaState,
    RetrievalOutcome,
)
from .plans import PLAN_MONTHLY_CREDITS, monthly_credits_for

__all__ = [
    "AggregatedContext",
    "BusinessProfile",
    "BusinessType",
    "BusyInterval",
    "CalendarEvent",
    "CalendarFetchFailed",
    "CalendarNotConnected",
    "CalendarStatus",
    "ChatMessage",
    "ContextPayload",
    "CopilotError",
    "CopilotReply",
    "CopilotRequest",
    "DayAvailability",
    "DayStatus",
    "EmbeddingGenerationFailed",
    "FreeSlot",
    "OutcomeStatus",
    "PLAN_MONTHLY_CREDITS",
    "PlanType",
    "QuotaCommitFailed",
    "QuotaDecision",
    "QuotaExceeded",
    "QuotaState",
    "RetrievalOutcome",
    "RetrievalSource",
    "SourceUnavailable",
    "SupabaseNotInitializedError",
    "monthly_credits_for",
]
