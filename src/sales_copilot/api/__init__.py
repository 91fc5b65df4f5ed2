"""Request and response models for the HTTP surface."""

from __future__ import annotations

from .models import (
    AvailabilityResponse,
    CopilotChatRequest,
    CopilotChatResponse,
    DayAvailabilityPayload,
    QuotaResponse,
)

__all__ = [
    "AvailabilityResponse",
    "CopilotChatRequest",
    "CopilotChatResponse",
    "DayAvailabilityPayload",
    "QuotaResponse",
]
