"""Application services orchestrating data access and domain logic."""

from __future__ import annotations

from .aggregator import SourceAggregator
from .assembler import ContextAssembler
from .calendar import CalendarService
from .context import ServiceContext
from .copilot import CopilotService
from .quota import QuotaGovernor

__all__ = [
    "CalendarService",
    "ContextAssembler",
    "CopilotService",
    "QuotaGovernor",
    "ServiceContext",
    "SourceAggregator",
]
