from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, List, Optional

from ..core.availability import build_availability_report
from ..core.intent import needs_calendar
from ..domain import (
    AggregatedContext,
    CalendarStatus,
    ContextPayload,
    CopilotRequest,
    DayAvailability,
    QuotaDecision,
    QuotaExceeded,
)
from .aggregator import SourceAggregator
from .quota import QuotaGovernor

logger = logging.getLogger(__name__)


def recent_messages(request: CopilotRequest) -> List[str]:
    """Copilot history followed by the tail lines of the live conversation."""

    history = [entry.content for entry in request.history]
    conversation = [line for line in request.conversation_context.splitlines() if line.strip()]
    return history + conversation


class ContextAssembler:
    def __init__(
        self,
        governor: QuotaGovernor,
        aggregator: SourceAggregator,
        *,
        clock: Callable[[], datetime],
        intent_window: int = 4,
    ) -> None:
        self.governor = governor
        self.aggregator = aggregator
        self.clock = clock
        self.intent_window = intent_window

    @staticmethod
    def _admit(tenant_id: str, decision: QuotaDecision) -> None:
        if not decision.allowed:
            raise QuotaExceeded(tenant_id, decision.remaining)

    def compose(
        self,
        request: CopilotRequest,
        decision: QuotaDecision,
        context: AggregatedContext,
        availability: Optional[List[DayAvailability]],
    ) -> ContextPayload:
        self._admit(request.tenant_id, decision)
        return ContextPayload(
            tenant_id=request.tenant_id,
            user_id=request.user_id,
            message=request.message,
            success_examples=context.success_examples,
            failure_examples=context.failure_examples,
            knowledge_docs=context.knowledge_docs,
            business_profile=context.business_profile,
            calendar_events=context.calendar_events,
            calendar_status=context.calendar_status,
            availability=availability if context.calendar_status is CalendarStatus.CONNECTED else None,
            remaining_credits=decision.remaining,
        )

    async def assemble(self, request: CopilotRequest, *, now: Optional[datetime] = None) -> ContextPayload:
        """Gate on quota, gather sources, and compose the payload for one turn."""

        moment = now or self.clock()
        decision = await asyncio.to_thread(self.governor.check, request.tenant_id, moment)
        # Denied requests never reach the aggregator.
        self._admit(request.tenant_id, decision)

        wants_calendar = needs_calendar(request.message, recent_messages(request), window=self.intent_window)
        context = await self.aggregator.fan_out(
            request.message,
            request.tenant_id,
            request.user_id,
            wants_calendar,
            conversation_context=request.conversation_context,
        )

        availability = None
        if context.calendar_status is CalendarStatus.CONNECTED:
            availability = build_availability_report(
                context.calendar_events or [],
                moment,
                self.aggregator.calendar_days_ahead,
            )
        return self.compose(request, decision, context, availability)
