from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Optional

from ..domain import CopilotReply, CopilotRequest
from .assembler import ContextAssembler
from .ports import Responder
from .quota import QuotaGovernor

logger = logging.getLogger(__name__)


class CopilotService:
    """Runs one copilot turn: admission, context, reply, then usage bookkeeping."""

    def __init__(
        self,
        assembler: ContextAssembler,
        responder: Responder,
        governor: QuotaGovernor,
        *,
        call_cost: float,
    ) -> None:
        self.assembler = assembler
        self.responder = responder
        self.governor = governor
        self.call_cost = call_cost

    async def respond(self, request: CopilotRequest, *, now: Optional[datetime] = None) -> CopilotReply:
        payload = await self.assembler.assemble(request, now=now)
        suggestion = await asyncio.to_thread(self.responder.respond, payload, request)

        # The reply already exists; a failed commit is logged inside the governor.
        await asyncio.to_thread(self.governor.commit, request.tenant_id, self.call_cost)

        logger.info(
            "Copilot turn completed for tenant %s (success=%d, failure=%d, knowledge=%d)",
            request.tenant_id,
            len(payload.success_examples),
            len(payload.failure_examples),
            len(payload.knowledge_docs),
        )
        return CopilotReply(
            suggestion=suggestion,
            success_examples_count=len(payload.success_examples),
            failure_examples_count=len(payload.failure_examples),
            knowledge_count=len(payload.knowledge_docs),
            calendar_status=payload.calendar_status,
            remaining_credits=payload.remaining_credits - self.call_cost,
        )
