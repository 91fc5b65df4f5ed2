from __future__ import annotations

import math
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain import ChatMessage, CopilotReply, CopilotRequest, DayAvailability, QuotaDecision


def _finite(value: float) -> Optional[float]:
    return None if math.isinf(value) else value


class HistoryMessage(BaseModel):
    role: str
    content: str


class CopilotChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tenant_id: str = Field(alias="tenantId", min_length=1)
    user_id: str = Field(alias="userId", min_length=1)
    message: str = Field(alias="userMessage", min_length=1)
    conversation_context: str = Field(default="", alias="conversationContext")
    contact_name: Optional[str] = Field(default=None, alias="contactName")
    contact_phone: Optional[str] = Field(default=None, alias="contactPhone")
    history: List[HistoryMessage] = Field(default_factory=list, alias="copilotHistory")

    def to_domain(self) -> CopilotRequest:
        return CopilotRequest(
            tenant_id=self.tenant_id,
            user_id=self.user_id,
            message=self.message,
            conversation_context=self.conversation_context,
            contact_name=self.contact_name,
            contact_phone=self.contact_phone,
            history=tuple(ChatMessage(role=entry.role, content=entry.content) for entry in self.history),
        )


class RetrievalCounts(BaseModel):
    success_examples: int
    failure_examples: int
    knowledge: int


class CopilotChatResponse(BaseModel):
    suggestion: str
    rag_context: RetrievalCounts
    calendar_status: str
    remaining_credits: Optional[float] = Field(default=None)

    @classmethod
    def from_domain(cls, reply: CopilotReply) -> "CopilotChatResponse":
        return cls(
            suggestion=reply.suggestion,
            rag_context=RetrievalCounts(
                success_examples=reply.success_examples_count,
                failure_examples=reply.failure_examples_count,
                knowledge=reply.knowledge_count,
            ),
            calendar_status=reply.calendar_status.value,
            remaining_credits=_finite(reply.remaining_credits),
        )


class QuotaResponse(BaseModel):
    tenant_id: str
    allowed: bool
    unlimited: bool
    remaining: Optional[float] = Field(default=None)

    @classmethod
    def from_domain(cls, tenant_id: str, decision: QuotaDecision) -> "QuotaResponse":
        return cls(
            tenant_id=tenant_id,
            allowed=decision.allowed,
            unlimited=math.isinf(decision.remaining),
            remaining=_finite(decision.remaining),
        )


class DayAvailabilityPayload(BaseModel):
    day: int
    date: str
    status: str
    slots: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, entry: DayAvailability) -> "DayAvailabilityPayload":
        return cls(**entry.to_dict())


class AvailabilityResponse(BaseModel):
    user_id: str
    connected: bool
    days: List[DayAvailabilityPayload] = Field(default_factory=list)
