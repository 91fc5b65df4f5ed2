from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .enums import BusinessType, CalendarStatus, DayStatus, OutcomeStatus, RetrievalSource


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    raise ValueError(f"Unsupported datetime value: {value!r}")


@dataclass(slots=True)
class QuotaState:
    base_limit: Optional[float]
    used: float
    extra: float
    reset_at: datetime
    plan: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any], *, base_limit: Optional[float]) -> "QuotaState":
        reset_raw = record.get("monthly_credits_reset_at")
        return cls(
            base_limit=base_limit,
            used=float(record.get("monthly_credits_used") or 0),
            extra=float(record.get("extra_monthly_credits") or 0),
            reset_at=_parse_datetime(reset_raw) if reset_raw else datetime.min,
            plan=record.get("training_plan"),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "monthly_credits_used": self.used,
            "extra_monthly_credits": self.extra,
            "monthly_credits_reset_at": self.reset_at.isoformat(),
        }


@dataclass(frozen=True, slots=True)
class QuotaDecision:
    allowed: bool
    remaining: float

    @classmethod
    def unlimited(cls) -> "QuotaDecision":
        return cls(allowed=True, remaining=math.inf)


@dataclass(frozen=True, slots=True)
class CalendarEvent:
    """A calendar entry. ``start`` without a time component marks an all-day event."""

    id: str
    title: str
    start: str
    end: Optional[str] = None
    attendee_email: Optional[str] = None

    @property
    def is_all_day(self) -> bool:
        return "T" not in self.start and " " not in self.start.strip()

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "CalendarEvent":
        return cls(
            id=str(record["id"]),
            title=str(record.get("title") or "Untitled"),
            start=str(record["starts_at"]),
            end=record.get("ends_at") or None,
            attendee_email=record.get("attendee_email") or None,
        )


@dataclass(frozen=True, slots=True)
class BusyInterval:
    start_minute: int
    end_minute: int


@dataclass(frozen=True, slots=True)
class FreeSlot:
    day: int
    start_minute: int
    end_minute: int

    def label(self) -> str:
        return f"{format_minutes(self.start_minute)}-{format_minutes(self.end_minute)}"


def format_minutes(minutes: int) -> str:
    hours, remainder = divmod(minutes, 60)
    return f"{hours:02d}:{remainder:02d}"


@dataclass(frozen=True, slots=True)
class DayAvailability:
    day: int
    date: date
    status: DayStatus
    slots: tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "day": self.day,
            "date": self.date.isoformat(),
            "status": self.status.value,
            "slots": list(self.slots),
        }


@dataclass(slots=True)
class BusinessProfile:
    company_id: str
    name: Optional[str] = None
    description: Optional[str] = None
    products_services: Optional[str] = None
    product_function: Optional[str] = None
    differentiators: Optional[str] = None
    competitors: Optional[str] = None
    metrics: Optional[str] = None
    common_mistakes: Optional[str] = None
    desired_perception: Optional[str] = None
    business_type: BusinessType = BusinessType.B2B

    @classmethod
    def from_record(cls, record: Dict[str, Any], *, business_type: Optional[str] = None) -> "BusinessProfile":
        try:
            resolved_type = BusinessType(business_type) if business_type else BusinessType.B2B
        except ValueError:
            resolved_type = BusinessType.B2B
        return cls(
            company_id=str(record["company_id"]),
            name=record.get("nome"),
            description=record.get("descricao"),
            products_services=record.get("produtos_servicos"),
            product_function=record.get("funcao_produtos"),
            differentiators=record.get("diferenciais"),
            competitors=record.get("concorrentes"),
            metrics=record.get("dados_metricas"),
            common_mistakes=record.get("erros_comuns"),
            desired_perception=record.get("percepcao_desejada"),
            business_type=resolved_type,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company_id": self.company_id,
            "name": self.name,
            "description": self.description,
            "products_services": self.products_services,
            "product_function": self.product_function,
            "differentiators": self.differentiators,
            "competitors": self.competitors,
            "metrics": self.metrics,
            "common_mistakes": self.common_mistakes,
            "desired_perception": self.desired_perception,
            "business_type": self.business_type.value,
        }


@dataclass(slots=True)
class RetrievalOutcome:
    source: RetrievalSource
    status: OutcomeStatus
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def fulfilled(self) -> bool:
        return self.status is OutcomeStatus.FULFILLED


@dataclass(slots=True)
class AggregatedContext:
    """Joined retrieval results for one turn.

    ``calendar_events`` is ``None`` when the calendar was never queried and a
    list (possibly empty) when it was.
    """

    success_examples: List[Dict[str, Any]] = field(default_factory=list)
    failure_examples: List[Dict[str, Any]] = field(default_factory=list)
    knowledge_docs: List[Dict[str, Any]] = field(default_factory=list)
    business_profile: Optional[BusinessProfile] = None
    calendar_events: Optional[List[CalendarEvent]] = None
    calendar_status: CalendarStatus = CalendarStatus.NOT_REQUESTED
    outcomes: List[RetrievalOutcome] = field(default_factory=list)

    @property
    def degraded_sources(self) -> List[RetrievalSource]:
        return [outcome.source for outcome in self.outcomes if not outcome.fulfilled]


@dataclass(frozen=True, slots=True)
class ChatMessage:
    role: str
    content: str


@dataclass(frozen=True, slots=True)
class CopilotRequest:
    tenant_id: str
    user_id: str
    message: str
    conversation_context: str = ""
    contact_name: Optional[str] = None
    contact_phone: Optional[str] = None
    history: tuple[ChatMessage, ...] = ()


@dataclass(slots=True)
class ContextPayload:
    tenant_id: str
    user_id: str
    message: str
    success_examples: List[Dict[str, Any]]
    failure_examples: List[Dict[str, Any]]
    knowledge_docs: List[Dict[str, Any]]
    business_profile: Optional[BusinessProfile]
    calendar_events: Optional[List[CalendarEvent]]
    calendar_status: CalendarStatus
    availability: Optional[List[DayAvailability]]
    remaining_credits: float


@dataclass(frozen=True, slots=True)
class CopilotReply:
    suggestion: str
    success_examples_count: int
    failure_examples_count: int
    knowledge_count: int
    calendar_status: CalendarStatus
    remaining_credits: float
