from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from zoneinfo import ZoneInfo

from ..config import AppSettings, get_settings
from ..data import SupabaseGateway
from ..data.repositories import (
    BusinessProfileRepository,
    CalendarEventRepository,
    QuotaRepository,
    SimilaritySearchRepository,
)
from ..llm import OpenAIEmbedder, OpenAIResponder
from .aggregator import SourceAggregator
from .assembler import ContextAssembler
from .calendar import CalendarService
from .copilot import CopilotService
from .quota import QuotaGovernor


@dataclass(slots=True)
class ServiceContext:
    """Process-wide wiring: builds each client once and injects it into the services."""

    settings: AppSettings = field(default_factory=get_settings)
    gateway: SupabaseGateway = field(init=False)
    quotas: QuotaRepository = field(init=False)
    calendar_events: CalendarEventRepository = field(init=False)
    governor: QuotaGovernor = field(init=False)
    aggregator: SourceAggregator = field(init=False)
    assembler: ContextAssembler = field(init=False)
    calendar: CalendarService = field(init=False)
    copilot: CopilotService = field(init=False)

    def __post_init__(self) -> None:
        storage = self.settings.storage
        self.gateway = SupabaseGateway(self.settings.supabase)
        self.quotas = QuotaRepository(gateway=self.gateway, table_name=storage.companies_table)
        self.calendar_events = CalendarEventRepository(
            gateway=self.gateway,
            table_name=storage.calendar_events_table,
            connections_table=storage.calendar_connections_table,
            timezone=self.settings.availability.timezone,
        )
        self.governor = QuotaGovernor(store=self.quotas)
        self.aggregator = SourceAggregator(
            embedder=OpenAIEmbedder(self.settings.llm),
            success_search=SimilaritySearchRepository(gateway=self.gateway, function_name=storage.success_examples_rpc),
            failure_search=SimilaritySearchRepository(gateway=self.gateway, function_name=storage.failure_examples_rpc),
            knowledge_search=SimilaritySearchRepository(gateway=self.gateway, function_name=storage.knowledge_rpc),
            profiles=BusinessProfileRepository(
                gateway=self.gateway,
                table_name=storage.company_data_table,
                type_table_name=storage.company_type_table,
            ),
            calendar=self.calendar_events,
            settings=self.settings.retrieval,
            calendar_days_ahead=self.settings.availability.days_ahead,
        )
        self.assembler = ContextAssembler(
            self.governor,
            self.aggregator,
            clock=self.now,
            intent_window=self.settings.retrieval.intent_window,
        )
        self.calendar = CalendarService(
            source=self.calendar_events,
            clock=self.now,
            days_ahead=self.settings.availability.days_ahead,
        )
        self.copilot = CopilotService(
            self.assembler,
            OpenAIResponder(self.settings.llm),
            self.governor,
            call_cost=self.settings.quota.copilot_call_cost,
        )

    def now(self) -> datetime:
        return datetime.now(ZoneInfo(self.settings.availability.timezone))
