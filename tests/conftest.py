from __future__ import annotations

from datetime import datetime
from typing import Any, Dict

import pytest

from sales_copilot.config import RetrievalSettings
from sales_copilot.domain import BusinessProfile, QuotaState
from sales_copilot.services import ContextAssembler, CopilotService, QuotaGovernor, SourceAggregator

from .fakes import NOW, FakeCalendar, FakeEmbedder, FakeProfiles, FakeResponder, FakeSearch, InMemoryQuotaStore


@pytest.fixture
def retrieval_settings() -> RetrievalSettings:
    return RetrievalSettings(
        success_match_count=3,
        success_threshold=0.4,
        failure_match_count=2,
        failure_threshold=0.4,
        knowledge_match_count=3,
        knowledge_threshold=0.5,
        context_tail_chars=500,
        max_embedding_chars=8000,
        intent_window=4,
    )


@pytest.fixture
def profile() -> BusinessProfile:
    return BusinessProfile(company_id="acme", name="Acme CRM", description="CRM for clinics")


@pytest.fixture
def quota_store() -> InMemoryQuotaStore:
    return InMemoryQuotaStore(
        {"acme": QuotaState(base_limit=400, used=10, extra=0, reset_at=datetime(2026, 10, 1), plan="team")}
    )


@pytest.fixture
def sources(profile) -> Dict[str, Any]:
    return {
        "embedder": FakeEmbedder(),
        "success_search": FakeSearch([{"id": "s1", "transcricao": "Hi! How is the clinic going?", "nota_original": 9}]),
        "failure_search": FakeSearch([{"id": "f1", "content": "Just checking in..."}]),
        "knowledge_search": FakeSearch([{"category": "pricing", "content": "Plans start at R$199"}]),
        "profiles": FakeProfiles(profile),
        "calendar": FakeCalendar([]),
    }


@pytest.fixture
def aggregator(sources, retrieval_settings) -> SourceAggregator:
    return SourceAggregator(settings=retrieval_settings, **sources)


@pytest.fixture
def governor(quota_store) -> QuotaGovernor:
    return QuotaGovernor(store=quota_store)


@pytest.fixture
def assembler(governor, aggregator) -> ContextAssembler:
    return ContextAssembler(governor, aggregator, clock=lambda: NOW)


@pytest.fixture
def responder() -> FakeResponder:
    return FakeResponder()


@pytest.fixture
def copilot(assembler, responder, governor) -> CopilotService:
    return CopilotService(assembler, responder, governor, call_cost=0.2)
