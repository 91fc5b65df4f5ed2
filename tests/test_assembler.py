from __future__ import annotations

import logging
import math
from datetime import datetime

import pytest

from sales_copilot.domain import (
    AggregatedContext,
    CalendarEvent,
    CalendarNotConnected,
    CalendarStatus,
    ChatMessage,
    CopilotRequest,
    DayStatus,
    EmbeddingGenerationFailed,
    QuotaDecision,
    QuotaExceeded,
    QuotaState,
)
from sales_copilot.services import CalendarService, ContextAssembler, CopilotService, SourceAggregator
from sales_copilot.services.assembler import recent_messages

from .fakes import NOW, FakeCalendar, InMemoryQuotaStore


def _request(message: str = "Quanto custa o plano?", **overrides) -> CopilotRequest:
    fields = {"tenant_id": "acme", "user_id": "seller-1", "message": message}
    fields.update(overrides)
    return CopilotRequest(**fields)


def _exhaust(quota_store: InMemoryQuotaStore) -> None:
    quota_store.states["acme"] = QuotaState(base_limit=20, used=20, extra=0, reset_at=datetime(2026, 10, 1), plan="individual")


class TestContextAssembler:
    @pytest.mark.asyncio
    async def test_denied_request_never_reaches_the_sources(self, assembler, quota_store, sources):
        _exhaust(quota_store)

        with pytest.raises(QuotaExceeded) as excinfo:
            await assembler.assemble(_request())

        assert excinfo.value.code == "quota_exceeded"
        assert sources["embedder"].texts == []
        assert sources["success_search"].calls == []

    @pytest.mark.asyncio
    async def test_payload_without_scheduling_has_no_calendar(self, assembler, sources):
        payload = await assembler.assemble(_request())

        assert payload.calendar_events is None
        assert payload.calendar_status is CalendarStatus.NOT_REQUESTED
        assert payload.availability is None
        assert payload.remaining_credits == pytest.approx(390)
        assert payload.business_profile.company_id == "acme"
        assert sources["calendar"].calls == []

    @pytest.mark.asyncio
    async def test_scheduling_turn_carries_the_availability_report(self, assembler, sources):
        sources["calendar"].events = [
            CalendarEvent(id="e1", title="Demo", start="2026-10-19T10:00:00", end="2026-10-19T11:00:00")
        ]

        payload = await assembler.assemble(_request("Podemos marcar uma reunião amanhã?"))

        assert payload.calendar_status is CalendarStatus.CONNECTED
        assert len(payload.availability) == 7
        today = payload.availability[0]
        assert today.status is DayStatus.AVAILABLE
        assert today.slots == ("09:00-10:00", "11:00-18:00")

    @pytest.mark.asyncio
    async def test_intent_from_recent_history_triggers_the_calendar(self, assembler, sources):
        request = _request("Pode ser quinta?", history=(ChatMessage(role="user", content="Vamos agendar uma call"),))

        payload = await assembler.assemble(request)

        assert sources["calendar"].calls == [("seller-1", 7)]
        assert payload.calendar_events == []

    @pytest.mark.asyncio
    async def test_unavailable_calendar_has_no_report(self, assembler, sources):
        sources["calendar"].error = CalendarNotConnected("no connection")

        payload = await assembler.assemble(_request("Can we schedule a meeting?"))

        assert payload.calendar_events == []
        assert payload.calendar_status is CalendarStatus.UNAVAILABLE
        assert payload.availability is None

    @pytest.mark.asyncio
    async def test_unreadable_calendar_entries_are_skipped(self, assembler, sources, caplog):
        sources["calendar"].events = [
            CalendarEvent(id="bad", title="x", start=""),
            CalendarEvent(id="garbled", title="y", start="2026-10-19T10:00:00", end="2026-10-19Tlater"),
            CalendarEvent(id="e1", title="Demo", start="2026-10-19T10:00:00", end="2026-10-19T11:00:00"),
        ]

        with caplog.at_level(logging.WARNING):
            payload = await assembler.assemble(_request("Can we schedule a meeting?"))

        assert payload.calendar_status is CalendarStatus.CONNECTED
        assert payload.availability[0].slots == ("09:00-10:00", "11:00-18:00")
        assert "Skipping calendar event bad" in caplog.text
        assert "Skipping calendar event garbled" in caplog.text

    @pytest.mark.asyncio
    async def test_report_covers_the_fetched_window(self, governor, sources, retrieval_settings):
        aggregator = SourceAggregator(settings=retrieval_settings, calendar_days_ahead=3, **sources)
        assembler = ContextAssembler(governor, aggregator, clock=lambda: NOW)

        payload = await assembler.assemble(_request("Can we schedule a meeting?"))

        assert sources["calendar"].calls == [("seller-1", 3)]
        assert [entry.day for entry in payload.availability] == [0, 1, 2]

    def test_compose_rejects_a_denied_decision(self, assembler):
        with pytest.raises(QuotaExceeded):
            assembler.compose(_request(), QuotaDecision(allowed=False, remaining=0), AggregatedContext(), None)

    def test_compose_drops_availability_unless_connected(self, assembler):
        payload = assembler.compose(
            _request(),
            QuotaDecision.unlimited(),
            AggregatedContext(calendar_events=[], calendar_status=CalendarStatus.UNAVAILABLE),
            [],
        )
        assert payload.availability is None
        assert math.isinf(payload.remaining_credits)

    def test_recent_messages_combine_history_and_conversation(self):
        request = _request(
            conversation_context="cliente: oi\n\nvendedor: tudo bem?\n",
            history=(ChatMessage(role="user", content="sugere algo"),),
        )
        assert recent_messages(request) == ["sugere algo", "cliente: oi", "vendedor: tudo bem?"]

    @pytest.mark.asyncio
    async def test_explicit_now_overrides_the_clock(self, governor, aggregator, quota_store):
        quota_store.states["acme"].reset_at = datetime(2026, 9, 3)
        assembler = ContextAssembler(governor, aggregator, clock=lambda: pytest.fail("clock should not be used"))

        await assembler.assemble(_request(), now=NOW)

        assert quota_store.states["acme"].reset_at == NOW


class TestCopilotService:
    @pytest.mark.asyncio
    async def test_successful_turn_commits_the_call_cost(self, copilot, quota_store, responder):
        reply = await copilot.respond(_request())

        assert reply.suggestion == responder.reply
        assert (reply.success_examples_count, reply.failure_examples_count, reply.knowledge_count) == (1, 1, 1)
        assert reply.calendar_status is CalendarStatus.NOT_REQUESTED
        assert reply.remaining_credits == pytest.approx(389.8)
        assert quota_store.states["acme"].used == pytest.approx(10.2)
        assert len(responder.payloads) == 1

    @pytest.mark.asyncio
    async def test_denied_turn_neither_responds_nor_commits(self, copilot, quota_store, responder):
        _exhaust(quota_store)

        with pytest.raises(QuotaExceeded):
            await copilot.respond(_request())

        assert responder.payloads == []
        assert quota_store.writes == []

    @pytest.mark.asyncio
    async def test_embedding_failure_propagates_without_commit(self, copilot, quota_store, sources):
        sources["embedder"].error = EmbeddingGenerationFailed("provider down")

        with pytest.raises(EmbeddingGenerationFailed):
            await copilot.respond(_request())

        assert quota_store.writes == []

    @pytest.mark.asyncio
    async def test_responder_failure_does_not_commit(self, copilot, quota_store, responder):
        responder.error = RuntimeError("model overloaded")

        with pytest.raises(RuntimeError, match="model overloaded"):
            await copilot.respond(_request())

        assert quota_store.writes == []

    @pytest.mark.asyncio
    async def test_commit_failure_still_returns_the_reply(self, copilot, quota_store, caplog):
        quota_store.write_error = ConnectionError("supabase down")

        with caplog.at_level(logging.ERROR):
            reply = await copilot.respond(_request())

        assert reply.suggestion
        assert "Could not record" in caplog.text

    @pytest.mark.asyncio
    async def test_unlimited_tenant_reports_infinite_credits(self, assembler, responder, governor, quota_store):
        quota_store.states.clear()
        copilot = CopilotService(assembler, responder, governor, call_cost=0.2)

        reply = await copilot.respond(_request())

        assert math.isinf(reply.remaining_credits)


class TestCalendarService:
    def test_report_for_connected_user(self):
        calendar = FakeCalendar([CalendarEvent(id="e1", title="Block", start="2026-10-20")])
        service = CalendarService(source=calendar, clock=lambda: NOW)

        report = service.availability("seller-1")

        assert report[1].status is DayStatus.BLOCKED_ALL_DAY
        assert calendar.calls == [("seller-1", 7)]

    def test_not_connected_returns_none(self):
        service = CalendarService(source=FakeCalendar(error=CalendarNotConnected("none")), clock=lambda: NOW)
        assert service.availability("seller-1") is None

    def test_other_failures_propagate(self):
        service = CalendarService(source=FakeCalendar(error=TimeoutError("slow")), clock=lambda: NOW)
        with pytest.raises(TimeoutError):
            service.availability("seller-1")

    def test_report_length_follows_days_ahead(self):
        calendar = FakeCalendar([])
        service = CalendarService(source=calendar, clock=lambda: NOW, days_ahead=3)

        report = service.availability("seller-1")

        assert [entry.status for entry in report] == [DayStatus.FREE_ALL_DAY] * 3
        assert calendar.calls == [("seller-1", 3)]
