from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, List, Tuple

from ..config import RetrievalSettings
from ..domain import (
    AggregatedContext,
    CalendarFetchFailed,
    CalendarNotConnected,
    CalendarStatus,
    EmbeddingGenerationFailed,
    OutcomeStatus,
    RetrievalOutcome,
    RetrievalSource,
    SourceUnavailable,
)
from ..llm.embeddings import build_embedding_text
from .ports import BusinessProfileStore, CalendarSource, Embedder, SimilaritySearch

logger = logging.getLogger(__name__)


class SourceAggregator:
    """Scatter-gather over the independent retrieval sources of one turn.

    The embedding is a hard prerequisite. Every retrieval launched after it is
    isolated: the join waits for all of them to settle, never cancels a
    sibling, and replaces a failed result with an empty one.
    """

    def __init__(
        self,
        *,
        embedder: Embedder,
        success_search: SimilaritySearch,
        failure_search: SimilaritySearch,
        knowledge_search: SimilaritySearch,
        profiles: BusinessProfileStore,
        calendar: CalendarSource,
        settings: RetrievalSettings,
        calendar_days_ahead: int = 7,
    ) -> None:
        self.embedder = embedder
        self.success_search = success_search
        self.failure_search = failure_search
        self.knowledge_search = knowledge_search
        self.profiles = profiles
        self.calendar = calendar
        self.settings = settings
        self.calendar_days_ahead = calendar_days_ahead

    async def embed_query(self, query: str, conversation_context: str = "") -> List[float]:
        text = build_embedding_text(
            query,
            conversation_context,
            tail_chars=self.settings.context_tail_chars,
            max_chars=self.settings.max_embedding_chars,
        )
        try:
            return await asyncio.to_thread(self.embedder.embed, text)
        except EmbeddingGenerationFailed:
            logger.error("Query embedding failed; aborting retrieval")
            raise
        except Exception as exc:  # noqa: BLE001
            logger.error("Query embedding failed; aborting retrieval: %s", exc)
            raise EmbeddingGenerationFailed(f"Embedding provider error: {exc}") from exc

    async def fan_out(
        self,
        query: str,
        tenant_id: str,
        user_id: str,
        needs_calendar: bool,
        *,
        conversation_context: str = "",
    ) -> AggregatedContext:
        vector = await self.embed_query(query, conversation_context)

        settings = self.settings
        launched: List[Tuple[RetrievalSource, Awaitable[Any]]] = [
            (
                RetrievalSource.SUCCESS_EXAMPLES,
                asyncio.to_thread(
                    self.success_search.search,
                    vector,
                    tenant_id,
                    settings.success_threshold,
                    settings.success_match_count,
                ),
            ),
            (
                RetrievalSource.FAILURE_EXAMPLES,
                asyncio.to_thread(
                    self.failure_search.search,
                    vector,
                    tenant_id,
                    settings.failure_threshold,
                    settings.failure_match_count,
                ),
            ),
            (
                RetrievalSource.KNOWLEDGE,
                asyncio.to_thread(
                    self.knowledge_search.search,
                    vector,
                    tenant_id,
                    settings.knowledge_threshold,
                    settings.knowledge_match_count,
                ),
            ),
            (RetrievalSource.BUSINESS_PROFILE, asyncio.to_thread(self.profiles.fetch, tenant_id)),
        ]
        if needs_calendar:
            launched.append(
                (
                    RetrievalSource.CALENDAR,
                    asyncio.to_thread(self.calendar.fetch_events, user_id, self.calendar_days_ahead),
                )
            )

        results = await asyncio.gather(*(awaitable for _, awaitable in launched), return_exceptions=True)
        outcomes = [self._outcome(source, result) for (source, _), result in zip(launched, results)]
        return self._merge(outcomes, needs_calendar)

    @staticmethod
    def _outcome(source: RetrievalSource, result: Any) -> RetrievalOutcome:
        if isinstance(result, CalendarNotConnected):
            logger.info("Calendar not connected; continuing without availability")
            return RetrievalOutcome(source=source, status=OutcomeStatus.REJECTED, error=CalendarFetchFailed(result))
        if isinstance(result, BaseException):
            error = CalendarFetchFailed(result) if source is RetrievalSource.CALENDAR else SourceUnavailable(source, result)
            logger.warning("Retrieval degraded to empty result: %s", error)
            return RetrievalOutcome(source=source, status=OutcomeStatus.REJECTED, error=error)
        return RetrievalOutcome(source=source, status=OutcomeStatus.FULFILLED, value=result)

    @staticmethod
    def _merge(outcomes: List[RetrievalOutcome], needs_calendar: bool) -> AggregatedContext:
        context = AggregatedContext(outcomes=outcomes)
        if needs_calendar:
            # Attempted: the field becomes a list even when the fetch failed.
            context.calendar_events = []
            context.calendar_status = CalendarStatus.UNAVAILABLE

        for outcome in outcomes:
            if not outcome.fulfilled:
                continue
            if outcome.source is RetrievalSource.SUCCESS_EXAMPLES:
                context.success_examples = list(outcome.value or [])
            elif outcome.source is RetrievalSource.FAILURE_EXAMPLES:
                context.failure_examples = list(outcome.value or [])
            elif outcome.source is RetrievalSource.KNOWLEDGE:
                context.knowledge_docs = list(outcome.value or [])
            elif outcome.source is RetrievalSource.BUSINESS_PROFILE:
                context.business_profile = outcome.value
            elif outcome.source is RetrievalSource.CALENDAR:
                context.calendar_events = list(outcome.value or [])
                context.calendar_status = CalendarStatus.CONNECTED

        logger.info(
            "Context gathered: %d success, %d failure, %d knowledge, profile=%s, calendar=%s",
            len(context.success_examples),
            len(context.failure_examples),
            len(context.knowledge_docs),
            context.business_profile is not None,
            context.calendar_status.value,
        )
        return context
