"""Collaborator contracts consumed by the copilot core.

The Supabase and OpenAI implementations live in ``data.repositories`` and
``llm``; tests substitute in-memory fakes.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, Sequence

from ..domain import BusinessProfile, CalendarEvent, ContextPayload, CopilotRequest, QuotaState


class Embedder(Protocol):
    def embed(self, text: str) -> List[float]: ...


class SimilaritySearch(Protocol):
    def search(
        self,
        vector: Sequence[float],
        tenant_id: str,
        threshold: float,
        k: int,
    ) -> List[Dict[str, Any]]: ...


class BusinessProfileStore(Protocol):
    def fetch(self, tenant_id: str) -> Optional[BusinessProfile]: ...


class CalendarSource(Protocol):
    def fetch_events(self, user_id: str, days_ahead: int = 7) -> List[CalendarEvent]: ...


class QuotaStore(Protocol):
    def read(self, tenant_id: str) -> Optional[QuotaState]: ...

    def write(self, tenant_id: str, state: QuotaState) -> None: ...


class Responder(Protocol):
    def respond(self, payload: ContextPayload, request: CopilotRequest) -> str: ...
