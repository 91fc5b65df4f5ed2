from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class LlmSettings:
    api_key: Optional[str]
    chat_model: str
    embedding_model: str
    base_url: Optional[str]
    organization: Optional[str]
    temperature: float
    max_tokens: int

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.chat_model and self.embedding_model)

    @property
    def missing_env_vars(self) -> list[str]:
        missing = []
        if not self.api_key:
            missing.append("OPENAI_API_KEY")
        if not self.chat_model:
            missing.append("OPENAI_CHAT_MODEL")
        if not self.embedding_model:
            missing.append("OPENAI_EMBEDDING_MODEL")
        return missing


@dataclass(frozen=True)
class SupabaseSettings:
    url: Optional[str]
    service_role_key: Optional[str]

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.service_role_key)


@dataclass(frozen=True)
class StorageSettings:
    companies_table: str
    company_data_table: str
    company_type_table: str
    calendar_events_table: str
    calendar_connections_table: str
    success_examples_rpc: str
    failure_examples_rpc: str
    knowledge_rpc: str


@dataclass(frozen=True)
class RetrievalSettings:
    success_match_count: int
    success_threshold: float
    failure_match_count: int
    failure_threshold: float
    knowledge_match_count: int
    knowledge_threshold: float
    context_tail_chars: int
    max_embedding_chars: int
    intent_window: int


@dataclass(frozen=True)
class AvailabilitySettings:
    timezone: str
    days_ahead: int


@dataclass(frozen=True)
class QuotaSettings:
    copilot_call_cost: float


@dataclass(frozen=True)
class HttpSettings:
    host: str
    port: int


@dataclass(frozen=True)
class AppSettings:
    llm: LlmSettings
    supabase: SupabaseSettings
    storage: StorageSettings
    retrieval: RetrievalSettings
    availability: AvailabilitySettings
    quota: QuotaSettings
    http: HttpSettings


def _float_from_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    llm = LlmSettings(
        api_key=os.getenv("OPENAI_API_KEY"),
        chat_model=os.getenv("OPENAI_CHAT_MODEL", "gpt-4.1"),
        embedding_model=os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small"),
        base_url=os.getenv("OPENAI_BASE_URL"),
        organization=os.getenv("OPENAI_ORG"),
        temperature=_float_from_env("OPENAI_TEMPERATURE", 0.7),
        max_tokens=_int_from_env("OPENAI_MAX_TOKENS", 2000),
    )

    supabase = SupabaseSettings(
        url=os.getenv("SUPABASE_URL"),
        service_role_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY"),
    )

    storage = StorageSettings(
        companies_table=os.getenv("SUPABASE_COMPANIES_TABLE", "companies"),
        company_data_table=os.getenv("SUPABASE_COMPANY_DATA_TABLE", "company_data"),
        company_type_table=os.getenv("SUPABASE_COMPANY_TYPE_TABLE", "company_type"),
        calendar_events_table=os.getenv("SUPABASE_CALENDAR_EVENTS_TABLE", "calendar_events"),
        calendar_connections_table=os.getenv("SUPABASE_CALENDAR_CONNECTIONS_TABLE", "google_calendar_connections"),
        success_examples_rpc=os.getenv("SUPABASE_SUCCESS_EXAMPLES_RPC", "match_followup_success"),
        failure_examples_rpc=os.getenv("SUPABASE_FAILURE_EXAMPLES_RPC", "match_followup_failure"),
        knowledge_rpc=os.getenv("SUPABASE_KNOWLEDGE_RPC", "match_company_knowledge"),
    )

    retrieval = RetrievalSettings(
        success_match_count=_int_from_env("COPILOT_SUCCESS_MATCH_COUNT", 3),
        success_threshold=_float_from_env("COPILOT_SUCCESS_THRESHOLD", 0.4),
        failure_match_count=_int_from_env("COPILOT_FAILURE_MATCH_COUNT", 2),
        failure_threshold=_float_from_env("COPILOT_FAILURE_THRESHOLD", 0.4),
        knowledge_match_count=_int_from_env("COPILOT_KNOWLEDGE_MATCH_COUNT", 3),
        knowledge_threshold=_float_from_env("COPILOT_KNOWLEDGE_THRESHOLD", 0.5),
        context_tail_chars=_int_from_env("COPILOT_CONTEXT_TAIL_CHARS", 500),
        max_embedding_chars=_int_from_env("COPILOT_MAX_EMBEDDING_CHARS", 8000),
        intent_window=_int_from_env("COPILOT_INTENT_WINDOW", 4),
    )

    availability = AvailabilitySettings(
        timezone=os.getenv("COPILOT_TIMEZONE", "America/Sao_Paulo"),
        days_ahead=_int_from_env("COPILOT_CALENDAR_DAYS_AHEAD", 7),
    )

    quota = QuotaSettings(
        copilot_call_cost=_float_from_env("COPILOT_CALL_COST", 0.2),
    )

    http = HttpSettings(
        host=os.getenv("COPILOT_HTTP_HOST", "127.0.0.1"),
        port=_int_from_env("COPILOT_HTTP_PORT", 8000),
    )

    return AppSettings(
        llm=llm,
        supabase=supabase,
        storage=storage,
        retrieval=retrieval,
        availability=availability,
        quota=quota,
        http=http,
    )
