"""Error taxonomy shared by the copilot services.

Only :class:`QuotaExceeded` and :class:`EmbeddingGenerationFailed` are meant to
reach the request handler. The remaining types describe degraded retrievals and
bookkeeping failures that are logged and recovered locally.
"""

from __future__ import annotations

from typing import Optional

from .enums import RetrievalSource


class CopilotError(RuntimeError):
    """Base class for errors raised by the copilot core."""

    code = "copilot_error"


class QuotaExceeded(CopilotError):
    """Raised when a tenant has no credits left for the current month."""

    code = "quota_exceeded"

    def __init__(self, tenant_id: str, remaining: float) -> None:
        super().__init__(f"Tenant '{tenant_id}' has exhausted its monthly credits (remaining={remaining:g}).")
        self.tenant_id = tenant_id
        self.remaining = remaining


class EmbeddingGenerationFailed(CopilotError):
    """Raised when the query embedding could not be produced."""

    code = "embedding_failed"


class SourceUnavailable(CopilotError):
    code = "source_unavailable"

    def __init__(self, source: RetrievalSource, cause: Optional[BaseException] = None) -> None:
        detail = f": {cause}" if cause else ""
        super().__init__(f"Retrieval source '{source.value}' failed{detail}")
        self.source = source
        self.cause = cause


class CalendarFetchFailed(SourceUnavailable):
    code = "calendar_unavailable"

    def __init__(self, cause: Optional[BaseException] = None) -> None:
        super().__init__(RetrievalSource.CALENDAR, cause)


class CalendarNotConnected(CopilotError):
    """Raised by calendar sources when the user never connected a calendar."""

    code = "calendar_not_connected"


class QuotaCommitFailed(CopilotError):
    code = "quota_commit_failed"


class SupabaseNotInitializedError(CopilotError):
    """Raised when accessing the Supabase client before it is configured."""

    code = "supabase_not_configured"
