from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...domain import QuotaState
from ...domain.plans import monthly_credits_for
from ..supabase import SupabaseGateway


@dataclass(slots=True)
class QuotaRepository:
    """Reads and writes the monthly credit columns of a tenant's company row."""

    gateway: SupabaseGateway
    table_name: str

    def read(self, tenant_id: str) -> Optional[QuotaState]:
        response = (
            self.gateway.table(self.table_name)
            .select("training_plan, monthly_credits_used, monthly_credits_reset_at, extra_monthly_credits")
            .eq("id", tenant_id)
            .maybe_single()
            .execute()
        )
        if response is None or not response.data:
            return None
        record = response.data
        return QuotaState.from_record(record, base_limit=monthly_credits_for(record.get("training_plan")))

    def write(self, tenant_id: str, state: QuotaState) -> None:
        (
            self.gateway.table(self.table_name)
            .update(state.to_record())
            .eq("id", tenant_id)
            .execute()
        )
