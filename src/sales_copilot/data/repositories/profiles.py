from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ...domain import BusinessProfile
from ..supabase import SupabaseGateway


@dataclass(slots=True)
class BusinessProfileRepository:
    gateway: SupabaseGateway
    table_name: str
    type_table_name: str

    def fetch(self, tenant_id: str) -> Optional[BusinessProfile]:
        response = (
            self.gateway.table(self.table_name)
            .select("*")
            .eq("company_id", tenant_id)
            .maybe_single()
            .execute()
        )
        if response is None or not response.data:
            return None
        return BusinessProfile.from_record(response.data, business_type=self._business_type(tenant_id))

    def _business_type(self, tenant_id: str) -> Optional[str]:
        response = (
            self.gateway.table(self.type_table_name)
            .select("type")
            .eq("company_id", tenant_id)
            .maybe_single()
            .execute()
        )
        if response is None or not response.data:
            return None
        return response.data.get("type")
