from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from ..supabase import SupabaseGateway


@dataclass(slots=True)
class SimilaritySearchRepository:
    """Vector search backed by a pgvector ``match_*`` function exposed over RPC."""

    gateway: SupabaseGateway
    function_name: str

    def search(
        self,
        vector: Sequence[float],
        tenant_id: str,
        threshold: float,
        k: int,
    ) -> List[Dict[str, Any]]:
        response = self.gateway.rpc(
            self.function_name,
            {
                "query_embedding": list(vector),
                "company_id_filter": tenant_id,
                "match_threshold": threshold,
                "match_count": k,
            },
        ).execute()
        return list(response.data or [])
