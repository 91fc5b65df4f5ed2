from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from supabase import Client, create_client

from ..config.settings import SupabaseSettings
from ..domain.errors import SupabaseNotInitializedError


@dataclass
class SupabaseGateway:
    """Thin wrapper around the Supabase Python client using the service-role key."""

    settings: SupabaseSettings
    _client: Optional[Client] = None

    def ensure_client(self) -> Client:
        if self._client is not None:
            return self._client
        if not self.settings.is_configured:
            raise SupabaseNotInitializedError("Supabase settings are missing URL or service-role key.")
        self._client = create_client(self.settings.url, self.settings.service_role_key)
        return self._client

    def is_ready(self) -> bool:
        return self._client is not None

    def table(self, name: str):
        return self.ensure_client().table(name)

    def rpc(self, name: str, params: Dict[str, Any]):
        return self.ensure_client().rpc(name, params)
