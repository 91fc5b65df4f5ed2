from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional
from zoneinfo import ZoneInfo

from ...domain import CalendarEvent, CalendarNotConnected
from ..supabase import SupabaseGateway


@dataclass(slots=True)
class CalendarEventRepository:
    """Reads the synced projection of a seller's external calendar."""

    gateway: SupabaseGateway
    table_name: str
    connections_table: str
    timezone: str

    def is_connected(self, user_id: str) -> bool:
        response = (
            self.gateway.table(self.connections_table)
            .select("id")
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def fetch_events(self, user_id: str, days_ahead: int = 7, *, now: Optional[datetime] = None) -> List[CalendarEvent]:
        if not self.is_connected(user_id):
            raise CalendarNotConnected(f"User '{user_id}' has no calendar connection.")

        today = (now or datetime.now(ZoneInfo(self.timezone))).date()
        window_end = today + timedelta(days=days_ahead + 1)
        # Date-only bounds so all-day rows ("YYYY-MM-DD") compare correctly with timed rows.
        response = (
            self.gateway.table(self.table_name)
            .select("id, title, starts_at, ends_at, attendee_email, status")
            .eq("user_id", user_id)
            .gte("starts_at", today.isoformat())
            .lt("starts_at", window_end.isoformat())
            .neq("status", "cancelled")
            .order("starts_at", desc=False)
            .limit(250)
            .execute()
        )
        return [CalendarEvent.from_record(record) for record in response.data or []]
