from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional

from ..core.availability import build_availability_report
from ..domain import CalendarNotConnected, DayAvailability
from .ports import CalendarSource

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CalendarService:
    source: CalendarSource
    clock: Callable[[], datetime]
    days_ahead: int = 7

    def availability(self, user_id: str, *, now: Optional[datetime] = None) -> Optional[List[DayAvailability]]:
        """Return the seven-day report, or ``None`` when the user has no calendar connected."""

        moment = now or self.clock()
        try:
            events = self.source.fetch_events(user_id, self.days_ahead)
        except CalendarNotConnected:
            logger.info("Calendar not connected for user %s", user_id)
            return None
        return build_availability_report(events, moment, self.days_ahead)
