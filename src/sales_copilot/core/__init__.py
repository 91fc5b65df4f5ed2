"""Pure decision logic: calendar availability and scheduling intent."""

from .availability import (
    build_availability_report,
    compute_free_slots,
    render_availability,
)
from .intent import needs_calendar

__all__ = [
    "build_availability_report",
    "compute_free_slots",
    "needs_calendar",
    "render_availability",
]
