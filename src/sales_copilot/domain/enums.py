from __future__ import annotations

from enum import Enum


class RetrievalSource(str, Enum):
    SUCCESS_EXAMPLES = "success_examples"
    FAILURE_EXAMPLES = "failure_examples"
    KNOWLEDGE = "knowledge"
    BUSINESS_PROFILE = "business_profile"
    CALENDAR = "calendar"


class OutcomeStatus(str, Enum):
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


class CalendarStatus(str, Enum):
    NOT_REQUESTED = "not_requested"
    CONNECTED = "connected"
    UNAVAILABLE = "unavailable"


class DayStatus(str, Enum):
    FREE_ALL_DAY = "free_all_day"
    AVAILABLE = "available"
    FULLY_BOOKED = "fully_booked"
    BLOCKED_ALL_DAY = "blocked_all_day"
    CLOSED = "closed"


class PlanType(str, Enum):
    INDIVIDUAL = "individual"
    TEAM = "team"
    BUSINESS = "business"
    ENTERPRISE = "enterprise"
    PS_STARTER = "ps_starter"
    PS_SCALE = "ps_scale"
    PS_GROWTH = "ps_growth"
    PS_PRO = "ps_pro"
    PS_MAX = "ps_max"


class BusinessType(str, Enum):
    B2B = "B2B"
    B2C = "B2C"
