from __future__ import annotations

from typing import Dict, Optional

from .enums import PlanType

# Monthly credit allowance per plan. ``None`` means unlimited or negotiated.
PLAN_MONTHLY_CREDITS: Dict[PlanType, Optional[float]] = {
    PlanType.INDIVIDUAL: 20,
    PlanType.TEAM: 400,
    PlanType.BUSINESS: 1000,
    PlanType.ENTERPRISE: None,
    PlanType.PS_STARTER: None,
    PlanType.PS_SCALE: None,
    PlanType.PS_GROWTH: None,
    PlanType.PS_PRO: None,
    PlanType.PS_MAX: None,
}


def monthly_credits_for(plan: Optional[str]) -> Optional[float]:
    """Return the base monthly limit for ``plan``; unknown plans are unlimited."""

    if not plan:
        return None
    try:
        plan_type = PlanType(plan)
    except ValueError:
        return None
    return PLAN_MONTHLY_CREDITS.get(plan_type)
