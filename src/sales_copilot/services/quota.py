from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime

from ..domain import QuotaCommitFailed, QuotaDecision, QuotaState
from .ports import QuotaStore

logger = logging.getLogger(__name__)


def _same_month(reset_at: datetime, now: datetime) -> bool:
    if reset_at.tzinfo is not None and now.tzinfo is not None:
        reset_at = reset_at.astimezone(now.tzinfo)
    return (reset_at.year, reset_at.month) == (now.year, now.month)


@dataclass(slots=True)
class QuotaGovernor:
    """Admission gate over a tenant's monthly credits.

    ``check`` and ``commit`` are separate, non-transactional round trips. Two
    concurrent requests for the same tenant can both pass ``check`` and push
    ``used`` slightly past the limit; that overshoot is accepted as a soft
    limit and no lock is taken.
    """

    store: QuotaStore

    def check(self, tenant_id: str, now: datetime) -> QuotaDecision:
        state = self.store.read(tenant_id)
        if state is None:
            logger.info("No quota record for tenant %s; treating as unlimited", tenant_id)
            return QuotaDecision.unlimited()

        if not _same_month(state.reset_at, now):
            state.used = 0.0
            state.extra = 0.0
            state.reset_at = now
            self.store.write(tenant_id, state)
            logger.info("Monthly credits reset for tenant %s", tenant_id)

        return self.evaluate(state)

    @staticmethod
    def evaluate(state: QuotaState) -> QuotaDecision:
        if state.base_limit is None:
            return QuotaDecision(allowed=True, remaining=math.inf)
        remaining = state.base_limit + state.extra - state.used
        return QuotaDecision(allowed=remaining > 0, remaining=remaining)

    def commit(self, tenant_id: str, amount: float) -> bool:
        """Record ``amount`` credits as used. Failures are logged and reported as ``False``."""

        try:
            state = self.store.read(tenant_id)
            if state is None:
                return False
            state.used += amount
            self.store.write(tenant_id, state)
        except Exception as exc:  # noqa: BLE001
            failure = QuotaCommitFailed(f"Could not record {amount:g} credits for tenant '{tenant_id}': {exc}")
            logger.error("%s", failure, exc_info=exc)
            return False
        logger.debug("Committed %g credits for tenant %s (used=%g)", amount, tenant_id, state.used)
        return True
