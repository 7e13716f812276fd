"""30-day rule evaluation.

If ESS shares are disposed of within 30 days of the deferred taxing point,
the taxing point moves to the disposal date (ITAA 1997 s83A-115(5)).
"""

import logging
from datetime import date

from esstax.engines.rules import THIRTY_DAY_WINDOW_DAYS, days_between
from esstax.exceptions import InvalidDateOrderError
from esstax.models.results import ThirtyDayRuleResult

logger = logging.getLogger(__name__)


class ThirtyDayRuleEvaluator:
    """Decides whether a sale re-characterizes its vesting event."""

    def __init__(self, window_days: int = THIRTY_DAY_WINDOW_DAYS) -> None:
        self.window_days = window_days

    def evaluate(self, reference_date: date, sale_date: date) -> ThirtyDayRuleResult:
        """Evaluate the rule for a sale ``days_between`` days after vesting.

        The window is inclusive: a sale exactly 30 days after vesting applies.
        """
        if sale_date < reference_date:
            raise InvalidDateOrderError(reference_date, sale_date, "vesting")

        days = days_between(reference_date, sale_date)
        applies = days <= self.window_days
        if applies:
            reason = f"Sale occurred within {self.window_days} days of vesting ({days} days)"
        else:
            reason = f"Sale occurred after {self.window_days}-day period ({days} days)"
        logger.debug("30-day rule %s -> %s: %s", reference_date, sale_date, reason)

        return ThirtyDayRuleResult(
            applies=applies,
            days_between=days,
            reference_date=reference_date,
            sale_date=sale_date,
            reason=reason,
        )
