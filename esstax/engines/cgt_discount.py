"""CGT discount evaluation.

A 50% discount applies to a capital gain on an asset held for more than
365 days. Losses are never discounted, even when the holding period
qualifies.
"""

from datetime import date
from decimal import Decimal

from esstax.engines.rules import (
    CGT_DISCOUNT_RATE,
    CGT_MIN_HOLDING_DAYS,
    days_between,
    round_cents,
    to_decimal,
)
from esstax.exceptions import InvalidDateOrderError
from esstax.models.results import CgtDiscountResult


class CgtDiscountEvaluator:
    """Computes holding period and discounted capital gain."""

    def evaluate(
        self, acquisition_date: date, sale_date: date, gross_gain: Decimal
    ) -> CgtDiscountResult:
        if sale_date < acquisition_date:
            raise InvalidDateOrderError(acquisition_date, sale_date, "acquisition")

        gross_gain = to_decimal(gross_gain)
        holding_days = days_between(acquisition_date, sale_date)
        eligible = holding_days > CGT_MIN_HOLDING_DAYS
        rate = CGT_DISCOUNT_RATE if eligible and gross_gain > 0 else Decimal("0")

        return CgtDiscountResult(
            eligible=eligible,
            holding_period_days=holding_days,
            discount_rate=rate,
            gross_capital_gain=round_cents(gross_gain),
            discounted_capital_gain=round_cents(gross_gain * (1 - rate)),
        )

    @staticmethod
    def not_evaluated(gross_gain: Decimal) -> CgtDiscountResult:
        """Result used when no acquisition date is known: no discount."""
        gross = round_cents(to_decimal(gross_gain))
        return CgtDiscountResult(
            eligible=False,
            holding_period_days=0,
            discount_rate=Decimal("0"),
            gross_capital_gain=gross,
            discounted_capital_gain=gross,
        )
