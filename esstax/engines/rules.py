"""ESS tax rule configuration.

Thresholds and rates used by the 30-day rule and CGT discount evaluators,
and the reporting currency every result is expressed in.
Never hardcode these in computation functions.

Sources:
  - ATO: Employee share schemes, deferred taxing point and the 30-day rule
    (ITAA 1997 s83A-115(5)).
  - ATO: CGT discount for assets held at least 12 months (ITAA 1997 s115-25).
"""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from esstax.models.enums import Currency

REPORTING_CURRENCY = Currency.AUD

# A sale this many days or fewer after vesting moves the taxing point to the sale.
THIRTY_DAY_WINDOW_DAYS = 30

# Holding period must be strictly greater than this for the discount.
CGT_MIN_HOLDING_DAYS = 365
CGT_DISCOUNT_RATE = Decimal("0.5")

CENTS = Decimal("0.01")


def round_cents(value: Decimal) -> Decimal:
    """Round half-up to two decimal places."""
    return value.quantize(CENTS, ROUND_HALF_UP)


def days_between(start: date, end: date) -> int:
    """Whole calendar days from ``start`` to ``end``."""
    return (end - start).days


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))
