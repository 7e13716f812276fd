"""Tax computation engines."""

from esstax.engines.cgt_discount import CgtDiscountEvaluator
from esstax.engines.currency import CurrencyConverter
from esstax.engines.outcome import Failure, Outcome, Success, attempt
from esstax.engines.reconciler import VestingSaleReconciler
from esstax.engines.thirty_day import ThirtyDayRuleEvaluator

__all__ = [
    "CgtDiscountEvaluator",
    "CurrencyConverter",
    "Failure",
    "Outcome",
    "Success",
    "ThirtyDayRuleEvaluator",
    "VestingSaleReconciler",
    "attempt",
]
