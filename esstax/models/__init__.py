"""Data models for the ESS tax engine."""

from esstax.models.enums import AppliedRule, Currency
from esstax.models.events import ShareSaleEvent, VestingEvent
from esstax.models.results import (
    CapitalGainsBreakdown,
    CapitalGainsResult,
    CgtDiscountResult,
    CombinedTaxResult,
    CurrencyConversionResult,
    SaleEventResult,
    TaxableIncomeResult,
    ThirtyDayRuleResult,
    VestingBreakdown,
)

__all__ = [
    "AppliedRule",
    "CapitalGainsBreakdown",
    "CapitalGainsResult",
    "CgtDiscountResult",
    "CombinedTaxResult",
    "Currency",
    "CurrencyConversionResult",
    "SaleEventResult",
    "ShareSaleEvent",
    "TaxableIncomeResult",
    "ThirtyDayRuleResult",
    "VestingBreakdown",
    "VestingEvent",
]
