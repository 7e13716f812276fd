"""Engine output models."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel

from esstax.models.enums import AppliedRule, Currency
from esstax.models.events import ShareSaleEvent


class CurrencyConversionResult(BaseModel):
    original_amount: Decimal
    original_currency: Currency
    converted_amount: Decimal
    converted_currency: Currency
    exchange_rate: Decimal
    conversion_date: date

    @property
    def was_converted(self) -> bool:
        return not (
            self.exchange_rate == 1 and self.original_currency == self.converted_currency
        )


class ThirtyDayRuleResult(BaseModel):
    applies: bool
    days_between: int
    reference_date: date
    sale_date: date
    reason: str


class CgtDiscountResult(BaseModel):
    eligible: bool
    holding_period_days: int
    discount_rate: Decimal
    gross_capital_gain: Decimal
    discounted_capital_gain: Decimal


class VestingBreakdown(BaseModel):
    """Vesting inputs, in the vesting event's own currency."""

    market_value: Decimal
    cost_base: Decimal
    shares_vested: Decimal
    share_price: Decimal


class SaleEventResult(BaseModel):
    """Effect of one sale on the taxable income of its vesting event."""

    sale: ShareSaleEvent
    thirty_day_rule: ThirtyDayRuleResult
    income_adjustment: Decimal


class TaxableIncomeResult(BaseModel):
    taxable_income: Decimal
    currency: Currency
    calculation: VestingBreakdown
    sale_events: list[SaleEventResult] | None = None
    remaining_shares: Decimal


class CapitalGainsBreakdown(BaseModel):
    """Sale inputs; proceeds and fees are in the sale's own currency."""

    gross_proceeds: Decimal
    total_fees: Decimal
    cost_base: Decimal
    shares_sold: Decimal
    sale_price_per_share: Decimal


class CapitalGainsResult(BaseModel):
    capital_gain: Decimal  # positive = gain, negative = loss
    is_gain: bool
    cost_base: Decimal
    sale_proceeds: Decimal
    net_proceeds: Decimal
    currency: Currency
    applied_rule: AppliedRule
    cgt_discount: CgtDiscountResult
    calculation: CapitalGainsBreakdown


class CombinedTaxResult(BaseModel):
    """Vesting income and capital gain for one vesting event and one sale."""

    taxable_income: Decimal
    capital_gain: Decimal
    thirty_day_rule_applied: bool
    currency: Currency
    vesting_result: TaxableIncomeResult | None
    sale_result: CapitalGainsResult
