"""Vesting/sale reconciliation engine.

Combines RSU vesting income with the sales that consume the vested shares:

- Vesting income = market value at vest - cost base, in the reporting currency.
- A sale within 30 days of vesting moves the taxing point to the sale: the
  sold shares' proportional vesting income is replaced by sale proceeds less
  proportional cost base and fees.
- A later sale leaves vesting income untouched and is a separate CGT event.

Intermediate figures are kept unrounded; each public operation rounds its
outputs to cents once. Currency conversions of sale proceeds and fees round
at the point of conversion.
"""

import logging
from datetime import date
from decimal import Decimal

from esstax.engines.cgt_discount import CgtDiscountEvaluator
from esstax.engines.currency import CurrencyConverter
from esstax.engines.rules import round_cents, to_decimal
from esstax.engines.thirty_day import ThirtyDayRuleEvaluator
from esstax.exceptions import MissingExchangeRateError, OverAllocationError
from esstax.models.enums import AppliedRule, Currency
from esstax.models.events import ShareSaleEvent, VestingEvent
from esstax.models.results import (
    CapitalGainsBreakdown,
    CapitalGainsResult,
    CombinedTaxResult,
    SaleEventResult,
    TaxableIncomeResult,
    VestingBreakdown,
)

logger = logging.getLogger(__name__)


class VestingSaleReconciler:
    """Apportions a vesting event between 30-day sales and later sales/held shares."""

    def __init__(
        self,
        converter: CurrencyConverter | None = None,
        thirty_day: ThirtyDayRuleEvaluator | None = None,
        cgt_discount: CgtDiscountEvaluator | None = None,
    ) -> None:
        self.converter = converter or CurrencyConverter()
        self.thirty_day = thirty_day or ThirtyDayRuleEvaluator()
        self.cgt_discount = cgt_discount or CgtDiscountEvaluator()

    @property
    def reporting_currency(self) -> Currency:
        return self.converter.reporting_currency

    def vesting_income(self, vesting: VestingEvent) -> Decimal:
        """Unrounded taxable income of the whole tranche, in the reporting currency."""
        return self.converter.to_reporting(
            vesting.market_value - vesting.cost_base,
            vesting.currency,
            vesting.exchange_rate,
        )

    def reconcile(
        self,
        vesting: VestingEvent,
        sales: list[ShareSaleEvent] | None = None,
    ) -> TaxableIncomeResult:
        """Compute taxable income for a vesting event and the sales that consume it.

        Args:
            vesting: The RSU vesting event.
            sales: Sales of shares from this tranche, in any order. They are
                processed by ascending sale date.

        Returns:
            TaxableIncomeResult with one SaleEventResult per sale and the
            shares still held.
        """
        ordered = sorted(sales or [], key=lambda s: s.sale_date)
        self._check_allocation(vesting, ordered)
        self._check_exchange_rates(ordered)

        baseline = self.vesting_income(vesting)
        cost_base = self._vesting_cost_base(vesting)
        total = baseline
        consumed = Decimal("0")
        sale_results: list[SaleEventResult] = []

        for sale in ordered:
            rule = self.thirty_day.evaluate(vesting.vest_date, sale.sale_date)
            adjustment = Decimal("0")
            if rule.applies:
                ratio = self._ratio(sale.shares_sold, vesting.shares_vested)
                proceeds, fees = self._sale_amounts(sale)
                adjustment = (proceeds - cost_base * ratio - fees) - baseline * ratio
            total += adjustment
            consumed += sale.shares_sold
            sale_results.append(
                SaleEventResult(
                    sale=sale,
                    thirty_day_rule=rule,
                    income_adjustment=round_cents(adjustment),
                )
            )

        logger.debug(
            "Reconciled vest %s: baseline=%s total=%s sales=%d",
            vesting.vest_date, baseline, total, len(ordered),
        )
        return TaxableIncomeResult(
            taxable_income=round_cents(total),
            currency=self.reporting_currency,
            calculation=VestingBreakdown(
                market_value=vesting.market_value,
                cost_base=vesting.cost_base,
                shares_vested=vesting.shares_vested,
                share_price=vesting.share_price,
            ),
            sale_events=sale_results if sales else None,
            remaining_shares=vesting.shares_vested - consumed,
        )

    def calculate_capital_gains(
        self,
        sale: ShareSaleEvent,
        cost_base: Decimal,
        acquisition_date: date | None = None,
    ) -> CapitalGainsResult:
        """Capital gain on a sale not captured by the 30-day rule.

        Capital gain = proceeds - fees - cost base, all in the reporting
        currency, then discounted if held long enough.

        Args:
            sale: The share sale.
            cost_base: Cost base of the sold shares in the reporting currency
                (typically market value at vest).
            acquisition_date: Falls back to ``sale.acquisition_date``. Without
                either, no CGT discount is applied.
        """
        cost_base = to_decimal(cost_base)
        proceeds, fees = self._sale_amounts(sale)
        net_proceeds = proceeds - fees
        gross_gain = net_proceeds - cost_base

        acquired = acquisition_date or sale.acquisition_date
        if acquired is not None:
            discount = self.cgt_discount.evaluate(acquired, sale.sale_date, gross_gain)
        else:
            discount = CgtDiscountEvaluator.not_evaluated(gross_gain)

        capital_gain = discount.discounted_capital_gain
        return CapitalGainsResult(
            capital_gain=capital_gain,
            is_gain=capital_gain > 0,
            cost_base=round_cents(cost_base),
            sale_proceeds=round_cents(proceeds),
            net_proceeds=round_cents(net_proceeds),
            currency=self.reporting_currency,
            applied_rule=AppliedRule.STANDARD_CGT,
            cgt_discount=discount,
            calculation=self._sale_breakdown(sale, cost_base),
        )

    def process_vesting_and_sale(
        self, vesting: VestingEvent, sale: ShareSaleEvent
    ) -> CombinedTaxResult:
        """Vesting income and capital gain for a vesting event with exactly one sale.

        Within 30 days there is no separate CGT event. Otherwise the full
        vesting income stands and the sold shares carry a proportional share
        of it as their cost base.
        """
        reconciled = self.reconcile(vesting, [sale])
        rule = reconciled.sale_events[0].thirty_day_rule
        ratio = self._ratio(sale.shares_sold, vesting.shares_vested)

        if rule.applies:
            proceeds, fees = self._sale_amounts(sale)
            cost_base = self._vesting_cost_base(vesting) * ratio
            sale_result = CapitalGainsResult(
                capital_gain=Decimal("0"),
                is_gain=False,
                cost_base=round_cents(cost_base),
                sale_proceeds=round_cents(proceeds),
                net_proceeds=round_cents(proceeds - fees),
                currency=self.reporting_currency,
                applied_rule=AppliedRule.THIRTY_DAY,
                cgt_discount=CgtDiscountEvaluator.not_evaluated(Decimal("0")),
                calculation=self._sale_breakdown(sale, cost_base),
            )
            return CombinedTaxResult(
                taxable_income=reconciled.taxable_income,
                capital_gain=Decimal("0"),
                thirty_day_rule_applied=True,
                currency=self.reporting_currency,
                vesting_result=None,
                sale_result=sale_result,
            )

        cost_base = self.vesting_income(vesting) * ratio
        sale_result = self.calculate_capital_gains(sale, cost_base, vesting.vest_date)
        return CombinedTaxResult(
            taxable_income=reconciled.taxable_income,
            capital_gain=sale_result.capital_gain,
            thirty_day_rule_applied=False,
            currency=self.reporting_currency,
            vesting_result=reconciled,
            sale_result=sale_result,
        )

    # --- helpers ---

    @staticmethod
    def _check_allocation(vesting: VestingEvent, ordered: list[ShareSaleEvent]) -> None:
        running = Decimal("0")
        for sale in ordered:
            running += sale.shares_sold
            if running > vesting.shares_vested:
                raise OverAllocationError(running, vesting.shares_vested)

    def _check_exchange_rates(self, ordered: list[ShareSaleEvent]) -> None:
        for sale in ordered:
            if sale.currency != self.reporting_currency and sale.exchange_rate is None:
                raise MissingExchangeRateError(sale.currency, "sales")

    @staticmethod
    def _ratio(shares_sold: Decimal, shares_vested: Decimal) -> Decimal:
        if shares_vested == 0:
            return Decimal("0")
        return shares_sold / shares_vested

    def _vesting_cost_base(self, vesting: VestingEvent) -> Decimal:
        return self.converter.to_reporting(
            vesting.cost_base, vesting.currency, vesting.exchange_rate
        )

    def _sale_amounts(self, sale: ShareSaleEvent) -> tuple[Decimal, Decimal]:
        """Gross proceeds and total fees in the reporting currency."""
        if sale.currency == self.reporting_currency:
            return sale.gross_proceeds, sale.total_fees
        if sale.exchange_rate is None:
            raise MissingExchangeRateError(sale.currency, "sales")

        proceeds = self.converter.convert(
            sale.gross_proceeds, sale.exchange_rate, sale.sale_date, sale.currency
        )
        fees = self.converter.convert(
            sale.total_fees, sale.exchange_rate, sale.sale_date, sale.currency
        )
        return proceeds.converted_amount, fees.converted_amount

    @staticmethod
    def _sale_breakdown(sale: ShareSaleEvent, cost_base: Decimal) -> CapitalGainsBreakdown:
        return CapitalGainsBreakdown(
            gross_proceeds=sale.gross_proceeds,
            total_fees=sale.total_fees,
            cost_base=round_cents(cost_base),
            shares_sold=sale.shares_sold,
            sale_price_per_share=sale.sale_price_per_share,
        )
