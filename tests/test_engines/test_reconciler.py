"""Tests for vesting/sale reconciliation.

Vesting income = (share price x shares vested - cost base), converted to AUD.
Sales within 30 days of vesting replace their proportional share of that
income with sale proceeds less proportional cost base and fees.
"""

from datetime import date
from decimal import Decimal

import pytest

from esstax.engines.reconciler import VestingSaleReconciler
from esstax.exceptions import (
    ErrorKind,
    InvalidDateOrderError,
    MissingExchangeRateError,
    OverAllocationError,
)
from esstax.models.enums import Currency
from esstax.models.events import ShareSaleEvent, VestingEvent


def _aud_sale(sale_date: date, shares: str, price: str, fee: str = "0") -> ShareSaleEvent:
    return ShareSaleEvent(
        sale_date=sale_date,
        shares_sold=Decimal(shares),
        sale_price_per_share=Decimal(price),
        currency=Currency.AUD,
        brokerage_commission=Decimal(fee),
    )


class TestVestingOnly:
    def test_zero_cost_base(self, reconciler: VestingSaleReconciler):
        vesting = VestingEvent(
            vest_date=date(2025, 3, 1),
            share_price=Decimal("50"),
            shares_vested=Decimal("250"),
            cost_base=Decimal("0"),
            currency=Currency.AUD,
        )
        result = reconciler.reconcile(vesting)

        assert result.taxable_income == Decimal("12500.00")
        assert result.currency == Currency.AUD
        assert result.calculation.market_value == Decimal("12500")
        assert result.calculation.cost_base == Decimal("0")
        assert result.calculation.shares_vested == Decimal("250")
        assert result.calculation.share_price == Decimal("50")
        assert result.sale_events is None
        assert result.remaining_shares == Decimal("250")

    def test_non_zero_cost_base(self, reconciler: VestingSaleReconciler):
        vesting = VestingEvent(
            vest_date=date(2025, 6, 1),
            share_price=Decimal("70"),
            shares_vested=Decimal("100"),
            cost_base=Decimal("500"),
            currency=Currency.AUD,
        )
        result = reconciler.reconcile(vesting)
        assert result.taxable_income == Decimal("6500.00")
        assert result.calculation.market_value == Decimal("7000")

    def test_usd_vesting_converted(self, reconciler: VestingSaleReconciler):
        """USD $4,000 / 0.65 = AUD $6,153.85."""
        vesting = VestingEvent(
            vest_date=date(2025, 3, 15),
            share_price=Decimal("40"),
            shares_vested=Decimal("100"),
            currency=Currency.USD,
            exchange_rate=Decimal("0.65"),
        )
        result = reconciler.reconcile(vesting)
        assert result.taxable_income == Decimal("6153.85")
        assert result.currency == Currency.AUD
        assert result.calculation.share_price == Decimal("40")

    def test_fractional_shares(self, reconciler: VestingSaleReconciler):
        # 45.67 x 123.5 = 5640.245; less 100.25 = 5539.995 -> 5540.00
        vesting = VestingEvent(
            vest_date=date(2025, 1, 1),
            share_price=Decimal("45.67"),
            shares_vested=Decimal("123.5"),
            cost_base=Decimal("100.25"),
            currency=Currency.AUD,
        )
        result = reconciler.reconcile(vesting)
        assert result.taxable_income == Decimal("5540.00")
        assert result.remaining_shares == Decimal("123.5")

    def test_usd_vesting_without_rate(self, reconciler: VestingSaleReconciler):
        vesting = VestingEvent(
            vest_date=date(2025, 1, 1),
            share_price=Decimal("40"),
            shares_vested=Decimal("100"),
            currency=Currency.USD,
        )
        with pytest.raises(
            MissingExchangeRateError, match="Exchange rate required for USD currency conversion"
        ):
            reconciler.reconcile(vesting)

    def test_empty_sales_list(self, reconciler: VestingSaleReconciler, aud_vesting: VestingEvent):
        result = reconciler.reconcile(aud_vesting, [])
        assert result.taxable_income == Decimal("12000.00")
        assert result.sale_events is None


class TestThirtyDaySales:
    def test_same_day_usd_sale(
        self,
        reconciler: VestingSaleReconciler,
        usd_vesting: VestingEvent,
        usd_same_day_sale: ShareSaleEvent,
    ):
        """Proceeds 9000 / 0.63 = 14285.71 AUD less fees 10 / 0.63 = 15.87 AUD."""
        result = reconciler.reconcile(usd_vesting, [usd_same_day_sale])

        assert result.taxable_income == Decimal("14269.84")
        assert result.remaining_shares == Decimal("0")
        assert len(result.sale_events) == 1
        line = result.sale_events[0]
        assert line.thirty_day_rule.applies is True
        assert line.thirty_day_rule.days_between == 0
        assert line.income_adjustment == Decimal("-15.87")

    def test_usd_sale_with_different_rate(
        self, reconciler: VestingSaleReconciler, usd_vesting: VestingEvent
    ):
        # 9400 / 0.64 = 14687.50; 12 / 0.64 = 18.75
        sale = ShareSaleEvent(
            sale_date=date(2025, 4, 5),
            shares_sold=Decimal("200"),
            sale_price_per_share=Decimal("47"),
            currency=Currency.USD,
            exchange_rate=Decimal("0.64"),
            brokerage_commission=Decimal("12"),
        )
        result = reconciler.reconcile(usd_vesting, [sale])
        assert result.taxable_income == Decimal("14668.75")
        assert result.remaining_shares == Decimal("0")

    def test_partial_sale(self, reconciler: VestingSaleReconciler):
        """200 held x $50 = $10,000 plus (100 x $60 - $25) = $5,975."""
        vesting = VestingEvent(
            vest_date=date(2025, 6, 1),
            share_price=Decimal("50"),
            shares_vested=Decimal("300"),
            currency=Currency.AUD,
        )
        sale = _aud_sale(date(2025, 6, 15), "100", "60", fee="25")
        result = reconciler.reconcile(vesting, [sale])

        assert result.taxable_income == Decimal("15975.00")
        assert result.remaining_shares == Decimal("200")
        assert result.sale_events[0].income_adjustment == Decimal("975.00")

    def test_proportional_cost_base(self, reconciler: VestingSaleReconciler):
        # baseline 100 x 10 - 200 = 800; half sold at 12: 600 - 100 replaces 400
        vesting = VestingEvent(
            vest_date=date(2025, 6, 1),
            share_price=Decimal("10"),
            shares_vested=Decimal("100"),
            cost_base=Decimal("200"),
            currency=Currency.AUD,
        )
        sale = _aud_sale(date(2025, 6, 20), "50", "12")
        result = reconciler.reconcile(vesting, [sale])
        assert result.taxable_income == Decimal("900.00")

    def test_usd_sale_without_rate(
        self, reconciler: VestingSaleReconciler, usd_vesting: VestingEvent
    ):
        sale = ShareSaleEvent(
            sale_date=date(2025, 4, 2),
            shares_sold=Decimal("10"),
            sale_price_per_share=Decimal("45"),
            currency=Currency.USD,
        )
        with pytest.raises(MissingExchangeRateError, match="USD sales"):
            reconciler.reconcile(usd_vesting, [sale])


class TestLaterSales:
    def test_sale_after_window_leaves_income(self, reconciler: VestingSaleReconciler):
        vesting = VestingEvent(
            vest_date=date(2024, 6, 1),
            share_price=Decimal("50"),
            shares_vested=Decimal("250"),
            currency=Currency.AUD,
        )
        sale = _aud_sale(date(2024, 12, 1), "100", "70", fee="25")
        result = reconciler.reconcile(vesting, [sale])

        assert result.taxable_income == Decimal("12500.00")
        assert result.remaining_shares == Decimal("150")
        assert result.sale_events[0].thirty_day_rule.applies is False
        assert result.sale_events[0].thirty_day_rule.days_between > 30
        assert result.sale_events[0].income_adjustment == Decimal("0.00")

    def test_mixed_rule_application(
        self, reconciler: VestingSaleReconciler, aud_vesting: VestingEvent
    ):
        """$12,000 baseline; 100 sh after 19 days replace $4,000 with $4,485."""
        sales = [
            _aud_sale(date(2025, 3, 20), "100", "45", fee="15"),
            _aud_sale(date(2025, 5, 1), "50", "50", fee="10"),
        ]
        result = reconciler.reconcile(aud_vesting, sales)

        assert result.taxable_income == Decimal("12485.00")
        assert result.remaining_shares == Decimal("150")
        assert [s.thirty_day_rule.applies for s in result.sale_events] == [True, False]
        assert result.sale_events[1].thirty_day_rule.days_between == 61

    def test_sales_processed_in_date_order(
        self, reconciler: VestingSaleReconciler, aud_vesting: VestingEvent
    ):
        later = _aud_sale(date(2025, 5, 1), "50", "50", fee="10")
        early = _aud_sale(date(2025, 3, 20), "100", "45", fee="15")
        result = reconciler.reconcile(aud_vesting, [later, early])

        assert [s.sale.sale_date for s in result.sale_events] == [
            date(2025, 3, 20),
            date(2025, 5, 1),
        ]
        assert result.taxable_income == Decimal("12485.00")

    def test_later_usd_sale_without_rate_rejected(
        self, reconciler: VestingSaleReconciler, usd_vesting: VestingEvent
    ):
        sale = ShareSaleEvent(
            sale_date=date(2025, 9, 1),
            shares_sold=Decimal("50"),
            sale_price_per_share=Decimal("60"),
            currency=Currency.USD,
        )
        with pytest.raises(MissingExchangeRateError, match="USD sales"):
            reconciler.reconcile(usd_vesting, [sale])
        with pytest.raises(MissingExchangeRateError, match="USD sales"):
            reconciler.process_vesting_and_sale(usd_vesting, sale)

    def test_later_usd_sale_with_rate_leaves_income(
        self, reconciler: VestingSaleReconciler, usd_vesting: VestingEvent
    ):
        sale = ShareSaleEvent(
            sale_date=date(2025, 9, 1),
            shares_sold=Decimal("50"),
            sale_price_per_share=Decimal("60"),
            currency=Currency.USD,
            exchange_rate=Decimal("0.66"),
        )
        result = reconciler.reconcile(usd_vesting, [sale])
        assert result.taxable_income == Decimal("14285.71")
        assert result.remaining_shares == Decimal("150")


class TestShareAllocation:
    @pytest.mark.parametrize(
        "shares_sold, expected_remaining",
        [
            ([], "300"),
            (["300"], "0"),
            (["10", "20.5", "30"], "239.5"),
            (["0.25", "0.25"], "299.5"),
        ],
    )
    def test_remaining_shares_conserved(
        self,
        reconciler: VestingSaleReconciler,
        aud_vesting: VestingEvent,
        shares_sold: list[str],
        expected_remaining: str,
    ):
        sales = [
            _aud_sale(date(2025, 6, i + 1), shares, "41")
            for i, shares in enumerate(shares_sold)
        ]
        result = reconciler.reconcile(aud_vesting, sales)
        assert result.remaining_shares == Decimal(expected_remaining)

    def test_single_sale_over_allocation(self, reconciler: VestingSaleReconciler):
        vesting = VestingEvent(
            vest_date=date(2025, 1, 1),
            share_price=Decimal("50"),
            shares_vested=Decimal("100"),
            currency=Currency.AUD,
        )
        sale = _aud_sale(date(2025, 1, 15), "150", "55")
        with pytest.raises(OverAllocationError) as exc_info:
            reconciler.reconcile(vesting, [sale])
        assert str(exc_info.value) == "Cannot sell more shares (150) than were vested (100)"
        assert exc_info.value.kind == ErrorKind.OVER_ALLOCATION

    @pytest.mark.parametrize("reverse", [False, True])
    def test_cumulative_over_allocation_any_order(
        self, reconciler: VestingSaleReconciler, aud_vesting: VestingEvent, reverse: bool
    ):
        sales = [
            _aud_sale(date(2025, 3, 5), "200", "41"),
            _aud_sale(date(2025, 8, 5), "100.5", "41"),
        ]
        if reverse:
            sales.reverse()
        with pytest.raises(OverAllocationError) as exc_info:
            reconciler.reconcile(aud_vesting, sales)
        assert exc_info.value.shares_sold == Decimal("300.5")
        assert exc_info.value.shares_vested == Decimal("300")

    def test_over_allocation_checked_before_conversion(self, reconciler: VestingSaleReconciler):
        vesting = VestingEvent(
            vest_date=date(2025, 1, 1),
            share_price=Decimal("50"),
            shares_vested=Decimal("10"),
            currency=Currency.USD,
        )
        with pytest.raises(OverAllocationError):
            reconciler.reconcile(vesting, [_aud_sale(date(2025, 1, 2), "11", "1")])


class TestReconcilerValidation:
    def test_sale_before_vesting(
        self, reconciler: VestingSaleReconciler, aud_vesting: VestingEvent
    ):
        with pytest.raises(InvalidDateOrderError):
            reconciler.reconcile(aud_vesting, [_aud_sale(date(2025, 2, 28), "1", "40")])

    def test_idempotent(
        self,
        reconciler: VestingSaleReconciler,
        usd_vesting: VestingEvent,
        usd_same_day_sale: ShareSaleEvent,
    ):
        first = reconciler.reconcile(usd_vesting, [usd_same_day_sale])
        second = reconciler.reconcile(usd_vesting, [usd_same_day_sale])
        assert first == second
