"""Shared test fixtures for the ESS tax engine."""

from datetime import date
from decimal import Decimal

import pytest

from esstax.engines import CurrencyConverter, VestingSaleReconciler
from esstax.models.enums import Currency
from esstax.models.events import ShareSaleEvent, VestingEvent

FIXED_TODAY = date(2025, 7, 1)


@pytest.fixture
def converter() -> CurrencyConverter:
    return CurrencyConverter(clock=lambda: FIXED_TODAY)


@pytest.fixture
def reconciler(converter: CurrencyConverter) -> VestingSaleReconciler:
    return VestingSaleReconciler(converter)


@pytest.fixture
def aud_vesting() -> VestingEvent:
    return VestingEvent(
        vest_date=date(2025, 3, 1),
        share_price=Decimal("40"),
        shares_vested=Decimal("300"),
        currency=Currency.AUD,
    )


@pytest.fixture
def usd_vesting() -> VestingEvent:
    return VestingEvent(
        vest_date=date(2025, 4, 1),
        share_price=Decimal("45"),
        shares_vested=Decimal("200"),
        currency=Currency.USD,
        exchange_rate=Decimal("0.63"),
    )


@pytest.fixture
def usd_same_day_sale() -> ShareSaleEvent:
    return ShareSaleEvent(
        sale_date=date(2025, 4, 1),
        shares_sold=Decimal("200"),
        sale_price_per_share=Decimal("45"),
        currency=Currency.USD,
        exchange_rate=Decimal("0.63"),
        brokerage_commission=Decimal("10"),
    )


@pytest.fixture
def long_term_aud_sale() -> ShareSaleEvent:
    return ShareSaleEvent(
        sale_date=date(2025, 12, 1),
        shares_sold=Decimal("100"),
        sale_price_per_share=Decimal("80"),
        currency=Currency.AUD,
        brokerage_commission=Decimal("20"),
        acquisition_date=date(2024, 6, 1),
    )
