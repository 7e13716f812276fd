"""Vesting and share sale input records."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from esstax.models.enums import Currency


class VestingEvent(BaseModel):
    """One RSU tranche becoming taxable on its vest date.

    ``share_price`` and ``cost_base`` are in ``currency``. ``exchange_rate`` is
    foreign units per reporting unit (e.g. USD per AUD) on the vest date and is
    required whenever ``currency`` is not the reporting currency.
    """

    model_config = ConfigDict(frozen=True)

    vest_date: date
    share_price: Decimal = Field(ge=0)
    shares_vested: Decimal = Field(ge=0)
    cost_base: Decimal = Field(default=Decimal("0"), ge=0)
    currency: Currency
    exchange_rate: Decimal | None = Field(default=None, gt=0)

    @property
    def market_value(self) -> Decimal:
        return self.share_price * self.shares_vested


class ShareSaleEvent(BaseModel):
    """A disposal of vested shares.

    ``acquisition_date`` is only consulted when the sale is evaluated on its
    own, outside a reconciliation against a specific vesting event.
    """

    model_config = ConfigDict(frozen=True)

    sale_date: date
    shares_sold: Decimal = Field(ge=0)
    sale_price_per_share: Decimal = Field(ge=0)
    currency: Currency
    exchange_rate: Decimal | None = Field(default=None, gt=0)
    brokerage_commission: Decimal = Field(default=Decimal("0"), ge=0)
    supplemental_fees: Decimal = Field(default=Decimal("0"), ge=0)
    acquisition_date: date | None = None

    @property
    def gross_proceeds(self) -> Decimal:
        return self.shares_sold * self.sale_price_per_share

    @property
    def total_fees(self) -> Decimal:
        return self.brokerage_commission + self.supplemental_fees
