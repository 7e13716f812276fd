"""Currency conversion to the reporting currency.

Rates are always supplied by the caller; nothing is fetched. A rate is quoted
as foreign units per reporting unit (USD per AUD), so a USD amount converts to
AUD as ``amount / rate``.
"""

import logging
from collections.abc import Callable, Mapping
from datetime import date
from decimal import Decimal

from esstax.engines.rules import REPORTING_CURRENCY, round_cents, to_decimal
from esstax.exceptions import (
    InvalidInputError,
    MissingConversionDateError,
    MissingExchangeRateError,
    UnsupportedConversionError,
)
from esstax.models.enums import Currency
from esstax.models.results import CurrencyConversionResult

logger = logging.getLogger(__name__)

ConversionFn = Callable[[Decimal, Decimal], Decimal]


def divide_by_rate(amount: Decimal, rate: Decimal) -> Decimal:
    return amount / rate


# {(source, target): conversion function}
DEFAULT_PAIRS: dict[tuple[Currency, Currency], ConversionFn] = {
    (Currency.USD, Currency.AUD): divide_by_rate,
}


class CurrencyConverter:
    """Converts foreign-currency amounts into the reporting currency."""

    def __init__(
        self,
        pairs: Mapping[tuple[Currency, Currency], ConversionFn] | None = None,
        reporting_currency: Currency = REPORTING_CURRENCY,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.pairs = dict(DEFAULT_PAIRS if pairs is None else pairs)
        self.reporting_currency = reporting_currency
        self.clock = clock

    def convert(
        self,
        amount: Decimal,
        rate: Decimal,
        conversion_date: date,
        source_currency: Currency = Currency.USD,
        target_currency: Currency | None = None,
    ) -> CurrencyConversionResult:
        """Convert ``amount`` at ``rate``, rounded half-up to cents."""
        target = target_currency or self.reporting_currency
        amount = to_decimal(amount)
        rate = to_decimal(rate)
        if amount < 0:
            raise InvalidInputError("amount", amount, "Amount must be non-negative")
        if rate <= 0:
            raise InvalidInputError("exchange_rate", rate, "Exchange rate must be greater than 0")

        converted = round_cents(self._pair(source_currency, target)(amount, rate))
        logger.debug(
            "Converted %s %s -> %s %s at %s on %s",
            amount, source_currency, converted, target, rate, conversion_date,
        )
        return CurrencyConversionResult(
            original_amount=amount,
            original_currency=source_currency,
            converted_amount=converted,
            converted_currency=target,
            exchange_rate=rate,
            conversion_date=conversion_date,
        )

    def convert_share_event(
        self,
        price_per_unit: Decimal,
        quantity: Decimal,
        source_currency: Currency,
        target_currency: Currency,
        exchange_rate: Decimal | None = None,
        conversion_date: date | None = None,
    ) -> CurrencyConversionResult:
        """Convert the total value of a share event (price x quantity).

        Same-currency events are returned unchanged at rate 1, dated with
        ``conversion_date`` or the converter's clock.
        """
        original_amount = to_decimal(price_per_unit) * to_decimal(quantity)

        if source_currency == target_currency:
            return CurrencyConversionResult(
                original_amount=original_amount,
                original_currency=source_currency,
                converted_amount=original_amount,
                converted_currency=target_currency,
                exchange_rate=Decimal("1"),
                conversion_date=conversion_date or self.clock(),
            )

        if exchange_rate is None:
            raise MissingExchangeRateError(source_currency)
        if conversion_date is None:
            raise MissingConversionDateError(source_currency, target_currency)

        return self.convert(
            original_amount, exchange_rate, conversion_date, source_currency, target_currency
        )

    def to_reporting(
        self,
        amount: Decimal,
        currency: Currency,
        exchange_rate: Decimal | None,
        context: str = "currency conversion",
    ) -> Decimal:
        """Unrounded reporting-currency value of a (possibly negative) amount.

        Used for intermediate figures that are rounded once at the end.
        """
        if currency == self.reporting_currency:
            return amount
        if exchange_rate is None:
            raise MissingExchangeRateError(currency, context)
        if exchange_rate <= 0:
            raise InvalidInputError(
                "exchange_rate", exchange_rate, "Exchange rate must be greater than 0"
            )
        return self._pair(currency, self.reporting_currency)(amount, exchange_rate)

    def _pair(self, source: Currency, target: Currency) -> ConversionFn:
        try:
            return self.pairs[(source, target)]
        except KeyError:
            raise UnsupportedConversionError(source, target) from None
