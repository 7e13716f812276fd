"""Custom exceptions for the ESS tax engine."""

from datetime import date
from decimal import Decimal
from enum import StrEnum


class ErrorKind(StrEnum):
    INVALID_INPUT = "InvalidInput"
    MISSING_EXCHANGE_RATE = "MissingExchangeRate"
    MISSING_CONVERSION_DATE = "MissingConversionDate"
    UNSUPPORTED_CONVERSION = "UnsupportedConversion"
    INVALID_DATE_ORDER = "InvalidDateOrder"
    OVER_ALLOCATION = "OverAllocation"


class EssComputationError(Exception):
    """Base exception for ESS tax computation errors."""

    kind: ErrorKind

    @property
    def details(self) -> dict:
        """Offending values, keyed by attribute name."""
        return {k: v for k, v in vars(self).items() if not k.startswith("_")}


class InvalidInputError(EssComputationError):
    """Raised when an amount is negative or an exchange rate is not positive."""

    kind = ErrorKind.INVALID_INPUT

    def __init__(self, field: str, value: Decimal, message: str):
        self.field = field
        self.value = value
        super().__init__(message)


class MissingExchangeRateError(EssComputationError):
    """Raised when a foreign-currency amount has no exchange rate attached."""

    kind = ErrorKind.MISSING_EXCHANGE_RATE

    def __init__(self, currency: str, context: str = "currency conversion"):
        self.currency = currency
        self.context = context
        super().__init__(f"Exchange rate required for {currency} {context}")


class MissingConversionDateError(EssComputationError):
    """Raised when a currency conversion has no date to record against."""

    kind = ErrorKind.MISSING_CONVERSION_DATE

    def __init__(self, source_currency: str, target_currency: str):
        self.source_currency = source_currency
        self.target_currency = target_currency
        super().__init__("Conversion date required for currency conversion")


class UnsupportedConversionError(EssComputationError):
    """Raised when no conversion is configured for a currency pair."""

    kind = ErrorKind.UNSUPPORTED_CONVERSION

    def __init__(self, source_currency: str, target_currency: str):
        self.source_currency = source_currency
        self.target_currency = target_currency
        super().__init__(
            f"Conversion from {source_currency} to {target_currency} not supported"
        )


class InvalidDateOrderError(EssComputationError):
    """Raised when a sale date precedes the vesting or acquisition date."""

    kind = ErrorKind.INVALID_DATE_ORDER

    def __init__(self, reference_date: date, sale_date: date, reference_label: str):
        self.reference_date = reference_date
        self.sale_date = sale_date
        self.reference_label = reference_label
        super().__init__(
            f"Sale date cannot be before {reference_label} date "
            f"(sale={sale_date.isoformat()}, {reference_label}={reference_date.isoformat()})"
        )


class OverAllocationError(EssComputationError):
    """Raised when sales against a vesting event exceed the shares vested."""

    kind = ErrorKind.OVER_ALLOCATION

    def __init__(self, shares_sold: Decimal, shares_vested: Decimal):
        self.shares_sold = shares_sold
        self.shares_vested = shares_vested
        super().__init__(
            f"Cannot sell more shares ({shares_sold}) than were vested ({shares_vested})"
        )
