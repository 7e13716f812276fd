"""Enumerations for the ESS tax engine."""

from enum import StrEnum


class Currency(StrEnum):
    AUD = "AUD"
    USD = "USD"


class AppliedRule(StrEnum):
    STANDARD_CGT = "standard-cgt"
    THIRTY_DAY = "30-day"
    NONE = "none"
