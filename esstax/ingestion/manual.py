"""Manual entry adapter for JSON scenario files.

Accepted shapes::

    {"vesting": {...}, "sales": [{...}, ...]}   # vesting with sales
    {"vesting": {...}}                          # vesting only
    {"sale_date": ..., ...}                     # a single sale
    [{"sale_date": ..., ...}, ...]              # sales only

Field names match the VestingEvent / ShareSaleEvent models; dates are ISO
``YYYY-MM-DD`` strings and amounts may be strings or numbers.
"""

import json
from decimal import Decimal
from pathlib import Path

from pydantic import ValidationError

from esstax.engines.rules import REPORTING_CURRENCY
from esstax.ingestion.base import BaseAdapter, Scenario
from esstax.models.events import ShareSaleEvent, VestingEvent


class ManualAdapter(BaseAdapter):
    """Imports hand-written JSON scenario files into domain models."""

    def parse(self, file_path: Path) -> Scenario:
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        try:
            raw = json.loads(file_path.read_text(), parse_float=Decimal)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid JSON in {file_path.name}: {exc}") from exc

        try:
            return self._build(raw)
        except ValidationError as exc:
            raise ValueError(f"Invalid records in {file_path.name}: {exc}") from exc

    def validate(self, scenario: Scenario) -> list[str]:
        """Check exchange rates and share allocation without computing anything."""
        errors: list[str] = []
        vesting = scenario.vesting
        if vesting and vesting.currency != REPORTING_CURRENCY and vesting.exchange_rate is None:
            errors.append(
                f"Vesting on {vesting.vest_date}: exchange rate required for {vesting.currency}"
            )
        for sale in scenario.sales:
            if sale.currency != REPORTING_CURRENCY and sale.exchange_rate is None:
                errors.append(
                    f"Sale on {sale.sale_date}: exchange rate required for {sale.currency}"
                )
        if vesting:
            sold = sum((s.shares_sold for s in scenario.sales), Decimal("0"))
            if sold > vesting.shares_vested:
                errors.append(
                    f"Cannot sell more shares ({sold}) than were vested ({vesting.shares_vested})"
                )
        return errors

    @staticmethod
    def _build(raw: dict | list) -> Scenario:
        if isinstance(raw, list):
            if not raw:
                raise ValueError("JSON file contains an empty list — no records to import")
            return Scenario(sales=[ShareSaleEvent.model_validate(r) for r in raw])

        if "vesting" in raw or "sales" in raw:
            vesting = raw.get("vesting")
            return Scenario(
                vesting=VestingEvent.model_validate(vesting) if vesting else None,
                sales=[ShareSaleEvent.model_validate(r) for r in raw.get("sales") or []],
            )

        if "sale_date" in raw:
            return Scenario(sales=[ShareSaleEvent.model_validate(raw)])

        raise ValueError(f"Cannot detect record type from JSON keys: {list(raw.keys())}")
