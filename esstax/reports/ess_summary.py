"""ESS vesting summary report generator."""

from decimal import Decimal
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from esstax.models.results import CapitalGainsResult, TaxableIncomeResult

TEMPLATE_DIR = Path(__file__).parent / "templates"


def money(value: Decimal) -> str:
    if value < 0:
        return f"-${-value:.2f}"
    return f"${value:.2f}"


def _environment() -> Environment:
    env = Environment(loader=FileSystemLoader(str(TEMPLATE_DIR)), trim_blocks=True)
    env.filters["money"] = money
    return env


class EssSummaryGenerator:
    """Generates a vesting summary with the 30-day outcome of each sale."""

    def __init__(self) -> None:
        self.env = _environment()

    def render(self, result: TaxableIncomeResult) -> str:
        template = self.env.get_template("ess_summary.txt")
        return template.render(result=result)


class CapitalGainsReportGenerator:
    """Generates a capital gains summary for one sale."""

    def __init__(self) -> None:
        self.env = _environment()

    def render(self, result: CapitalGainsResult) -> str:
        template = self.env.get_template("capital_gains.txt")
        return template.render(result=result)
