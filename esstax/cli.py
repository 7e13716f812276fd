"""Typer CLI interface for the ESS tax engine."""

import logging
from collections.abc import Callable
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, TypeVar

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.table import Table

from esstax.engines import (
    CgtDiscountEvaluator,
    CurrencyConverter,
    Failure,
    ThirtyDayRuleEvaluator,
    VestingSaleReconciler,
    attempt,
)
from esstax.ingestion import ManualAdapter, Scenario
from esstax.reports import CapitalGainsReportGenerator, EssSummaryGenerator

T = TypeVar("T")

app = typer.Typer(
    name="esstax",
    help="ESS Tax — Australian employee share scheme tax calculations.",
)
console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    today: str | None = typer.Option(
        None,
        "--today",
        help="Date (YYYY-MM-DD) used when a same-currency conversion has no date",
    ),
) -> None:
    """ESS Tax — Australian employee share scheme tax calculations."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    clock = date.today
    if today:
        fixed = _parse_date(today, "--today")
        clock = lambda: fixed  # noqa: E731
    ctx.obj = VestingSaleReconciler(CurrencyConverter(clock=clock))


def _parse_date(value: str, name: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"{value!r} is not a YYYY-MM-DD date", param_hint=name) from None


def _parse_decimal(value: str, name: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        raise typer.BadParameter(f"{value!r} is not a number", param_hint=name) from None


def _run(operation: Callable[..., T], *args: Any) -> T:
    """Run an engine operation, exiting with the error kind on failure."""
    outcome = attempt(operation, *args)
    if isinstance(outcome, Failure):
        typer.echo(f"Error [{outcome.kind}]: {outcome.message}", err=True)
        raise typer.Exit(1)
    return outcome.value


def _load(file_path: Path) -> Scenario:
    adapter = ManualAdapter()
    try:
        scenario = adapter.parse(file_path)
    except (FileNotFoundError, ValueError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1)
    for warning in adapter.validate(scenario):
        typer.echo(f"Warning: {warning}", err=True)
    return scenario


def _echo_json(model: BaseModel) -> None:
    typer.echo(model.model_dump_json(indent=2))


@app.command()
def reconcile(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON scenario with a vesting event and its sales"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
) -> None:
    """Taxable income for a vesting event, applying the 30-day rule to each sale."""
    scenario = _load(file)
    if scenario.vesting is None:
        typer.echo("Error: scenario has no vesting event", err=True)
        raise typer.Exit(1)

    reconciler: VestingSaleReconciler = ctx.obj
    result = _run(reconciler.reconcile, scenario.vesting, scenario.sales)
    if as_json:
        _echo_json(result)
    else:
        typer.echo(EssSummaryGenerator().render(result))


@app.command()
def combine(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON scenario with a vesting event and one sale"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
) -> None:
    """Vesting income and capital gain for a vesting event with a single sale."""
    scenario = _load(file)
    if scenario.vesting is None or len(scenario.sales) != 1:
        typer.echo("Error: scenario needs a vesting event and exactly one sale", err=True)
        raise typer.Exit(1)

    reconciler: VestingSaleReconciler = ctx.obj
    result = _run(reconciler.process_vesting_and_sale, scenario.vesting, scenario.sales[0])
    if as_json:
        _echo_json(result)
        return

    table = Table(title="Vesting and Sale")
    table.add_column("Item")
    table.add_column(f"Amount ({result.currency})", justify="right")
    table.add_row("Taxable income", f"{result.taxable_income:,.2f}")
    table.add_row("Capital gain", f"{result.capital_gain:,.2f}")
    table.add_row("Applied rule", result.sale_result.applied_rule.value)
    console.print(table)


@app.command(name="capital-gains")
def capital_gains(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="JSON file with one sale record"),
    cost_base: str = typer.Option(..., "--cost-base", help="Cost base of the sold shares (AUD)"),
    acquired: str | None = typer.Option(
        None, "--acquired", help="Acquisition date (YYYY-MM-DD) for the CGT discount"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result as JSON"),
) -> None:
    """Standalone capital gain on a sale, with the 50% CGT discount where eligible."""
    scenario = _load(file)
    if len(scenario.sales) != 1:
        typer.echo("Error: file must contain exactly one sale", err=True)
        raise typer.Exit(1)

    base = _parse_decimal(cost_base, "--cost-base")
    acquisition_date = _parse_date(acquired, "--acquired") if acquired else None
    reconciler: VestingSaleReconciler = ctx.obj
    result = _run(
        reconciler.calculate_capital_gains, scenario.sales[0], base, acquisition_date
    )
    if as_json:
        _echo_json(result)
    else:
        typer.echo(CapitalGainsReportGenerator().render(result))


@app.command(name="thirty-day")
def thirty_day(
    vest_date: str = typer.Argument(..., help="Vesting date (YYYY-MM-DD)"),
    sale_date: str = typer.Argument(..., help="Sale date (YYYY-MM-DD)"),
) -> None:
    """Check whether a sale falls within 30 days of vesting."""
    result = _run(
        ThirtyDayRuleEvaluator().evaluate,
        _parse_date(vest_date, "VEST_DATE"),
        _parse_date(sale_date, "SALE_DATE"),
    )
    typer.echo(f"Applies: {'yes' if result.applies else 'no'}")
    typer.echo(result.reason)


@app.command()
def discount(
    acquired: str = typer.Argument(..., help="Acquisition date (YYYY-MM-DD)"),
    sale_date: str = typer.Argument(..., help="Sale date (YYYY-MM-DD)"),
    gain: str = typer.Argument(..., help="Gross capital gain (negative for a loss)"),
) -> None:
    """Apply the CGT discount to a gross gain."""
    result = _run(
        CgtDiscountEvaluator().evaluate,
        _parse_date(acquired, "ACQUIRED"),
        _parse_date(sale_date, "SALE_DATE"),
        _parse_decimal(gain, "GAIN"),
    )
    typer.echo(f"Holding period:  {result.holding_period_days} days")
    typer.echo(f"Eligible:        {'yes' if result.eligible else 'no'}")
    typer.echo(f"Discount rate:   {result.discount_rate}")
    typer.echo(f"Discounted gain: {result.discounted_capital_gain:,.2f}")


@app.command()
def convert(
    ctx: typer.Context,
    amount: str = typer.Argument(..., help="Amount in USD"),
    rate: str = typer.Argument(..., help="Exchange rate (USD per AUD)"),
    on: str = typer.Argument(..., help="Conversion date (YYYY-MM-DD)"),
) -> None:
    """Convert a USD amount to AUD at the given rate."""
    reconciler: VestingSaleReconciler = ctx.obj
    result = _run(
        reconciler.converter.convert,
        _parse_decimal(amount, "AMOUNT"),
        _parse_decimal(rate, "RATE"),
        _parse_date(on, "ON"),
    )
    typer.echo(
        f"{result.original_amount} {result.original_currency} = "
        f"{result.converted_amount} {result.converted_currency} "
        f"(rate {result.exchange_rate}, {result.conversion_date})"
    )
