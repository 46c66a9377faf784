"""Typer CLI interface for the statement parser."""

import json
import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from statementparser.config import build_parsers, load_scenario
from statementparser.engines.tax_lot import TaxLotEngine
from statementparser.exceptions import StatementParserError
from statementparser.ingestion.parser import TransactionParser, resolve_file_paths
from statementparser.models.reports import LotLine, TaxLotReport
from statementparser.models.transaction import (
    DepositTransaction,
    DividendTransaction,
    ESPPTransaction,
    Transaction,
)

console = Console()

app = typer.Typer(
    name="statementparser",
    help="Statement Parser: broker statements to tax-lot gain and loss.",
    no_args_is_help=True,
)

_BROKER_HELP = (
    "Parser for matching files: BROKER or PATTERN=BROKER "
    "(lynx, morgan-stanley, fidelity). Repeatable; first match wins. Default: *.csv=lynx"
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Statement Parser: broker statements to tax-lot gain and loss."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_transactions(paths: list[Path], brokers: list[str] | None) -> list[Transaction] | None:
    """Resolve paths and parse every file. Returns None when nothing can be scanned."""
    try:
        parsers = build_parsers(brokers)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--broker") from exc

    file_paths = resolve_file_paths(paths)
    if not file_paths:
        typer.echo("No valid path to scan found. Check that file or directory exist.", err=True)
        return None

    try:
        return TransactionParser(parsers).parse_all(file_paths)
    except (StatementParserError, FileNotFoundError) as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc


def _transaction_row(t: Transaction) -> list[str]:
    amount = price = income = tax = ""
    match t:
        case DividendTransaction():
            income, tax = str(t.income), str(t.tax)
        case DepositTransaction():
            amount, price = str(t.amount), str(t.price)
        case ESPPTransaction():
            amount, price = str(t.amount), str(t.market_price)
    return [
        t.date.isoformat(),
        t.broker.value,
        t.name,
        type(t).__name__.removesuffix("Transaction"),
        amount,
        price,
        income,
        tax,
        t.currency.value,
    ]


@app.command()
def transactions(
    paths: list[Path] = typer.Argument(..., help="Statement files or directories (scanned recursively)"),
    broker: list[str] | None = typer.Option(None, "--broker", "-b", help=_BROKER_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a table"),
) -> None:
    """Parse statements and list every normalized transaction."""
    parsed = _load_transactions(paths, broker)
    if parsed is None:
        return
    parsed = sorted(parsed, key=lambda t: t.date)

    if as_json:
        payload = [{"type": type(t).__name__, **t.model_dump(mode="json")} for t in parsed]
        typer.echo(json.dumps(payload, indent=2))
        return

    tbl = Table(title=f"Transactions ({len(parsed)})", show_header=True)
    for column in ("Date", "Broker", "Name", "Type"):
        tbl.add_column(column, style="cyan")
    for column in ("Amount", "Price", "Income", "Tax"):
        tbl.add_column(column, justify="right")
    tbl.add_column("Currency")
    for t in parsed:
        tbl.add_row(*_transaction_row(t))
    console.print(tbl)


def _lot_table(title: str, lines: list[LotLine], gain_header: str) -> Table:
    tbl = Table(title=title, show_header=True)
    tbl.add_column("Date", style="cyan")
    tbl.add_column("Name")
    tbl.add_column("Amount", justify="right")
    tbl.add_column("Price", justify="right")
    tbl.add_column(gain_header, justify="right", style="green")
    for line in lines:
        tbl.add_row(line.date.isoformat(), line.name, str(line.amount), str(line.price), str(line.gain))
    return tbl


def _print_report(report: TaxLotReport) -> None:
    console.print(f"[bold]Gain:[/bold] {report.realized_gain}")
    console.print(f"[bold]Loss:[/bold] {report.realized_loss}")
    console.print(
        f"Eligible units: {report.eligible_units}  Retained units: {report.leftover_units}"
    )
    console.print(_lot_table("Taxable lots", report.taxable, "Gain"))

    if report.forward is None:
        return
    forward = report.forward
    console.print()
    console.print(
        _lot_table(
            f"Held lots at {forward.current_price} ({forward.current_date.isoformat()})",
            forward.candidates,
            "Forecast gain",
        )
    )
    console.print(f"[bold]Can sell:[/bold] {forward.units} units")
    console.print(f"[bold]Sell gain:[/bold] {forward.forecast_gain}")


@app.command()
def compute(
    paths: list[Path] = typer.Argument(..., help="Statement files or directories (scanned recursively)"),
    scenario_file: Path | None = typer.Option(
        None, "--scenario", "-s", help="JSON file with scenario parameters"
    ),
    selling_price: str | None = typer.Option(None, "--selling-price", help="Price per share of the past sale"),
    sold_at: str | None = typer.Option(None, "--sold-at", help="Date of the past sale (YYYY-MM-DD)"),
    units_retained: str | None = typer.Option(
        None, "--units-retained", help="Shares still held right after the sale"
    ),
    eligible_from: str | None = typer.Option(
        None, "--eligible-from", help="Earliest acquisition date eligible for the sale (YYYY-MM-DD)"
    ),
    current_price: str | None = typer.Option(
        None, "--current-price", help="Today's price, enables the forward what-if"
    ),
    current_date: str | None = typer.Option(None, "--current-date", help="Date of the current price"),
    broker: list[str] | None = typer.Option(None, "--broker", "-b", help=_BROKER_HELP),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of tables"),
) -> None:
    """Compute realized gain/loss on a past sale and how much can be sold now."""
    try:
        scenario = load_scenario(
            scenario_file,
            selling_price=selling_price,
            sold_at_date=sold_at,
            units_retained=units_retained,
            eligible_date=eligible_from,
            current_price=current_price,
            current_date=current_date,
        )
    except (ValidationError, ValueError, FileNotFoundError) as exc:
        typer.echo(f"Error: invalid scenario: {exc}", err=True)
        raise typer.Exit(1) from exc

    parsed = _load_transactions(paths, broker)
    if parsed is None:
        return

    try:
        report = TaxLotEngine().compute(parsed, scenario)
    except StatementParserError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(1) from exc

    if as_json:
        typer.echo(report.model_dump_json(indent=2))
        return
    _print_report(report)
