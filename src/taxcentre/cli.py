"""
taxcentre CLI — command-line interface.

Usage:
    taxcentre summary --data ledger.json --tax-year 2023/2024
    taxcentre summary --data ledger.json --span tfy --search software
    taxcentre years --data ledger.json
    taxcentre invoice-tax --amount 2500 --already-earned 12000
    taxcentre outgoings --data ledger.json --span 90d
"""

from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from taxcentre import __version__

app = typer.Typer(
    name="taxcentre",
    help="Tax Centre — revenue, expenses and estimated tax for any tax year",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold]taxcentre[/bold] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Log per-record calculations",
    ),
) -> None:
    """Tax Centre — revenue, expenses and estimated tax for any tax year."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


def _build_centre(config: str, data: str | None, skip_invalid: bool = False):
    from taxcentre.centre import TaxCentre
    from taxcentre.config import ConnectorConfig

    config_path = config if Path(config).exists() else None
    overrides: dict = {}
    if data:
        overrides["connectors"] = [ConnectorConfig(type="file", options={"file_path": data})]
    if skip_invalid:
        overrides["error_mode"] = "skip"
    return TaxCentre.from_config(config_path, **overrides)


def _load(centre):
    try:
        return centre.load_sync()
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _decimal(value: str, option: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation:
        console.print(f"[red]Error: {option} must be a number, got {value!r}[/red]")
        raise typer.Exit(1)


@app.command()
def summary(
    data: str = typer.Option(
        None,
        "--data",
        "-d",
        help="JSON/YAML snapshot with invoices and expenses (overrides config connectors)",
    ),
    config: str = typer.Option(
        "taxcentre.yaml",
        "--config",
        "-c",
        help="Path to config file",
    ),
    tax_year: str = typer.Option(
        None,
        "--tax-year",
        "-y",
        help="Fiscal year label, e.g. 2023/2024 (default: current)",
    ),
    span: str = typer.Option(
        None,
        "--span",
        "-s",
        help="Preset span instead of a tax year: 7d, 30d, 90d, 1y, mtd, tfy, lfy, all",
    ),
    search: str = typer.Option(
        "",
        "--search",
        help="Filter expense rows by name, description or category",
    ),
    skip_invalid: bool = typer.Option(
        False,
        "--skip-invalid",
        help="Skip invalid records instead of failing",
    ),
    output: str = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the summary to a file (.md or .json)",
    ),
) -> None:
    """Summarize a tax year or span: turnover, expenses, tax and net profit."""
    from taxcentre.analyzers.fiscal_calendar import TimeSpan
    from taxcentre.exceptions import TaxCentreError

    centre = _build_centre(config, data, skip_invalid)
    snapshot = _load(centre)

    try:
        if span:
            result = centre.span(snapshot, TimeSpan(span), search)
        else:
            label = tax_year or centre.calendar.fiscal_year_of(date.today())
            result = centre.tax_year(snapshot, label, search)
    except (TaxCentreError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    _display_summary(result, centre.config.currency)
    if output:
        _save_summary(result, output, centre.config.currency)


@app.command()
def years(
    data: str = typer.Option(None, "--data", "-d", help="JSON/YAML snapshot"),
    config: str = typer.Option("taxcentre.yaml", "--config", "-c", help="Path to config file"),
) -> None:
    """List the tax years that have records, newest first."""
    centre = _build_centre(config, data)
    snapshot = _load(centre)
    for label in centre.available_years(snapshot):
        console.print(label)


@app.command("invoice-tax")
def invoice_tax(
    amount: str = typer.Option(..., "--amount", "-a", help="Invoice amount"),
    already_earned: str = typer.Option(
        "0",
        "--already-earned",
        help="Freelance income already earned this tax year",
    ),
    baseline: str = typer.Option(
        None,
        "--baseline",
        help="Other income for the year (default: configured baseline)",
    ),
    config: str = typer.Option("taxcentre.yaml", "--config", "-c", help="Path to config file"),
) -> None:
    """Estimate the tax attributable to one more invoice."""
    from taxcentre.exceptions import TaxCentreError
    from taxcentre.exporters.markdown import format_money

    centre = _build_centre(config, None)
    invoice_amount = _decimal(amount, "--amount")
    earned = _decimal(already_earned, "--already-earned")
    base = _decimal(baseline, "--baseline") if baseline is not None else None

    try:
        result = centre.estimator.estimate(invoice_amount, baseline=base, already_earned=earned)
    except TaxCentreError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    currency = centre.config.currency
    table = Table(title="Invoice Tax Estimate", show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Invoice", format_money(invoice_amount, currency))
    table.add_row("Income Tax", format_money(result.income_tax, currency))
    table.add_row("Social Contribution", format_money(result.social_contribution, currency))
    table.add_row("Total Tax", format_money(result.total, currency))
    table.add_row("After Tax", format_money(invoice_amount - result.total, currency))
    console.print(table)


@app.command()
def outgoings(
    data: str = typer.Option(None, "--data", "-d", help="JSON/YAML snapshot"),
    config: str = typer.Option("taxcentre.yaml", "--config", "-c", help="Path to config file"),
    span: str = typer.Option("all", "--span", "-s", help="7d, 30d, 90d, 1y, mtd, tfy, lfy, all"),
    skip_invalid: bool = typer.Option(
        False,
        "--skip-invalid",
        help="Skip invalid records instead of failing",
    ),
) -> None:
    """Show recurring costs, spend in a span, and payments due this month."""
    from taxcentre.analyzers.fiscal_calendar import TimeSpan
    from taxcentre.exceptions import TaxCentreError
    from taxcentre.exporters.markdown import format_money

    centre = _build_centre(config, data, skip_invalid)
    snapshot = _load(centre)
    try:
        report = centre.outgoings(snapshot, TimeSpan(span))
    except (TaxCentreError, ValueError) as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(1)

    currency = centre.config.currency
    table = Table(title="Outgoings", show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total Spend", format_money(report.total_spend, currency))
    table.add_row("One-Time Payments", format_money(report.one_time_spend, currency))
    table.add_row("Subscriptions", format_money(report.subscription_spend, currency))
    table.add_row("Recurring Monthly Cost", format_money(report.recurring_monthly_cost, currency))
    table.add_row("Projected Annual Cost", format_money(report.projected_annual_cost, currency))
    console.print(table)

    if report.expected_payments:
        console.print()
        console.print("[bold]Expected this month:[/bold]")
        for payment in report.expected_payments:
            console.print(
                f"  {payment.due_date.isoformat()}  {payment.expense.display_name} — "
                f"{format_money(payment.expense.base_amount, currency)}"
            )

    for record in report.skipped:
        console.print(f"[yellow]Skipped {record.record_type} {record.record_id}: {record.reason}[/yellow]")


def _display_summary(result, currency: str) -> None:  # noqa: ANN001
    """Display summary totals in the terminal."""
    from taxcentre.exporters.markdown import format_money

    console.print(Panel.fit(f"[bold blue]Tax Centre[/bold blue] — {result.window}"))

    table = Table(title="Period Summary", show_lines=True)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Total Turnover", format_money(result.revenue, currency))
    table.add_row("Allowable Expenses", format_money(result.recognized_expenses, currency))
    table.add_row("Taxable Profit (Estimate)", format_money(result.taxable_profit, currency))
    table.add_row("Estimated Tax", format_money(result.estimated_tax, currency))
    color = "green" if result.net_profit > 0 else "red" if result.net_profit < 0 else "white"
    table.add_row("Net Profit", f"[{color}]{format_money(result.net_profit, currency)}[/{color}]")
    console.print(table)

    if result.detail_rows:
        rows = Table(title="Expenses in Period")
        rows.add_column("Date")
        rows.add_column("Name", style="bold cyan")
        rows.add_column("Category")
        rows.add_column("Amount", justify="right")
        for exp in result.detail_rows:
            rows.add_row(
                exp.start_date.isoformat() if exp.start_date else "",
                exp.display_name,
                exp.category,
                format_money(exp.base_amount, currency),
            )
        console.print(rows)
    else:
        console.print("[dim]No expenses found for this period.[/dim]")

    for record in result.skipped:
        console.print(f"[yellow]Skipped {record.record_type} {record.record_id}: {record.reason}[/yellow]")


def _save_summary(result, output: str, currency: str) -> None:  # noqa: ANN001
    """Save summary to file."""
    path = Path(output)
    if path.suffix == ".json":
        content = result.to_json()
    else:
        content = result.to_markdown(currency)

    path.write_text(content)
    console.print(f"[green]✓[/green] Summary saved to [bold]{path}[/bold]")


if __name__ == "__main__":
    app()
