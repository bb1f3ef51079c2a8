"""
Markdown summary exporter.

Renders a PeriodSummary as a Markdown report suitable for GitHub, Notion,
or any Markdown viewer.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from taxcentre.models.summary import PeriodSummary

CURRENCY_SYMBOLS = {
    "GBP": "£",
    "EUR": "€",
    "USD": "$",
    "CAD": "CA$",
    "AUD": "A$",
}

_PENNY = Decimal("0.01")


def format_money(amount: Decimal, currency: str = "GBP") -> str:
    """Format an amount for display, rounded half-up to the penny."""
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    rounded = Decimal(amount).quantize(_PENNY, rounding=ROUND_HALF_UP)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.2f}"


def render_markdown(summary: PeriodSummary, currency: str = "GBP") -> str:
    """Render a PeriodSummary as Markdown."""
    money = lambda amount: format_money(amount, currency)  # noqa: E731
    lines: list[str] = []

    # Header
    lines.append(f"# Tax Centre — {summary.window}")
    lines.append("")
    lines.append(
        f"*Period: {summary.window.start_date.isoformat()} to {summary.window.end_date.isoformat()}*"
    )
    if summary.search:
        lines.append(f"*Filter: \"{summary.search}\"*")
    lines.append("")

    # Totals
    lines.append("## Summary")
    lines.append("")
    lines.append("| Metric | Value |")
    lines.append("|--------|-------|")
    lines.append(f"| **Total Turnover** | {money(summary.revenue)} |")
    lines.append(f"| **Allowable Expenses** | {money(summary.recognized_expenses)} |")
    lines.append(f"| **Taxable Profit (Estimate)** | {money(summary.taxable_profit)} |")
    lines.append(f"| **Income Tax (Est.)** | {money(summary.income_tax)} |")
    lines.append(f"| **Social Contribution (Est.)** | {money(summary.social_contribution)} |")
    lines.append(f"| **Net Profit** | {money(summary.net_profit)} |")
    lines.append("")

    if summary.recognized_expenses:
        lines.append("### Expenses")
        lines.append("")
        lines.append(f"- One-time payments: {money(summary.one_time_expenses)}")
        lines.append(f"- Subscriptions: {money(summary.subscription_expenses)}")
        for category, amount in summary.expenses_by_category.items():
            lines.append(f"  - {category}: {money(amount)}")
        lines.append("")

    if summary.receivables.outstanding:
        lines.append(
            f"*Outstanding: {money(summary.receivables.outstanding)} "
            f"(overdue: {money(summary.receivables.overdue)})*"
        )
        lines.append("")

    # Per-invoice tax
    if summary.invoice_lines:
        lines.append("## Paid Invoices")
        lines.append("")
        lines.append("| Invoice | Date | Amount | Tax (Est.) | Fee | Take Home |")
        lines.append("|---------|------|--------|------------|-----|-----------|")
        for line in summary.invoice_lines:
            lines.append(
                f"| {line.invoice_id} | {line.issue_date.isoformat()} | {money(line.amount)} | "
                f"{money(line.total_tax)} | {money(line.processing_fee)} | {money(line.take_home)} |"
            )
        lines.append("")

    # Detail rows
    lines.append("## Expenses in Period")
    lines.append("")
    if summary.detail_rows:
        lines.append("| Date | Name | Category | Type | Amount |")
        lines.append("|------|------|----------|------|--------|")
        for exp in summary.detail_rows:
            started = exp.start_date.isoformat() if exp.start_date else ""
            lines.append(
                f"| {started} | {exp.display_name} | {exp.category} | "
                f"{exp.type.value} | {money(exp.base_amount)} |"
            )
    else:
        lines.append("No expenses found for this period.")
    lines.append("")

    if summary.skipped:
        lines.append("## Skipped Records")
        lines.append("")
        for record in summary.skipped:
            lines.append(f"- {record.record_type} `{record.record_id}`: {record.reason}")
        lines.append("")

    # Footer
    lines.append("---")
    lines.append("*Estimate for planning purposes only. Not financial advice.*")

    return "\n".join(lines)
