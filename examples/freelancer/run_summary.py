"""
Example: Summarize a freelancer's tax year.

Run:
    python examples/freelancer/run_summary.py
    python examples/freelancer/run_summary.py 2024/2025 --search software

Or via CLI:
    taxcentre summary --data examples/freelancer/ledger.yaml --tax-year 2023/2024
"""

import sys
from pathlib import Path

# Get the directory where this script lives
SCRIPT_DIR = Path(__file__).parent.resolve()
LEDGER_PATH = SCRIPT_DIR / "ledger.yaml"

from taxcentre import TaxCentre
from taxcentre.config import ConnectorConfig, TaxCentreConfig
from taxcentre.exporters.markdown import format_money


def main() -> None:
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    label = args[0] if args else "2023/2024"
    search = ""
    if "--search" in sys.argv:
        search = sys.argv[sys.argv.index("--search") + 1]

    # Configure with the file connector
    config = TaxCentreConfig(
        connectors=[
            ConnectorConfig(
                type="file",
                options={"file_path": str(LEDGER_PATH)},
            )
        ]
    )

    centre = TaxCentre(config=config)
    centre._setup()
    snapshot = centre.load_sync()

    print(f"Tax years on record: {', '.join(centre.available_years(snapshot))}")
    print()

    summary = centre.tax_year(snapshot, label, search)
    print(summary.to_markdown(config.currency))
    print()

    print("Per-invoice tax:")
    for line in summary.invoice_lines:
        print(
            f"  {line.issue_date}  {format_money(line.amount):>10}  "
            f"tax {format_money(line.total_tax):>9}  take home {format_money(line.take_home):>10}"
        )

    report = centre.outgoings(snapshot)
    print()
    print(f"Recurring monthly cost: {format_money(report.recurring_monthly_cost)}")
    print(f"Projected annual cost:  {format_money(report.projected_annual_cost)}")


if __name__ == "__main__":
    main()
