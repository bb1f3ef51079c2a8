"""Tests for the outgoings overview."""

from datetime import date
from decimal import Decimal

import pytest

from taxcentre.analyzers.fiscal_calendar import bounds_of
from taxcentre.analyzers.outgoings import (
    build_outgoings,
    expected_payments_this_month,
    recurring_monthly_cost,
    spend_in_window,
)
from taxcentre.config import MonthStep, TaxCentreConfig
from taxcentre.exceptions import InconsistentExpense
from taxcentre.models.financial import BillingCycle, Expense, ExpenseType

TODAY = date(2024, 5, 15)


def _sub(id: str, start: date, amount: str, cycle: BillingCycle, end: date | None = None) -> Expense:
    return Expense(
        id=id,
        name=id.title(),
        amount_gbp=Decimal(amount),
        type=ExpenseType.SUBSCRIPTION,
        billing_cycle=cycle,
        start_date=start,
        end_date=end,
    )


@pytest.fixture
def expenses() -> list[Expense]:
    return [
        _sub("hosting", date(2024, 1, 20), "10", BillingCycle.MONTHLY),
        _sub("domain", date(2023, 5, 25), "120", BillingCycle.ANNUALLY),
        _sub("cancelled", date(2023, 1, 1), "99", BillingCycle.MONTHLY, end=date(2024, 4, 1)),
        Expense(id="chair", name="Chair", amount_gbp=Decimal("50"), start_date=date(2024, 5, 18)),
        Expense(id="lamp", name="Lamp", amount_gbp=Decimal("20"), start_date=date(2024, 5, 10)),
    ]


class TestOutgoings:
    def test_recurring_monthly_cost(self, expenses: list[Expense]) -> None:
        assert recurring_monthly_cost(expenses, TODAY) == Decimal("20")

    def test_expected_payments(self, expenses: list[Expense]) -> None:
        due = expected_payments_this_month(expenses, TODAY)
        assert [(p.expense.id, p.due_date) for p in due] == [
            ("chair", date(2024, 5, 18)),
            ("hosting", date(2024, 5, 20)),
            ("domain", date(2024, 5, 25)),
        ]

    def test_leap_day_anniversary_rolls_into_march(self) -> None:
        expense = _sub("leap", date(2020, 2, 29), "60", BillingCycle.ANNUALLY)
        assert expected_payments_this_month([expense], date(2023, 2, 1)) == []
        due = expected_payments_this_month([expense], date(2023, 3, 1))
        assert due[0].due_date == date(2023, 3, 1)

    def test_leap_day_anniversary_clamped(self) -> None:
        expense = _sub("leap", date(2020, 2, 29), "60", BillingCycle.ANNUALLY)
        due = expected_payments_this_month([expense], date(2023, 2, 1), "clamp")
        assert due[0].due_date == date(2023, 2, 28)

    def test_month_end_billing_date(self) -> None:
        expense = _sub("saas", date(2024, 1, 31), "15", BillingCycle.MONTHLY)
        assert expected_payments_this_month([expense], date(2024, 2, 1)) == []
        due = expected_payments_this_month([expense], date(2024, 2, 1), MonthStep.CLAMP)
        assert due[0].due_date == date(2024, 2, 29)
        due = expected_payments_this_month([expense], date(2024, 3, 1))
        assert due[0].due_date == date(2024, 3, 2)

    def test_spend_in_window(self, expenses: list[Expense]) -> None:
        total, subscriptions = spend_in_window(expenses, bounds_of("2023/2024"))
        # hosting Jan-Mar 2024, domain May 2023, cancelled May 2023 to Apr 2024
        assert subscriptions == Decimal("30") + Decimal("120") + Decimal("1188")
        assert total == subscriptions

    def test_build_report(self, expenses: list[Expense]) -> None:
        report = build_outgoings(expenses, bounds_of("2024/2025"), TODAY)
        assert report.projected_annual_cost == Decimal("240")
        assert report.one_time_spend == Decimal("70")
        assert len(report.expected_payments) == 3


class TestOutgoingsErrorMode:
    @pytest.fixture
    def with_invalid(self, expenses: list[Expense]) -> list[Expense]:
        bad = Expense(id="bad", amount_gbp=Decimal("500"), start_date=date(2024, 5, 20))
        return [*expenses, bad]

    def test_fail_mode_raises_by_default(self, with_invalid: list[Expense]) -> None:
        with pytest.raises(InconsistentExpense) as exc:
            build_outgoings(with_invalid, bounds_of("2024/2025"), TODAY)
        assert exc.value.record_id == "bad"

    def test_skip_mode_from_config(self, with_invalid: list[Expense]) -> None:
        config = TaxCentreConfig(error_mode="skip")
        report = build_outgoings(with_invalid, bounds_of("2024/2025"), TODAY, config=config)
        assert report.one_time_spend == Decimal("70")
        assert "bad" not in [p.expense.id for p in report.expected_payments]
        assert [s.record_id for s in report.skipped] == ["bad"]
        assert report.skipped[0].record_type == "expense"

    def test_error_mode_argument_overrides_config(self, with_invalid: list[Expense]) -> None:
        report = build_outgoings(with_invalid, bounds_of("2024/2025"), TODAY, error_mode="skip")
        assert len(report.skipped) == 1
        assert len(report.expected_payments) == 3

    def test_valid_records_skip_nothing(self, expenses: list[Expense]) -> None:
        report = build_outgoings(expenses, bounds_of("2024/2025"), TODAY, error_mode="skip")
        assert report.skipped == []
