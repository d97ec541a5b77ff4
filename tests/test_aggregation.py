"""
Tests for summaries, budget status and the monthly trend.

The aggregation engine under test uses a fixed clock (2024-06-15).
"""

import pytest
from datetime import date
from decimal import Decimal

from finledger.models import BudgetLevel
from finledger.queries import (
    classify_budget,
    month_key,
    parse_month,
    shift_month,
    trailing_months,
)


def tx(account_id, tx_type, amount, day, category="Alimentacao"):
    return {
        "accountId": account_id,
        "type": tx_type,
        "category": category,
        "amount": amount,
        "date": day.isoformat(),
    }


class TestPeriods:
    """Tests for calendar-month helpers."""

    def test_parse_month(self):
        """Test valid and invalid month strings."""
        assert parse_month("2024-02") == date(2024, 2, 1)
        assert parse_month(" 2024-12 ") == date(2024, 12, 1)
        for bad in ("2024-13", "2024-2", "24-02", "", None, "2024-02-01"):
            assert parse_month(bad) is None

    def test_shift_month_crosses_years(self):
        """Test month arithmetic across year boundaries."""
        assert shift_month(date(2024, 12, 1), 1) == date(2025, 1, 1)
        assert shift_month(date(2024, 1, 1), -1) == date(2023, 12, 1)
        assert shift_month(date(2024, 3, 1), -14) == date(2023, 1, 1)

    def test_trailing_months(self):
        """Test the window is oldest first and ends with today's month."""
        months = trailing_months(date(2024, 2, 29), 6)
        assert [month_key(m) for m in months] == [
            "2023-09", "2023-10", "2023-11", "2023-12", "2024-01", "2024-02",
        ]


class TestClassifyBudget:
    """Tests for budget level thresholds."""

    @pytest.mark.parametrize("spent, expected", [
        ("0", BudgetLevel.OK),
        ("79.99", BudgetLevel.OK),
        ("80.00", BudgetLevel.WARNING),
        ("99.99", BudgetLevel.WARNING),
        ("100.00", BudgetLevel.EXCEEDED),
        ("250.00", BudgetLevel.EXCEEDED),
    ])
    def test_levels_against_limit_of_100(self, spent, expected):
        """Test each side of the 80% and 100% boundaries."""
        _, level = classify_budget(Decimal(spent), Decimal("100.00"))
        assert level == expected

    def test_percent_value(self):
        """Test the reported percentage."""
        percent, _ = classify_budget(Decimal("25.00"), Decimal("200.00"))
        assert percent == Decimal("12.5")

    def test_custom_thresholds(self):
        """Test configurable warning and exceeded thresholds."""
        _, level = classify_budget(Decimal("50"), Decimal("100"), warning_percent=50, exceeded_percent=90)
        assert level == BudgetLevel.WARNING


class TestSummary:
    """Tests for headline totals."""

    async def test_empty_user(self, aggregates, alice):
        """Test that a new user sees zeros."""
        user, _ = alice
        summary = await aggregates.summary(user.id)
        assert summary.income == Decimal("0")
        assert summary.expense == Decimal("0")
        assert summary.balance == Decimal("0")
        assert summary.transactions == 0

    async def test_balance_includes_opening_balances(self, aggregates, accounts, alice):
        """Test that balance is the sum of accounts, not income minus expense."""
        user, _ = alice
        await accounts.open_account(user.id, {"name": "Poupanca", "type": "savings", "initialBalance": "1000"})

        summary = await aggregates.summary(user.id)
        assert summary.balance == Decimal("1000.00")
        assert summary.income == Decimal("0")
        assert summary.transactions == 0

    async def test_totals(self, aggregates, accounts, transactions, alice, bob):
        """Test totals over all time and only for the caller."""
        user, main = alice
        bob_user, bob_account = bob
        await accounts.open_account(user.id, {"name": "Cash", "type": "cash", "initialBalance": "1000"})
        await transactions.create(user.id, tx(main, "income", "200", date(2020, 1, 1)))
        await transactions.create(user.id, tx(main, "expense", "50.25", date(2024, 6, 1)))
        await transactions.create(bob_user.id, tx(bob_account, "income", "9999", date(2024, 6, 1)))

        summary = await aggregates.summary(user.id)
        assert summary.income == Decimal("200.00")
        assert summary.expense == Decimal("50.25")
        assert summary.balance == Decimal("1149.75")
        assert summary.transactions == 2


class TestBudgetStatus:
    """Tests for spend against monthly limits."""

    async def test_boundaries(self, aggregates, budgets, transactions, alice):
        """Test ok, warning and exceeded as spending grows."""
        user, main = alice
        await budgets.set_budget(user.id, {"month": "2024-06", "category": "Alimentacao", "limitAmount": "100"})

        await transactions.create(user.id, tx(main, "expense", "79.99", date(2024, 6, 3)))
        [status] = await aggregates.budget_status(user.id, "2024-06")
        assert status.status == BudgetLevel.OK
        assert status.spent == Decimal("79.99")
        assert status.remaining == Decimal("20.01")

        await transactions.create(user.id, tx(main, "expense", "0.01", date(2024, 6, 30)))
        [status] = await aggregates.budget_status(user.id, "2024-06")
        assert status.status == BudgetLevel.WARNING
        assert status.percent == pytest.approx(80.0)

        await transactions.create(user.id, tx(main, "expense", "20", date(2024, 6, 1)))
        [status] = await aggregates.budget_status(user.id, "2024-06")
        assert status.status == BudgetLevel.EXCEEDED
        assert status.remaining == Decimal("0.00")

    async def test_no_spending(self, aggregates, budgets, alice):
        """Test that a budget with no expenses is ok at zero percent."""
        user, _ = alice
        await budgets.set_budget(user.id, {"month": "2024-06", "category": "Lazer", "limitAmount": "300"})

        [status] = await aggregates.budget_status(user.id, "2024-06")
        assert status.spent == Decimal("0")
        assert status.percent == 0.0
        assert status.status == BudgetLevel.OK
        assert status.remaining == Decimal("300.00")

    async def test_only_matching_expenses_count(self, aggregates, budgets, transactions, alice, bob):
        """Test that income, other months, other categories and other users are ignored."""
        user, main = alice
        bob_user, bob_account = bob
        await budgets.set_budget(user.id, {"month": "2024-06", "category": "Lazer", "limitAmount": "100"})

        await transactions.create(user.id, tx(main, "expense", "10", date(2024, 6, 10), "Lazer"))
        await transactions.create(user.id, tx(main, "income", "500", date(2024, 6, 10), "Lazer"))
        await transactions.create(user.id, tx(main, "expense", "40", date(2024, 5, 31), "Lazer"))
        await transactions.create(user.id, tx(main, "expense", "40", date(2024, 7, 1), "Lazer"))
        await transactions.create(user.id, tx(main, "expense", "40", date(2024, 6, 10), "Saude"))
        await transactions.create(bob_user.id, tx(bob_account, "expense", "40", date(2024, 6, 10), "Lazer"))

        [status] = await aggregates.budget_status(user.id, "2024-06")
        assert status.spent == Decimal("10.00")

    async def test_ordered_by_category(self, aggregates, budgets, alice):
        """Test that statuses are ordered by category name."""
        user, _ = alice
        for category in ("Transporte", "Alimentacao", "Lazer"):
            await budgets.set_budget(user.id, {"month": "2024-06", "category": category, "limitAmount": "50"})

        statuses = await aggregates.budget_status(user.id, "2024-06")
        assert [s.category for s in statuses] == ["Alimentacao", "Lazer", "Transporte"]

    async def test_set_budget_replaces_limit(self, aggregates, budgets, alice):
        """Test that setting the same key twice keeps one row with the new limit."""
        user, _ = alice
        await budgets.set_budget(user.id, {"month": "2024-06", "category": "Lazer", "limitAmount": "100"})
        await budgets.set_budget(user.id, {"month": "2024-06", "category": "Lazer", "limitAmount": "250"})

        statuses = await aggregates.budget_status(user.id, "2024-06")
        assert len(statuses) == 1
        assert statuses[0].limit == Decimal("250.00")

    async def test_budgets_are_private(self, aggregates, budgets, alice, bob):
        """Test that one user's budgets are invisible to another."""
        user, _ = alice
        bob_user, _ = bob
        await budgets.set_budget(user.id, {"month": "2024-06", "category": "Lazer", "limitAmount": "100"})

        assert await aggregates.budget_status(bob_user.id, "2024-06") == []

    async def test_invalid_month_is_empty(self, aggregates, budgets, alice):
        """Test that a malformed month yields no rows instead of an error."""
        user, _ = alice
        await budgets.set_budget(user.id, {"month": "2024-06", "category": "Lazer", "limitAmount": "100"})

        for month in ("2024-6", "June", "", "2024-13"):
            assert await aggregates.budget_status(user.id, month) == []


class TestTrend:
    """Tests for the trailing monthly trend."""

    async def test_window_shape(self, aggregates, alice):
        """Test six zeroed months ending with the clock's month."""
        user, _ = alice
        points = await aggregates.trend(user.id)

        assert [p.month for p in points] == [
            "2024-01", "2024-02", "2024-03", "2024-04", "2024-05", "2024-06",
        ]
        assert all(p.income == 0 and p.expense == 0 and p.net == 0 for p in points)

    async def test_window_edges(self, aggregates, transactions, alice):
        """Test that only transactions inside the window are bucketed."""
        user, main = alice
        await transactions.create(user.id, tx(main, "income", "100", date(2024, 1, 1)))
        await transactions.create(user.id, tx(main, "expense", "50", date(2023, 12, 31)))
        await transactions.create(user.id, tx(main, "expense", "20", date(2024, 6, 30)))
        await transactions.create(user.id, tx(main, "income", "999", date(2024, 7, 1)))
        await transactions.create(user.id, tx(main, "expense", "5", date(2024, 1, 15)))

        points = {p.month: p for p in await aggregates.trend(user.id)}

        assert points["2024-01"].income == Decimal("100.00")
        assert points["2024-01"].expense == Decimal("5.00")
        assert points["2024-01"].net == Decimal("95.00")
        assert points["2024-06"].expense == Decimal("20.00")
        assert points["2024-06"].net == Decimal("-20.00")
        assert sum(p.income for p in points.values()) == Decimal("100.00")

    async def test_explicit_today(self, aggregates, transactions, alice):
        """Test a window across a year boundary."""
        user, main = alice
        await transactions.create(user.id, tx(main, "income", "10", date(2023, 11, 5)))

        points = await aggregates.trend(user.id, today=date(2024, 2, 10))
        assert points[0].month == "2023-09"
        assert points[-1].month == "2024-02"
        assert points[2].income == Decimal("10.00")

    async def test_only_own_rows(self, aggregates, transactions, alice, bob):
        """Test that another user's transactions never appear."""
        user, _ = alice
        bob_user, bob_account = bob
        await transactions.create(bob_user.id, tx(bob_account, "income", "10", date(2024, 6, 1)))

        points = await aggregates.trend(user.id)
        assert points[-1].income == Decimal("0")
