"""Tests for budgets and variance."""

from datetime import date

import pytest

from bizledger.analyzers.budget import (
    Budget,
    BudgetItem,
    BudgetPeriod,
    BudgetStatus,
    ItemType,
    VarianceStatus,
    budget_totals,
    filter_budgets,
    variance_status,
)
from bizledger.analyzers.currency import DEFAULT_CURRENCY, get_currency
from bizledger.connectors.normalize import NumericPolicy, RecordValidationError

RAW_BUDGET = {
    "name": "March Operations",
    "period": "monthly",
    "status": "active",
    "currency": "USD",
    "startDate": "2024-03-01",
    "endDate": "2024-03-31",
    "items": [
        {"category": "Sales", "type": "income", "allocated": "5,000", "actual": 4200},
        {"category": "Rent", "type": "expense", "allocated": 1200, "actual": 1200},
        {"category": "Fuel", "type": "Expense", "allocated": 300, "actual": "450"},
        {"category": "Misc", "type": "other", "allocated": "n/a", "actual": None},
    ],
}


class TestBudgetFromRecord:
    def test_parses_fields(self) -> None:
        budget = Budget.from_record(RAW_BUDGET)

        assert budget.name == "March Operations"
        assert budget.period == BudgetPeriod.MONTHLY
        assert budget.status == BudgetStatus.ACTIVE
        assert budget.currency == get_currency("USD")
        assert budget.start_date == date(2024, 3, 1)
        assert budget.end_date == date(2024, 3, 31)
        assert len(budget.items) == 4

    def test_lenient_items(self) -> None:
        misc = Budget.from_record(RAW_BUDGET).items[-1]

        assert misc.type == ItemType.EXPENSE
        assert misc.allocated == 0.0
        assert misc.actual == 0.0

    def test_strict_items(self) -> None:
        with pytest.raises(RecordValidationError):
            Budget.from_record(RAW_BUDGET, NumericPolicy.STRICT)

    def test_unknown_period_and_status(self) -> None:
        budget = Budget.from_record({"name": "x", "period": "biweekly", "status": "archived"})
        assert budget.period == BudgetPeriod.CUSTOM
        assert budget.status == BudgetStatus.DRAFT
        assert budget.items == []

    def test_non_mapping_items_skipped(self) -> None:
        budget = Budget.from_record({"name": "x", "items": ["bad", 3, {"category": "Rent", "allocated": 5}]})
        assert [item.category for item in budget.items] == ["Rent"]


class TestBudgetTotals:
    def test_totals(self) -> None:
        totals = Budget.from_record(RAW_BUDGET).totals()

        assert totals.currency == get_currency("USD")
        assert totals.total_allocated == 6500
        assert totals.total_actual == 5850
        assert totals.total_income == 5000
        assert totals.total_expense == 1500
        assert totals.planned_net == 3500
        assert totals.variance == 650
        assert totals.variance_status == VarianceStatus.UNDER

    def test_item_variance(self) -> None:
        item = BudgetItem(category="Fuel", allocated=300, actual=450)
        assert item.variance == -150

    def test_default_currency(self) -> None:
        assert budget_totals([]).currency == DEFAULT_CURRENCY
        usd = get_currency("USD")
        assert budget_totals([], default_currency=usd).currency == usd

    def test_variance_status(self) -> None:
        assert variance_status(10) == VarianceStatus.UNDER
        assert variance_status(-0.5) == VarianceStatus.OVER
        assert variance_status(0) == VarianceStatus.ON


class TestFilterBudgets:
    @pytest.fixture
    def budgets(self) -> list[Budget]:
        return [
            Budget(name="Q1 Marketing", status=BudgetStatus.ACTIVE),
            Budget(name="Q2 Marketing", status=BudgetStatus.DRAFT),
            Budget(name="Fleet", status=BudgetStatus.COMPLETED),
        ]

    def test_all(self, budgets: list[Budget]) -> None:
        assert filter_budgets(budgets) == budgets

    def test_search(self, budgets: list[Budget]) -> None:
        assert [b.name for b in filter_budgets(budgets, search="marketing")] == ["Q1 Marketing", "Q2 Marketing"]

    def test_status(self, budgets: list[Budget]) -> None:
        assert [b.name for b in filter_budgets(budgets, status="Draft")] == ["Q2 Marketing"]
        assert [b.name for b in filter_budgets(budgets, search="q", status=BudgetStatus.ACTIVE)] == ["Q1 Marketing"]

    def test_unknown_status(self, budgets: list[Budget]) -> None:
        with pytest.raises(ValueError):
            filter_budgets(budgets, status="Archived")

    def test_status_case_insensitive(self, budgets: list[Budget]) -> None:
        assert [b.name for b in filter_budgets(budgets, status="completed")] == ["Fleet"]
        assert filter_budgets(budgets, status="all") == budgets
