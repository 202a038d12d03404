"""Tests for summary insights."""

from datetime import date

import pytest

from bizledger.analyzers.aggregator import aggregate
from bizledger.analyzers.currency import get_currency
from bizledger.analyzers.insights import generate_insights, period_change
from bizledger.models.financial import Transaction

USD = get_currency("USD")


def _txn(d: date, inflow: float = 0.0, outflow: float = 0.0, method: str | None = None) -> Transaction:
    return Transaction(date=d, inflow=inflow, outflow=outflow, payment_method=method, currency=USD)


def _by_title(insights):
    return {i.title: i for i in insights}


class TestGenerateInsights:
    def test_empty(self) -> None:
        assert generate_insights(aggregate([])) == []

    def test_profitable(self) -> None:
        result = aggregate(
            [
                _txn(date(2024, 1, 3), inflow=300, method="Bank"),
                _txn(date(2024, 1, 9), outflow=100, method="Bank"),
                _txn(date(2024, 2, 1), inflow=100),
            ]
        )
        insights = _by_title(generate_insights(result))

        profit = insights["Profitable Period"]
        assert profit.kind == "positive"
        assert profit.value == 300
        assert profit.description == "Net surplus of $300.00"

        best = insights["Best Monthly"]
        assert best.description.startswith("2024-01")
        assert best.value == 200

        # two inflow records
        assert insights["Average Inflow"].value == 200

        method = insights["Preferred Payment Method"]
        assert method.description == "Bank used in 2 transaction(s)"

        change = insights["Period Change"]
        assert change.value == pytest.approx(-50.0)
        assert change.kind == "negative"
        assert change.description == "-50.0% from previous period"

    def test_deficit(self) -> None:
        result = aggregate([_txn(date(2024, 1, 3), outflow=80)])
        insights = _by_title(generate_insights(result))

        deficit = insights["Deficit Period"]
        assert deficit.kind == "negative"
        assert deficit.description == "Net deficit of $80.00"
        # no inflow records: divide by one, not zero
        assert insights["Average Inflow"].value == 0
        assert "Period Change" not in insights

    def test_best_period_tie_keeps_earliest(self) -> None:
        result = aggregate(
            [_txn(date(2024, 1, 1), inflow=50), _txn(date(2024, 2, 1), inflow=50)],
            "monthly",
        )
        insights = _by_title(generate_insights(result))
        assert insights["Best Monthly"].description.startswith("2024-01")

    def test_payment_method_tie_keeps_cash(self) -> None:
        result = aggregate([_txn(date(2024, 1, 1), inflow=1, method="Bank"), _txn(date(2024, 1, 2), inflow=1)])
        insights = _by_title(generate_insights(result))
        assert insights["Preferred Payment Method"].description.startswith("Cash")

    def test_best_title_follows_granularity(self) -> None:
        result = aggregate([_txn(date(2024, 1, 1), inflow=1)], "quarterly")
        assert "Best Quarterly" in _by_title(generate_insights(result))


class TestPeriodChange:
    def test_single_period(self) -> None:
        assert period_change(aggregate([_txn(date(2024, 1, 1), inflow=1)])) is None

    def test_previous_zero_net(self) -> None:
        result = aggregate(
            [
                _txn(date(2024, 1, 1), inflow=10),
                _txn(date(2024, 1, 2), outflow=10),
                _txn(date(2024, 2, 1), inflow=10),
            ]
        )
        assert period_change(result) is None

    def test_growth_against_negative_base(self) -> None:
        result = aggregate([_txn(date(2024, 1, 1), outflow=100), _txn(date(2024, 2, 1), inflow=50)])
        # (50 - -100) / 100
        assert period_change(result) == pytest.approx(150.0)
