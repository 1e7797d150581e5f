"""Tests for the period selector and statistics engine."""

from datetime import date, datetime

import pytest

from lumina.models.transaction import Transaction
from lumina.queries import (
    Period,
    StatisticsEngine,
    compute_stats,
    in_month,
    month_key,
    recent,
    select,
)


def _txn(txn_id, txn_type, amount, category, when="2025-02-10"):
    return Transaction(
        id=txn_id, type=txn_type, amount=amount, category=category, date=when,
    )


@pytest.fixture
def sample_ledger():
    """The example ledger: one salary, three expenses."""
    return [
        _txn("1", "income", 1000, "Salary"),
        _txn("2", "expense", 200, "Food"),
        _txn("3", "expense", 50, "Food"),
        _txn("4", "expense", 100, "Transport"),
    ]


class TestPeriodSelector:
    """Tests for calendar-month selection."""

    def test_month_and_history_views(self):
        """Test the January/February example."""
        ledger = [
            _txn("feb-end", "expense", 1, "Food", "2025-02-28"),
            _txn("feb-start", "expense", 1, "Food", "2025-02-01"),
            _txn("jan", "expense", 1, "Food", "2025-01-15"),
        ]
        now = date(2025, 2, 15)

        monthly = select(ledger, Period.MONTH, now)
        assert [t.id for t in monthly] == ["feb-end", "feb-start"]

        history = select(ledger, Period.ALL_TIME, now)
        assert [t.id for t in history] == ["feb-end", "feb-start", "jan"]

    def test_month_boundary_has_no_carry_over(self):
        """Test that the 1st of a month starts an empty window."""
        ledger = [_txn("jan-31", "expense", 1, "Food", "2025-01-31")]
        assert select(ledger, Period.MONTH, date(2025, 2, 1)) == []

    def test_same_month_other_year_excluded(self):
        """Test that year is part of the match."""
        ledger = [_txn("old", "expense", 1, "Food", "2024-02-10")]
        assert select(ledger, Period.MONTH, date(2025, 2, 10)) == []

    def test_accepts_datetime_now(self):
        """Test that a datetime works as the reference."""
        txn = _txn("a", "income", 1, "Gift", "2025-12-31")
        assert in_month(txn, datetime(2025, 12, 1, 23, 59))

    def test_period_from_string(self):
        """Test that the plain value works too."""
        ledger = [_txn("a", "income", 1, "Gift", "2025-01-01")]
        assert select(ledger, "all_time") == ledger

    def test_month_key(self):
        assert month_key(date(2025, 3, 9)) == "2025-03"

    def test_recent(self, sample_ledger):
        """Test the dashboard strip."""
        assert [t.id for t in recent(sample_ledger, 2)] == ["1", "2"]
        assert recent(sample_ledger, 10) == sample_ledger

    def test_recent_rejects_negative_limit(self, sample_ledger):
        with pytest.raises(ValueError):
            recent(sample_ledger, -1)


class TestStatisticsEngine:
    """Tests for compute_stats."""

    def test_example_scenario(self, sample_ledger):
        """Test the worked example end to end."""
        stats = compute_stats(sample_ledger)
        assert stats.total_income == 1000
        assert stats.total_expense == 350
        assert stats.balance == 650
        assert stats.category_breakdown == {"Food": 250, "Transport": 100}

    def test_empty_slice(self):
        """Test that nothing in view means zeros."""
        stats = compute_stats([])
        assert stats.total_income == 0
        assert stats.total_expense == 0
        assert stats.balance == 0
        assert stats.category_breakdown == {}

    def test_negative_balance(self):
        """Test balance can go below zero."""
        stats = compute_stats([_txn("a", "expense", 75.5, "Rent")])
        assert stats.balance == -75.5

    def test_income_not_in_breakdown(self, sample_ledger):
        """Test the breakdown is built from expenses only."""
        stats = compute_stats(sample_ledger)
        assert "Salary" not in stats.category_breakdown

    def test_balance_identity(self):
        """Test balance == income - expense for awkward floats."""
        ledger = [
            _txn("a", "income", 0.1, "Gift"),
            _txn("b", "income", 0.2, "Gift"),
            _txn("c", "expense", 0.3, "Food"),
            _txn("d", "expense", 0.7, "Rent"),
            _txn("e", "expense", 1e-3, "Food"),
        ]
        stats = compute_stats(ledger)
        assert stats.total_income - stats.total_expense == stats.balance

    def test_breakdown_sums_to_total_expense(self):
        """Test that the breakdown accounts for every expense."""
        ledger = [
            _txn("a", "expense", 0.1, "Food"),
            _txn("b", "expense", 0.2, "Rent"),
            _txn("c", "expense", 0.3, "Food"),
            _txn("d", "expense", 19.99, "Shopping"),
            _txn("e", "income", 5, "Gift"),
        ]
        stats = compute_stats(ledger)
        assert sum(stats.category_breakdown.values()) == stats.total_expense

    def test_freeform_categories_aggregate(self):
        """Test that unknown labels are grouped like any other."""
        ledger = [
            _txn("a", "expense", 10, "Pets"),
            _txn("b", "expense", 5, "Pets"),
        ]
        assert compute_stats(ledger).category_breakdown == {"Pets": 15}

    def test_for_period(self):
        """Test selection plus aggregation."""
        ledger = [
            _txn("feb", "income", 100, "Gift", "2025-02-02"),
            _txn("jan", "expense", 40, "Food", "2025-01-20"),
        ]
        engine = StatisticsEngine()
        now = date(2025, 2, 15)

        monthly = engine.for_period(ledger, Period.MONTH, now)
        assert monthly.total_income == 100
        assert monthly.total_expense == 0

        history = engine.for_period(ledger, Period.ALL_TIME, now)
        assert history.balance == 60
