"""
Statistics Engine

DESIGN DECISION: Statistics are a PURE function of a transaction slice.
Nothing here is stored; the dashboard recomputes on every read. That way
the ledger stays the only source of truth.

Algorithm:
1. Partition by type
2. Sum income and expense amounts
3. balance = income - expense (may be negative)
4. Fold expenses into a per-category breakdown

Sums use plain float addition. Good enough for a personal ledger; not
cent-exact accounting.
"""

from typing import Iterable, Optional

from lumina.models.stats import FinancialStats
from lumina.models.transaction import Transaction, TransactionType
from lumina.queries.period import DateLike, Period, select


def compute_stats(transactions: Iterable[Transaction]) -> FinancialStats:
    """
    Aggregate figures for a slice of the ledger.

    An empty slice gives zero totals and an empty breakdown.
    Categories with no expense in the slice are absent from the breakdown.
    """
    total_income = 0.0
    breakdown: dict[str, float] = {}

    for txn in transactions:
        if txn.type == TransactionType.INCOME:
            total_income += txn.amount
        elif txn.type == TransactionType.EXPENSE:
            breakdown[txn.category] = breakdown.get(txn.category, 0.0) + txn.amount

    # Summed from the breakdown so sum(breakdown.values()) == total_expense
    total_expense = sum(breakdown.values(), 0.0)

    return FinancialStats(
        total_income=total_income,
        total_expense=total_expense,
        category_breakdown=breakdown,
    )


class StatisticsEngine:
    """
    Convenience wrapper combining period selection and aggregation.

    Stateless: it only reads what it is given.
    """

    def compute(self, transactions: Iterable[Transaction]) -> FinancialStats:
        return compute_stats(transactions)

    def for_period(
        self,
        transactions: Iterable[Transaction],
        period: Period,
        now: Optional[DateLike] = None,
    ) -> FinancialStats:
        """Stats for the transactions in view for a period."""
        return compute_stats(select(transactions, period, now))
