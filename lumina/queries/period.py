"""
Period Selector

Decides which transactions are "in view".

There are exactly two periods:
- MONTH: the current calendar month (dashboard)
- ALL_TIME: the whole ledger (history)

DESIGN DECISION: The month match is by calendar year and month, NOT a
rolling 30-day window. On the 1st of a month the dashboard starts empty,
with no carry-over from the previous month. There is no support for
arbitrary ranges or past months.
"""

from datetime import date, datetime
from enum import Enum
from typing import Iterable, Optional, Union

from lumina.models.transaction import Transaction


class Period(str, Enum):
    """The two supported windows."""
    MONTH = "month"
    ALL_TIME = "all_time"


DateLike = Union[date, datetime]


def month_key(when: DateLike) -> str:
    """'YYYY-MM' for a date, the unit of the month match."""
    return f"{when.year:04d}-{when.month:02d}"


def in_month(txn: Transaction, now: DateLike) -> bool:
    """True if the transaction falls in the same calendar month as `now`."""
    return txn.date.year == now.year and txn.date.month == now.month


def select(
    transactions: Iterable[Transaction],
    period: Period,
    now: Optional[DateLike] = None,
) -> list[Transaction]:
    """
    Transactions in view for a period, in their original order.

    Args:
        transactions: Ordered ledger (newest first)
        period: MONTH or ALL_TIME
        now: Reference date for MONTH; defaults to today
    """
    period = Period(period)
    if period == Period.ALL_TIME:
        return list(transactions)

    now = now or date.today()
    return [txn for txn in transactions if in_month(txn, now)]


def recent(transactions: Iterable[Transaction], limit: int = 5) -> list[Transaction]:
    """The first `limit` transactions of an ordered slice."""
    if limit < 0:
        raise ValueError("limit must not be negative")
    return list(transactions)[:limit]
