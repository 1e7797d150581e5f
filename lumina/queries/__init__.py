"""Ledger queries package: period selection and statistics."""

from lumina.queries.period import Period, in_month, month_key, recent, select
from lumina.queries.statistics import StatisticsEngine, compute_stats

__all__ = [
    "Period",
    "StatisticsEngine",
    "compute_stats",
    "in_month",
    "month_key",
    "recent",
    "select",
]
