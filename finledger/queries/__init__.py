"""Aggregation queries package."""

from finledger.queries.aggregation import AggregationEngine, classify_budget
from finledger.queries.periods import month_key, parse_month, shift_month, trailing_months

__all__ = [
    "AggregationEngine",
    "classify_budget",
    "month_key",
    "parse_month",
    "shift_month",
    "trailing_months",
]
