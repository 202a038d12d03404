"""
BizLedger analyzers — pure computation over cash-book records.

Nothing in here performs I/O: callers hand in records already loaded by a
connector and get structured results back.
"""

from bizledger.analyzers.aggregator import (
    AggregationResult,
    PeriodAggregator,
    PeriodBucket,
    aggregate,
    filter_transactions,
)
from bizledger.analyzers.currency import (
    DEFAULT_CURRENCY,
    SUPPORTED_CURRENCIES,
    format_currency,
    get_currency,
    resolve_currency,
)
from bizledger.analyzers.insights import Insight, generate_insights
from bizledger.analyzers.periods import Granularity, WeeklyPolicy, period_key, week_start

__all__ = [
    "AggregationResult",
    "DEFAULT_CURRENCY",
    "Granularity",
    "Insight",
    "PeriodAggregator",
    "PeriodBucket",
    "SUPPORTED_CURRENCIES",
    "WeeklyPolicy",
    "aggregate",
    "filter_transactions",
    "format_currency",
    "generate_insights",
    "get_currency",
    "period_key",
    "resolve_currency",
    "week_start",
]
