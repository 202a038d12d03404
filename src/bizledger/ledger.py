"""
BizLedger — Main orchestrator.

The BizLedger class is the top-level entry point that ties configuration,
connectors and the period aggregator together.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from bizledger.analyzers.aggregator import AggregationResult, PeriodAggregator, filter_transactions
from bizledger.analyzers.insights import Insight, generate_insights
from bizledger.analyzers.periods import Granularity, WeeklyPolicy
from bizledger.config import BizLedgerConfig
from bizledger.connectors.registry import ConnectorRegistry
from bizledger.models.financial import LedgerDataset, Transaction

logger = logging.getLogger("bizledger")


@dataclass
class LedgerReport:
    """A summary together with the filters that produced it."""

    result: AggregationResult
    insights: list[Insight] = field(default_factory=list)
    search: str | None = None
    start: date | None = None
    end: date | None = None
    source: str = "unknown"


@dataclass
class BizLedger:
    """Top-level orchestrator.

    Usage::

        from bizledger import BizLedger

        ledger = BizLedger.from_config("bizledger.yaml")
        report = ledger.report_sync(granularity="quarterly", search="rent")
        for bucket in report.result.display_order():
            ...

    Records are loaded once per :meth:`load` call; summaries are recomputed
    from the loaded records on every :meth:`summarize` call.
    """

    config: BizLedgerConfig = field(default_factory=BizLedgerConfig)
    connector_registry: ConnectorRegistry = field(default_factory=ConnectorRegistry)

    @classmethod
    def from_config(cls, config_path: str | None = None, **overrides: Any) -> BizLedger:
        """Create a BizLedger instance from a config file or keyword arguments."""
        config = BizLedgerConfig.load(config_path, **overrides)
        instance = cls(config=config)
        instance._setup()
        return instance

    def _setup(self) -> None:
        """Initialize connectors from config."""
        self.connector_registry = ConnectorRegistry()
        self.connector_registry.auto_discover(self.config)
        logger.info(
            "BizLedger initialized with %d connectors",
            len(self.connector_registry),
        )

    @property
    def aggregator(self) -> PeriodAggregator:
        return PeriodAggregator(
            default_currency=self.config.default_currency,
            weekly_policy=self.config.report.weekly_policy,
        )

    async def load(self) -> LedgerDataset:
        """Pull records from every registered connector into one dataset."""
        connectors = self.connector_registry.active_connectors
        datasets = await asyncio.gather(*(c.pull() for c in connectors))

        merged = LedgerDataset(source="+".join(d.source for d in datasets) or "none")
        for dataset in datasets:
            merged.extend(dataset)
        logger.info("Loaded %d records from %d sources", len(merged.transactions), len(datasets))
        return merged

    def summarize(
        self,
        transactions: list[Transaction],
        granularity: Granularity | str | None = None,
        *,
        weekly_policy: WeeklyPolicy | str | None = None,
        search: str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> AggregationResult:
        """Filter then aggregate. ``None`` options fall back to the config."""
        selected = filter_transactions(transactions, search=search, start=start, end=end)
        return self.aggregator.aggregate(
            selected,
            granularity if granularity is not None else self.config.report.granularity,
            weekly_policy=weekly_policy,
        )

    async def report(
        self,
        granularity: Granularity | str | None = None,
        *,
        weekly_policy: WeeklyPolicy | str | None = None,
        search: str | None = None,
        start: date | None = None,
        end: date | None = None,
    ) -> LedgerReport:
        """Load records, summarise them and derive insights."""
        dataset = await self.load()
        result = self.summarize(
            dataset.transactions,
            granularity,
            weekly_policy=weekly_policy,
            search=search,
            start=start,
            end=end,
        )
        return LedgerReport(
            result=result,
            insights=generate_insights(result),
            search=search,
            start=start,
            end=end,
            source=dataset.source,
        )

    def report_sync(self, *args: Any, **kwargs: Any) -> LedgerReport:
        """Synchronous wrapper around :meth:`report`."""
        return asyncio.run(self.report(*args, **kwargs))
