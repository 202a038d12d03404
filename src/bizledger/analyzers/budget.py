"""
Budgets — planned vs actual amounts per line item.

A budget is a named list of income / expense lines, each with an allocated
(planned) and an actual amount. Totals and variance are recomputed from the
lines every time; amounts go through the same coerce-or-zero policy as
cash-book records.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any

from bizledger.analyzers.currency import currency_from_value, resolve_currency
from bizledger.connectors.normalize import NumericPolicy, coerce_amount, parse_date
from bizledger.models.financial import CurrencyTag

logger = logging.getLogger("bizledger.analyzers.budget")

ALL_STATUSES = "All"


class BudgetPeriod(str, Enum):
    """Time span a budget is planned for."""

    WEEKLY = "Weekly"
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    ANNUAL = "Annual"
    CUSTOM = "Custom"


class BudgetStatus(str, Enum):
    """Lifecycle state of a budget."""

    ACTIVE = "Active"
    DRAFT = "Draft"
    COMPLETED = "Completed"


class ItemType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class VarianceStatus(str, Enum):
    """Where actual spending sits against the plan."""

    UNDER = "under_budget"  # allocated > actual
    OVER = "over_budget"  # actual > allocated
    ON = "on_budget"


@dataclass
class BudgetItem:
    """One planned line."""

    category: str
    type: ItemType = ItemType.EXPENSE
    allocated: float = 0.0
    actual: float = 0.0
    notes: str = ""

    @property
    def variance(self) -> float:
        return self.allocated - self.actual


@dataclass
class Budget:
    """A named budget with its lines."""

    name: str
    items: list[BudgetItem] = field(default_factory=list)
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    status: BudgetStatus = BudgetStatus.ACTIVE
    currency: CurrencyTag | None = None
    start_date: date | None = None
    end_date: date | None = None

    @classmethod
    def from_record(
        cls,
        raw: Mapping[str, Any],
        policy: NumericPolicy = NumericPolicy.LENIENT,
    ) -> Budget:
        """Build a budget from a stored document."""
        items: list[BudgetItem] = []
        for raw_item in raw.get("items") or []:
            if not isinstance(raw_item, Mapping):
                logger.debug("Skipping budget item %r: not a mapping", raw_item)
                continue
            try:
                item_type = ItemType(str(raw_item.get("type") or "expense").lower())
            except ValueError:
                logger.debug("Unknown budget item type %r, using expense", raw_item.get("type"))
                item_type = ItemType.EXPENSE
            items.append(
                BudgetItem(
                    category=str(raw_item.get("category") or ""),
                    type=item_type,
                    allocated=coerce_amount(raw_item.get("allocated"), policy, field="allocated"),
                    actual=coerce_amount(raw_item.get("actual"), policy, field="actual"),
                    notes=str(raw_item.get("notes") or ""),
                )
            )

        try:
            period = BudgetPeriod(str(raw.get("period") or "Monthly").capitalize())
        except ValueError:
            period = BudgetPeriod.CUSTOM
        try:
            status = BudgetStatus(str(raw.get("status") or "Active").capitalize())
        except ValueError:
            status = BudgetStatus.DRAFT

        return cls(
            name=str(raw.get("name") or ""),
            items=items,
            period=period,
            status=status,
            currency=currency_from_value(raw.get("currency")),
            start_date=parse_date(raw.get("startDate") or raw.get("start_date")),
            end_date=parse_date(raw.get("endDate") or raw.get("end_date")),
        )

    def totals(self) -> BudgetTotals:
        return budget_totals(self.items, currency=self.currency)


@dataclass
class BudgetTotals:
    """Sums over a budget's lines."""

    currency: CurrencyTag
    total_allocated: float = 0.0
    total_actual: float = 0.0
    total_income: float = 0.0
    total_expense: float = 0.0

    @property
    def variance(self) -> float:
        """Allocated minus actual; positive means under budget."""
        return self.total_allocated - self.total_actual

    @property
    def planned_net(self) -> float:
        """Planned income minus planned expense."""
        return self.total_income - self.total_expense

    @property
    def variance_status(self) -> VarianceStatus:
        return variance_status(self.variance)


def variance_status(variance: float) -> VarianceStatus:
    if variance > 0:
        return VarianceStatus.UNDER
    if variance < 0:
        return VarianceStatus.OVER
    return VarianceStatus.ON


def budget_totals(
    items: Iterable[BudgetItem],
    *,
    currency: CurrencyTag | None = None,
    default_currency: CurrencyTag | None = None,
) -> BudgetTotals:
    """Allocated, actual, income and expense totals for a list of lines.

    Income and expense totals use the allocated amounts.
    """
    totals = BudgetTotals(currency=resolve_currency(currency, default_currency))
    for item in items:
        totals.total_allocated += item.allocated
        totals.total_actual += item.actual
        if item.type == ItemType.INCOME:
            totals.total_income += item.allocated
        elif item.type == ItemType.EXPENSE:
            totals.total_expense += item.allocated
    return totals


def filter_budgets(
    budgets: Iterable[Budget],
    *,
    search: str | None = None,
    status: BudgetStatus | str | None = ALL_STATUSES,
) -> list[Budget]:
    """Budgets whose name contains ``search`` and whose status matches.

    ``status`` is case-insensitive; ``"All"`` (or None) disables the status filter.
    """
    needle = search.strip().lower() if search else ""
    if isinstance(status, str) and not isinstance(status, BudgetStatus):
        status = status.strip().capitalize()
    wanted = None if status in (None, "", ALL_STATUSES) else BudgetStatus(status)
    return [
        b
        for b in budgets
        if (not needle or needle in b.name.lower()) and (wanted is None or b.status == wanted)
    ]
