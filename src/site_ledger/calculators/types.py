"""Type definitions for ledger aggregation."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Callable
from uuid import UUID

ZERO = Decimal("0")

# Budget bucket for expenses not charged to any worker.
GENERAL_CATEGORY = "general"


@dataclass(frozen=True)
class LedgerTotals:
    """Earned, expensed and paid sums with the resulting balance.

    ``remaining`` is ``total_hajari - total_expense - total_paid`` and may
    be negative when a worker has been overpaid.
    """

    total_hajari: Decimal = ZERO
    total_expense: Decimal = ZERO
    total_paid: Decimal = ZERO
    remaining: Decimal = ZERO

    @classmethod
    def from_sums(
        cls, total_hajari: Decimal, total_expense: Decimal, total_paid: Decimal
    ) -> LedgerTotals:
        return cls(
            total_hajari=total_hajari,
            total_expense=total_expense,
            total_paid=total_paid,
            remaining=total_hajari - total_expense - total_paid,
        )

    @property
    def is_overpaid(self) -> bool:
        return self.remaining < 0

    def __add__(self, other: LedgerTotals) -> LedgerTotals:
        return LedgerTotals.from_sums(
            self.total_hajari + other.total_hajari,
            self.total_expense + other.total_expense,
            self.total_paid + other.total_paid,
        )


@dataclass(frozen=True)
class WorkerSummary:
    """Ledger for one worker, live or surviving only in historical rows."""

    worker_id: UUID
    worker_name: str
    worker_category: str
    totals: LedgerTotals
    last_payment_date: str | None = None
    is_active: bool = True


@dataclass(frozen=True)
class SiteSummary:
    """Grand totals over every record of a site."""

    totals: LedgerTotals
    worker_count: int = 0
    hajari_count: int = 0
    expense_count: int = 0
    payment_count: int = 0


@dataclass(frozen=True)
class SubsetRequest:
    """Explicit selection for a subset total.

    A record is selected when its id is in ``selected_ids`` or when
    ``predicate`` returns True for it. An empty request selects nothing.
    """

    selected_ids: frozenset[Any] = field(default_factory=frozenset)
    predicate: Callable[[Any], bool] | None = None

    @classmethod
    def of(cls, ids: Any) -> SubsetRequest:
        return cls(selected_ids=frozenset(ids))

    def includes(self, record: Any, record_id: Any) -> bool:
        if record_id in self.selected_ids:
            return True
        return self.predicate is not None and bool(self.predicate(record))
