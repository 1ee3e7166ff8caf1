"""Pure ledger aggregation over site records.

Nothing here touches storage or keeps state between calls; every total is
recomputed from the records passed in. The functions only rely on
attributes (``site_id``, ``worker_id``, ``amount``, ``overtime``, ...), so
ORM rows and plain test doubles work alike.

Formula (non-negotiable):
    remaining = sum(amount + overtime) - sum(expenses) - sum(payments)
No clamping and no rounding beyond Decimal arithmetic.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from decimal import Decimal
from operator import attrgetter
from typing import Any
from uuid import UUID

from site_ledger.calculators.types import (
    ZERO,
    LedgerTotals,
    SiteSummary,
    SubsetRequest,
    WorkerSummary,
)


def entry_total(record: Any) -> Decimal:
    """Base pay plus overtime for one hajari entry."""
    return Decimal(record.amount) + Decimal(getattr(record, "overtime", None) or ZERO)


def hajari_total(records: Iterable[Any]) -> Decimal:
    return sum((entry_total(r) for r in records), ZERO)


def amount_total(records: Iterable[Any]) -> Decimal:
    return sum((Decimal(r.amount) for r in records), ZERO)


def _for_worker(records: Iterable[Any], site_id: UUID, worker_id: UUID) -> list[Any]:
    return [r for r in records if r.site_id == site_id and r.worker_id == worker_id]


def compute_worker_totals(
    site_id: UUID,
    worker_id: UUID,
    hajari: Iterable[Any],
    expenses: Iterable[Any],
    payments: Iterable[Any],
) -> LedgerTotals:
    """Totals for exactly one (site, worker) pair.

    Records belonging to other sites or workers are ignored, so callers may
    pass unfiltered site lists.
    """
    return LedgerTotals.from_sums(
        hajari_total(_for_worker(hajari, site_id, worker_id)),
        amount_total(_for_worker(expenses, site_id, worker_id)),
        amount_total(_for_worker(payments, site_id, worker_id)),
    )


def last_payment_date(payments: Iterable[Any]) -> str | None:
    latest = max(payments, key=lambda p: (p.date, p.time), default=None)
    return latest.date if latest is not None else None


def summarize_workers(
    workers: Sequence[Any],
    hajari: Sequence[Any],
    expenses: Sequence[Any],
    payments: Sequence[Any],
) -> list[WorkerSummary]:
    """Per-worker ledgers for a site.

    Live workers come first, in the order given. Workers that were deleted
    but still have hajari, expense or payment rows follow, named from the
    snapshot on their most recent row.
    """
    summaries: list[WorkerSummary] = []
    seen: set[UUID] = set()

    for worker in workers:
        seen.add(worker.worker_id)
        worker_payments = _for_worker(payments, worker.site_id, worker.worker_id)
        summaries.append(
            WorkerSummary(
                worker_id=worker.worker_id,
                worker_name=worker.name,
                worker_category=worker.category,
                totals=compute_worker_totals(
                    worker.site_id, worker.worker_id, hajari, expenses, payments
                ),
                last_payment_date=last_payment_date(worker_payments),
                is_active=True,
            )
        )

    snapshots: dict[UUID, Any] = {}
    for record in [*hajari, *expenses, *payments]:
        if record.worker_id is None or record.worker_id in seen:
            continue
        current = snapshots.get(record.worker_id)
        if current is None or (record.date, record.time) > (current.date, current.time):
            snapshots[record.worker_id] = record

    for worker_id, snapshot in snapshots.items():
        worker_payments = _for_worker(payments, snapshot.site_id, worker_id)
        summaries.append(
            WorkerSummary(
                worker_id=worker_id,
                worker_name=snapshot.worker_name or "",
                worker_category=snapshot.worker_category or "",
                totals=compute_worker_totals(
                    snapshot.site_id, worker_id, hajari, expenses, payments
                ),
                last_payment_date=last_payment_date(worker_payments),
                is_active=False,
            )
        )

    return summaries


def compute_site_summary(
    hajari: Sequence[Any],
    expenses: Sequence[Any],
    payments: Sequence[Any],
    *,
    worker_count: int = 0,
) -> SiteSummary:
    """Grand totals across all records of one site."""
    return SiteSummary(
        totals=LedgerTotals.from_sums(
            hajari_total(hajari),
            amount_total(expenses),
            amount_total(payments),
        ),
        worker_count=worker_count,
        hajari_count=len(hajari),
        expense_count=len(expenses),
        payment_count=len(payments),
    )


def unassigned_expense_totals(expenses: Iterable[Any]) -> LedgerTotals | None:
    """Totals of the expenses not charged to any worker, or None if there are none."""
    unassigned = [e for e in expenses if e.worker_id is None]
    if not unassigned:
        return None
    return LedgerTotals.from_sums(ZERO, amount_total(unassigned), ZERO)


def subset_total(
    records: Iterable[Any],
    request: SubsetRequest,
    *,
    id_of: Callable[[Any], Any] = attrgetter("hajari_record_id"),
) -> Decimal:
    """Sum of ``amount + overtime`` over the records the request selects.

    Same formula as the per-worker hajari total, applied to an arbitrary
    subset (bulk-entry drafts, filtered history, ...).
    """
    return hajari_total(r for r in records if request.includes(r, id_of(r)))
