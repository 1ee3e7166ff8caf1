"""Report tables: the rows every output format renders.

Builders are pure. CSV and HTML writers consume the same ``ReportTable``,
so both forms always carry identical cell text.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from site_ledger.calculators import (
    GENERAL_CATEGORY,
    LedgerTotals,
    summarize_workers,
    unassigned_expense_totals,
)
from site_ledger.reports.formatting import format_amount, format_quantity
from site_ledger.reports.labels import Labels


@dataclass(frozen=True)
class ReportTable:
    """Header, body and optional totals row of a report."""

    title: str
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    totals: tuple[str, ...] | None = None
    # Budget exports carry their totals row in the CSV body as well.
    totals_in_csv: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def csv_rows(self) -> list[tuple[str, ...]]:
        rows = [self.headers, *self.rows]
        if self.totals_in_csv and self.totals is not None:
            rows.append(self.totals)
        return rows


def workers_table(workers: Sequence[Any], labels: Labels) -> ReportTable:
    rows = tuple(
        (w.name, w.category, w.village or "", w.contact or "")
        for w in workers
    )
    return ReportTable(
        title=labels.workers_title,
        headers=(labels.name, labels.category, labels.village, labels.contact),
        rows=rows,
    )


def materials_table(materials: Sequence[Any], labels: Labels) -> ReportTable:
    rows = tuple(
        (m.name, format_quantity(m.quantity), m.unit or "", format_amount(m.cost), m.date)
        for m in materials
    )
    totals = None
    if rows:
        total_cost = sum((Decimal(m.cost) for m in materials), Decimal("0"))
        totals = (labels.total, "", "", format_amount(total_cost), "")
    return ReportTable(
        title=labels.materials_title,
        headers=(labels.name, labels.quantity, labels.unit, labels.cost, labels.date),
        rows=rows,
        totals=totals,
    )


def _budget_cells(first: str, totals: LedgerTotals) -> tuple[str, ...]:
    return (
        first,
        format_amount(totals.total_hajari),
        format_amount(totals.total_expense),
        format_amount(totals.total_paid),
        format_amount(totals.remaining),
    )


def budget_table(
    workers: Sequence[Any],
    hajari: Sequence[Any],
    expenses: Sequence[Any],
    payments: Sequence[Any],
    labels: Labels,
) -> ReportTable:
    """One row per worker plus a grand total row.

    Rows follow the worker summaries: live workers first, then deleted
    workers that still have history. Each row's Category cell is the
    worker's category. Expenses not charged to anyone get a final
    ``general`` row so the total still covers the whole site.
    """
    summaries = summarize_workers(workers, hajari, expenses, payments)
    ledgers = [summary.totals for summary in summaries]
    rows = [_budget_cells(s.worker_category, s.totals) for s in summaries]

    unassigned = unassigned_expense_totals(expenses)
    if unassigned is not None:
        ledgers.append(unassigned)
        rows.append(_budget_cells(GENERAL_CATEGORY, unassigned))

    totals = None
    if rows:
        totals = _budget_cells(labels.total, sum(ledgers, LedgerTotals()))

    return ReportTable(
        title=labels.budget_title,
        headers=(
            labels.category,
            labels.total_hajari,
            labels.total_expense,
            labels.total_paid,
            labels.remaining,
        ),
        rows=tuple(rows),
        totals=totals,
        totals_in_csv=True,
    )


def payments_table(payments: Sequence[Any], labels: Labels) -> ReportTable:
    rows = tuple(
        (
            p.worker_name,
            p.worker_category,
            format_amount(p.amount),
            p.method,
            p.date,
            p.time,
        )
        for p in payments
    )
    totals = None
    if rows:
        total_paid = sum((Decimal(p.amount) for p in payments), Decimal("0"))
        totals = (labels.total, "", format_amount(total_paid), "", "", "")
    return ReportTable(
        title=labels.payments_title,
        headers=(
            labels.worker_name,
            labels.category,
            labels.amount,
            labels.method,
            labels.date,
            labels.time,
        ),
        rows=rows,
        totals=totals,
    )
