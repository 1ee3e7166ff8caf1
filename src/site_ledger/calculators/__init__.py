"""Pure ledger calculations."""

from site_ledger.calculators.ledger import (
    compute_site_summary,
    compute_worker_totals,
    hajari_total,
    subset_total,
    summarize_workers,
    unassigned_expense_totals,
)
from site_ledger.calculators.stock import (
    MaterialStock,
    remaining_stock,
    summarize_stock,
)
from site_ledger.calculators.types import (
    GENERAL_CATEGORY,
    LedgerTotals,
    SiteSummary,
    SubsetRequest,
    WorkerSummary,
)

__all__ = [
    "compute_site_summary",
    "compute_worker_totals",
    "hajari_total",
    "subset_total",
    "summarize_workers",
    "unassigned_expense_totals",
    "MaterialStock",
    "remaining_stock",
    "summarize_stock",
    "GENERAL_CATEGORY",
    "LedgerTotals",
    "SiteSummary",
    "SubsetRequest",
    "WorkerSummary",
]
