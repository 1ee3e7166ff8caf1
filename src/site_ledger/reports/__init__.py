"""Report generation (CSV and HTML)."""

from site_ledger.reports.formatting import format_amount, report_filename
from site_ledger.reports.generator import (
    ReportDocument,
    ReportFormat,
    ReportGenerator,
    ReportKind,
)
from site_ledger.reports.labels import Labels

__all__ = [
    "format_amount",
    "report_filename",
    "ReportDocument",
    "ReportFormat",
    "ReportGenerator",
    "ReportKind",
    "Labels",
]
