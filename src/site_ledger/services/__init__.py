"""Site ledger services."""

from site_ledger.services.record_store import RecordStore
from site_ledger.services.types import ExpenseInput, HajariInput, RecordFilter
from site_ledger.services.ledger_service import LedgerService
from site_ledger.services.delivery import (
    DirectoryExportSink,
    ExportSink,
    LoggingNotifier,
    Notifier,
)
from site_ledger.services.submission_service import HajariDraft, SubmissionService

__all__ = [
    "RecordStore",
    "ExpenseInput",
    "HajariInput",
    "RecordFilter",
    "LedgerService",
    "DirectoryExportSink",
    "ExportSink",
    "LoggingNotifier",
    "Notifier",
    "HajariDraft",
    "SubmissionService",
]
