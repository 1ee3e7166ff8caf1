"""Submission flows behind the attendance, expense, payment and material screens.

These wrap the record store with the rules the entry screens apply: which
draft rows are submitted, the running total shown before submitting, and
the notification sent once the store has committed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from operator import attrgetter
from typing import Any
from uuid import UUID

from site_ledger.calculators import SubsetRequest, subset_total
from site_ledger.errors import InvalidArgumentError
from site_ledger.models import Expense, HajariRecord, Material, PaymentRecord
from site_ledger.reports.formatting import format_amount
from site_ledger.services.delivery import LoggingNotifier, Notifier
from site_ledger.services.record_store import RecordStore
from site_ledger.services.types import ExpenseInput, HajariInput

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HajariDraft:
    """One row of the bulk attendance screen, exactly as typed.

    Blank or unparseable amounts count as zero in the preview total.
    """

    worker_id: UUID
    amount: Any = ""
    overtime: Any = ""


@dataclass(frozen=True)
class _PreviewEntry:
    worker_id: UUID
    amount: Decimal
    overtime: Decimal


def draft_value(value: Any) -> Decimal:
    """Lenient numeric reading used while the user is still typing."""
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal("0")
    return number if number.is_finite() else Decimal("0")


def is_blank_or_zero(value: Any) -> bool:
    """True for an untouched row: nothing typed, or an exact zero.

    Anything else, negative or unreadable input included, is a real
    submission and goes through validation.
    """
    if value is None or not str(value).strip():
        return True
    try:
        return Decimal(str(value).strip()) == 0
    except (InvalidOperation, ValueError):
        return False


class SubmissionService:
    """Validated batch submission with post-commit notifications."""

    def __init__(self, store: RecordStore, notifier: Notifier | None = None):
        self.store = store
        self.notifier = notifier or LoggingNotifier()

    def preview_total(self, drafts: Sequence[HajariDraft], selection: SubsetRequest) -> Decimal:
        """Running total of the selected drafts: amount plus overtime."""
        entries = [
            _PreviewEntry(d.worker_id, draft_value(d.amount), draft_value(d.overtime))
            for d in drafts
        ]
        return subset_total(entries, selection, id_of=attrgetter("worker_id"))

    async def submit_hajari(
        self,
        site_id: UUID,
        drafts: Sequence[HajariDraft],
        selection: SubsetRequest,
        *,
        date: str | None = None,
        time: str | None = None,
    ) -> list[HajariRecord]:
        """Store the selected drafts that carry an amount.

        Selected rows left blank or at zero are skipped. Every other
        selected row is validated, so a negative or unreadable amount
        fails the whole batch with InvalidArgumentError. The batch is
        atomic; the notification is only sent after it committed.
        """
        chosen = [
            d
            for d in drafts
            if selection.includes(d, d.worker_id) and not is_blank_or_zero(d.amount)
        ]
        if not chosen:
            raise InvalidArgumentError("amount", "select at least one worker with an amount")

        entries = [
            HajariInput(
                worker_id=d.worker_id,
                amount=d.amount,
                overtime=d.overtime if str(d.overtime or "").strip() else Decimal("0"),
                date=date,
                time=time,
            )
            for d in chosen
        ]
        records = await self.store.add_hajari_records(site_id, entries)

        total = sum((r.total for r in records), Decimal("0"))
        self._notify("Hajari saved", f"{len(records)} daily hajari - ₹{format_amount(total)}")
        return records

    async def submit_expenses(
        self, site_id: UUID, entries: Sequence[ExpenseInput]
    ) -> list[Expense]:
        if not entries:
            raise InvalidArgumentError("entries", "at least one expense is required")
        expenses = await self.store.add_expenses(site_id, entries)
        total = sum((e.amount for e in expenses), Decimal("0"))
        self._notify("Expense added", f"{len(expenses)} expenses - ₹{format_amount(total)}")
        return expenses

    async def record_payment(
        self,
        site_id: UUID,
        *,
        worker_id: UUID,
        amount: Any,
        method: str | None = None,
        date: str | None = None,
        time: str | None = None,
    ) -> PaymentRecord:
        payment = await self.store.add_payment(
            site_id,
            worker_id=worker_id,
            amount=amount,
            method=method,
            date=date,
            time=time,
        )
        self._notify(
            "Payment recorded",
            f"₹{format_amount(payment.amount)} → {payment.worker_name}",
        )
        return payment

    async def record_material(self, site_id: UUID, **purchase: Any) -> Material:
        """Store a material purchase; keyword arguments as ``RecordStore.add_material``."""
        material = await self.store.add_material(site_id, **purchase)
        self._notify("Material added", f"{material.name} - ₹{format_amount(material.cost)}")
        return material

    def _notify(self, title: str, body: str) -> None:
        # Records are already committed; a failing notifier must not undo them.
        try:
            self.notifier.notify(title, body)
        except Exception:
            logger.exception("Notifier failed for %r", title)
