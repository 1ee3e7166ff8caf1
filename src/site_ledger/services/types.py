"""Input and filter types for the record store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable
from uuid import UUID

Clock = Callable[[], datetime]


def system_clock() -> datetime:
    """Local wall-clock time, the default clock for records and reports."""
    return datetime.now()


def record_date(moment: datetime) -> str:
    """Calendar date string stored on records (YYYY-MM-DD)."""
    return moment.date().isoformat()


def record_time(moment: datetime) -> str:
    """Clock string stored on records (HH:MM:SS)."""
    return moment.strftime("%H:%M:%S")


@dataclass(frozen=True)
class RecordFilter:
    """Scope for listing records. A site is always required."""

    site_id: UUID
    worker_id: UUID | None = None


@dataclass(frozen=True)
class HajariInput:
    """One attendance entry inside a batch submission.

    Amounts may be anything numeric-looking (``"500"``, ``500``,
    ``Decimal("500")``); the store validates and converts them. ``date``
    and ``time`` default to the store clock.
    """

    worker_id: UUID
    amount: Any
    overtime: Any = Decimal("0")
    date: str | None = None
    time: str | None = None


@dataclass(frozen=True)
class ExpenseInput:
    """One expense entry; ``worker_id`` is optional."""

    amount: Any
    description: str = ""
    worker_id: UUID | None = None
    date: str | None = None
    time: str | None = None
