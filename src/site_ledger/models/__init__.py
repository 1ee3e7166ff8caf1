"""ORM models for the site ledger."""

from site_ledger.models.base import Base, TimestampMixin
from site_ledger.models.enums import PaymentMethod, WorkerCategory
from site_ledger.models.records import (
    Expense,
    HajariRecord,
    Material,
    MaterialUsage,
    PaymentRecord,
)
from site_ledger.models.site import Site, Worker

__all__ = [
    "Base",
    "TimestampMixin",
    "PaymentMethod",
    "WorkerCategory",
    "Site",
    "Worker",
    "HajariRecord",
    "Expense",
    "PaymentRecord",
    "Material",
    "MaterialUsage",
]
