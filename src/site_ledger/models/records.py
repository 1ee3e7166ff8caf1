"""Append-only site records: hajari, expenses, payments, materials and their usage.

Worker-scoped records hold ``worker_id`` as a plain column rather than a
foreign key, together with a snapshot of the worker's name and category
taken when the row was written. Removing a worker therefore leaves the
financial history (and every report built from it) untouched.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from site_ledger.models.base import Base, TimestampMixin

MONEY = Numeric(14, 2)
QUANTITY = Numeric(14, 3)


class HajariRecord(Base, TimestampMixin):
    """Daily attendance/pay entry for one worker."""

    __tablename__ = "hajari_record"

    hajari_record_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    site_id: Mapped[UUID] = mapped_column(
        ForeignKey("site.site_id", ondelete="CASCADE"),
        nullable=False,
    )
    worker_id: Mapped[UUID] = mapped_column(nullable=False)
    worker_name: Mapped[str] = mapped_column(String, nullable=False)
    worker_category: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    overtime: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    date: Mapped[str] = mapped_column(String, nullable=False)
    time: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        CheckConstraint("amount >= 0", name="hajari_amount_check"),
        CheckConstraint("overtime >= 0", name="hajari_overtime_check"),
        Index("ix_hajari_site_worker", "site_id", "worker_id"),
    )

    @property
    def total(self) -> Decimal:
        """Base pay plus overtime."""
        return self.amount + (self.overtime or Decimal("0"))


class Expense(Base, TimestampMixin):
    """Site expense, optionally charged against a worker."""

    __tablename__ = "expense"

    expense_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    site_id: Mapped[UUID] = mapped_column(
        ForeignKey("site.site_id", ondelete="CASCADE"),
        nullable=False,
    )
    worker_id: Mapped[UUID | None] = mapped_column(nullable=True)
    worker_name: Mapped[str | None] = mapped_column(String, nullable=True)
    worker_category: Mapped[str | None] = mapped_column(String, nullable=True)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    description: Mapped[str] = mapped_column(String, nullable=False, default="")
    date: Mapped[str] = mapped_column(String, nullable=False)
    time: Mapped[str] = mapped_column(String, nullable=False, default="")

    __table_args__ = (
        CheckConstraint("amount >= 0", name="expense_amount_check"),
        Index("ix_expense_site_worker", "site_id", "worker_id"),
    )


class PaymentRecord(Base, TimestampMixin):
    """Money handed to a worker against their balance."""

    __tablename__ = "payment_record"

    payment_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    site_id: Mapped[UUID] = mapped_column(
        ForeignKey("site.site_id", ondelete="CASCADE"),
        nullable=False,
    )
    worker_id: Mapped[UUID] = mapped_column(nullable=False)
    worker_name: Mapped[str] = mapped_column(String, nullable=False)
    worker_category: Mapped[str] = mapped_column(String, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    date: Mapped[str] = mapped_column(String, nullable=False)
    time: Mapped[str] = mapped_column(String, nullable=False)
    method: Mapped[str] = mapped_column(String, nullable=False, default="cash")

    __table_args__ = (
        CheckConstraint("amount > 0", name="payment_amount_check"),
        CheckConstraint(
            "method IN ('cash', 'upi', 'bank')",
            name="payment_method_check",
        ),
        Index("ix_payment_site_worker", "site_id", "worker_id"),
    )


class Material(Base, TimestampMixin):
    """Material purchased for a site."""

    __tablename__ = "material"

    material_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    site_id: Mapped[UUID] = mapped_column(
        ForeignKey("site.site_id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    quantity: Mapped[Decimal] = mapped_column(QUANTITY, nullable=False)
    unit: Mapped[str] = mapped_column(String, nullable=False, default="")
    cost: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    date: Mapped[str] = mapped_column(String, nullable=False)
    vendor_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    vendor_phone: Mapped[str] = mapped_column(String, nullable=False, default="")
    rate_per_unit: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    amount_paid: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    # cost - amount_paid at purchase time; negative when the vendor was overpaid.
    remaining_payment: Mapped[Decimal] = mapped_column(
        MONEY, nullable=False, default=Decimal("0")
    )

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="material_quantity_check"),
        CheckConstraint("cost >= 0", name="material_cost_check"),
        CheckConstraint("rate_per_unit >= 0", name="material_rate_check"),
        CheckConstraint("amount_paid >= 0", name="material_paid_check"),
        Index("ix_material_site_id", "site_id"),
    )


class MaterialUsage(Base, TimestampMixin):
    """Quantity of a material consumed on site."""

    __tablename__ = "material_usage"

    usage_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    material_id: Mapped[UUID] = mapped_column(
        ForeignKey("material.material_id", ondelete="CASCADE"),
        nullable=False,
    )
    site_id: Mapped[UUID] = mapped_column(
        ForeignKey("site.site_id", ondelete="CASCADE"),
        nullable=False,
    )
    quantity_used: Mapped[Decimal] = mapped_column(QUANTITY, nullable=False)
    note: Mapped[str] = mapped_column(String, nullable=False, default="")
    date: Mapped[str] = mapped_column(String, nullable=False)
    time: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        CheckConstraint("quantity_used > 0", name="material_usage_quantity_check"),
        Index("ix_material_usage_material_id", "material_id"),
    )
