"""Site and worker models."""

from __future__ import annotations

from uuid import UUID, uuid4

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from site_ledger.models.base import Base, TimestampMixin


class Site(Base, TimestampMixin):
    """Construction site; every other record is scoped to one."""

    __tablename__ = "site"

    site_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    location: Mapped[str] = mapped_column(String, nullable=False, default="")
    site_type: Mapped[str] = mapped_column(String, nullable=False, default="")
    start_date: Mapped[str] = mapped_column(String, nullable=False, default="")
    end_date: Mapped[str] = mapped_column(String, nullable=False, default="")
    owner_name: Mapped[str] = mapped_column(String, nullable=False, default="")
    contact: Mapped[str] = mapped_column(String, nullable=False, default="")
    site_code: Mapped[str | None] = mapped_column(String(12), nullable=True, unique=True)
    is_running: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class Worker(Base, TimestampMixin):
    """Worker registered on a site.

    ``site_id`` is fixed at creation; the store exposes no way to move a
    worker between sites.
    """

    __tablename__ = "worker"

    worker_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    site_id: Mapped[UUID] = mapped_column(
        ForeignKey("site.site_id", ondelete="CASCADE"),
        nullable=False,
    )
    name: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    contact: Mapped[str] = mapped_column(String, nullable=False, default="")
    village: Mapped[str] = mapped_column(String, nullable=False, default="")
    photo_uri: Mapped[str | None] = mapped_column(String, nullable=True)
    joining_date: Mapped[str] = mapped_column(String, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "category IN ('karigar', 'mazdoor')",
            name="worker_category_check",
        ),
        CheckConstraint("age IS NULL OR age >= 0", name="worker_age_check"),
        Index("ix_worker_site_id", "site_id"),
    )
