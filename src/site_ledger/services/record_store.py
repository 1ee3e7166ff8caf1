"""Record store: durable, site-scoped storage for every ledger entity.

Every mutating call is a single unit of work: it commits when it returns
and rolls back completely when it raises. Batch inserts therefore either
land in full or leave no rows behind.

Reads are plain snapshots with no cross-call transaction; callers that
issue several reads (the ledger, the reports) accept that a write landing
in between is only seen on the next call.
"""

from __future__ import annotations

import logging
import secrets
import string
from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import delete as sa_delete
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from site_ledger.errors import (
    InvalidArgumentError,
    NotFoundError,
    SiteLedgerError,
    StorageFailureError,
)
from site_ledger.models import (
    Base,
    Expense,
    HajariRecord,
    Material,
    MaterialUsage,
    PaymentRecord,
    Site,
    Worker,
)
from site_ledger.services.types import (
    Clock,
    ExpenseInput,
    HajariInput,
    RecordFilter,
    record_date,
    record_time,
    system_clock,
)
from site_ledger.services.validation import (
    require_text,
    to_age,
    to_amount,
    to_category,
    to_method,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Base)

SITE_CODE_ALPHABET = string.ascii_uppercase + string.digits
SITE_CODE_LENGTH = 6
SITE_CODE_ATTEMPTS = 20

MONEY_PLACES = Decimal("0.01")

# Child tables removed together with their site, leaves first.
SITE_CHILDREN: tuple[type[Base], ...] = (
    HajariRecord,
    Expense,
    PaymentRecord,
    MaterialUsage,
    Material,
    Worker,
)

WORKER_FIELDS = frozenset({"name", "category", "age", "contact", "village", "photo_uri"})


def _ordering(model: type[Base]) -> tuple[Any, ...]:
    if model is Site:
        return (Site.created_at.desc(),)
    if model is Worker:
        return (Worker.name, Worker.created_at)
    if model is Material:
        return (Material.date.desc(), Material.created_at.desc())
    return (model.date.desc(), model.time.desc(), model.created_at.desc())


class RecordStore:
    """Async CRUD over sites, workers and their records.

    Constraints:
    - Every record must reference a live site.
    - Worker-scoped records must reference a live worker of the same site
      when they are written; the worker's name and category are copied
      onto the row.
    - Deleting a worker removes only the worker row.
    - Deleting a material removes its usage entries.
    - Deleting a site removes the site and all of its rows.
    """

    def __init__(self, session: AsyncSession, clock: Clock = system_clock):
        self.session = session
        self.clock = clock

    # ------------------------------------------------------------------
    # Generic contract
    # ------------------------------------------------------------------

    async def get(self, model: type[M], record_id: UUID) -> M:
        """Fetch one entity by primary key."""
        try:
            entity = await self.session.get(model, record_id)
        except SQLAlchemyError as exc:
            logger.exception("Storage failure reading %s %s", model.__tablename__, record_id)
            raise StorageFailureError(f"get {model.__tablename__}") from exc
        if entity is None:
            raise NotFoundError(model.__tablename__, record_id)
        return entity

    async def list_records(self, model: type[M], record_filter: RecordFilter) -> list[M]:
        """List entities scoped to a site and, optionally, a worker.

        An unknown site simply yields no rows.
        """
        query = select(model).where(model.site_id == record_filter.site_id)
        if record_filter.worker_id is not None:
            if model is Worker:
                query = query.where(Worker.worker_id == record_filter.worker_id)
            elif hasattr(model, "worker_id"):
                query = query.where(model.worker_id == record_filter.worker_id)
        query = query.order_by(*_ordering(model))
        result = await self._read(f"list {model.__tablename__}", query)
        return list(result.scalars().all())

    async def delete(self, model: type[M], record_id: UUID) -> None:
        """Delete one entity. Sites and materials cascade; nothing else does."""
        if model is Site:
            await self.delete_site(record_id)
            return
        if model is Material:
            await self.delete_material(record_id)
            return
        async with self._unit_of_work(f"delete {model.__tablename__}"):
            entity = await self.get(model, record_id)
            await self.session.delete(entity)
        logger.info("Deleted %s %s", model.__tablename__, record_id)

    # ------------------------------------------------------------------
    # Sites
    # ------------------------------------------------------------------

    async def create_site(
        self,
        *,
        name: str,
        location: str = "",
        site_code: str | None = None,
        is_running: bool = True,
        site_type: str = "",
        start_date: str = "",
        end_date: str = "",
        owner_name: str = "",
        contact: str = "",
    ) -> Site:
        """Create a site. ``site_code`` must be unique when given.

        Type, dates, owner and contact are free text kept for display.
        """
        name = require_text(name, "name")
        async with self._unit_of_work("create site"):
            if site_code is not None:
                site_code = require_text(site_code, "site_code").upper()
                if await self.get_site_by_code(site_code) is not None:
                    raise InvalidArgumentError("site_code", f"{site_code} is already in use")
            site = Site(
                name=name,
                location=(location or "").strip(),
                site_code=site_code,
                is_running=bool(is_running),
                site_type=(site_type or "").strip(),
                start_date=(start_date or "").strip(),
                end_date=(end_date or "").strip(),
                owner_name=(owner_name or "").strip(),
                contact=(contact or "").strip(),
                created_at=self.clock(),
            )
            self.session.add(site)
            await self.session.flush()
        logger.info("Created site %s (%s)", site.site_id, site.name)
        return site

    async def get_site(self, site_id: UUID) -> Site:
        return await self.get(Site, site_id)

    async def list_sites(self) -> list[Site]:
        """All sites, newest first. Sites are the scope, so this is unscoped."""
        result = await self._read("list site", select(Site).order_by(*_ordering(Site)))
        return list(result.scalars().all())

    async def get_site_by_code(self, site_code: str) -> Site | None:
        result = await self._read(
            "find site by code",
            select(Site).where(Site.site_code == site_code.strip().upper()),
        )
        return result.scalar_one_or_none()

    async def generate_site_code(self) -> str:
        """Pick an unused 6-character alphanumeric site code."""
        code = ""
        for _ in range(SITE_CODE_ATTEMPTS):
            code = "".join(secrets.choice(SITE_CODE_ALPHABET) for _ in range(SITE_CODE_LENGTH))
            if await self.get_site_by_code(code) is None:
                return code
        # Crowded code space: lengthen instead of looping forever.
        return code + "".join(secrets.choice(SITE_CODE_ALPHABET) for _ in range(2))

    async def set_site_running(self, site_id: UUID, is_running: bool) -> Site:
        """Mark a site as running or completed."""
        async with self._unit_of_work("update site status"):
            site = await self.get(Site, site_id)
            site.is_running = bool(is_running)
        return site

    async def delete_site(self, site_id: UUID) -> None:
        """Delete a site and every row scoped to it."""
        async with self._unit_of_work("delete site"):
            await self.get(Site, site_id)
            for child in SITE_CHILDREN:
                await self.session.execute(sa_delete(child).where(child.site_id == site_id))
            await self.session.execute(sa_delete(Site).where(Site.site_id == site_id))
        logger.info("Deleted site %s with all of its records", site_id)

    # ------------------------------------------------------------------
    # Workers
    # ------------------------------------------------------------------

    async def add_worker(
        self,
        site_id: UUID,
        *,
        name: str,
        category: str,
        age: Any = None,
        contact: str = "",
        village: str = "",
        photo_uri: str | None = None,
        joining_date: str | None = None,
    ) -> Worker:
        """Register a worker on a site."""
        name = require_text(name, "name")
        worker_category = to_category(category)
        worker_age = to_age(age)
        async with self._unit_of_work("add worker"):
            await self.get(Site, site_id)
            now = self.clock()
            worker = Worker(
                site_id=site_id,
                name=name,
                category=worker_category.value,
                age=worker_age,
                contact=(contact or "").strip(),
                village=(village or "").strip(),
                photo_uri=photo_uri,
                joining_date=joining_date or record_date(now),
                created_at=now,
            )
            self.session.add(worker)
            await self.session.flush()
        logger.info("Added worker %s to site %s", worker.worker_id, site_id)
        return worker

    async def get_worker(self, worker_id: UUID) -> Worker:
        return await self.get(Worker, worker_id)

    async def list_workers(self, site_id: UUID) -> list[Worker]:
        return await self.list_records(Worker, RecordFilter(site_id=site_id))

    async def update_worker(self, worker_id: UUID, **changes: Any) -> Worker:
        """Update a worker's profile.

        Historical records keep the name and category they were written
        with. ``site_id`` cannot be changed.
        """
        unknown = set(changes) - WORKER_FIELDS
        if unknown:
            field = sorted(unknown)[0]
            raise InvalidArgumentError(field, "cannot be changed")

        if "name" in changes:
            changes["name"] = require_text(changes["name"], "name")
        if "category" in changes:
            changes["category"] = to_category(changes["category"]).value
        if "age" in changes:
            changes["age"] = to_age(changes["age"])
        for field in ("contact", "village"):
            if field in changes:
                changes[field] = (changes[field] or "").strip()

        async with self._unit_of_work("update worker"):
            worker = await self.get(Worker, worker_id)
            for field, value in changes.items():
                setattr(worker, field, value)
        return worker

    async def delete_worker(self, worker_id: UUID) -> None:
        """Remove the worker row only; their hajari, expenses and payments stay."""
        await self.delete(Worker, worker_id)

    # ------------------------------------------------------------------
    # Hajari
    # ------------------------------------------------------------------

    async def add_hajari_records(
        self, site_id: UUID, entries: Sequence[HajariInput]
    ) -> list[HajariRecord]:
        """Store one attendance submission.

        All entries are validated before anything is written, and the rows
        are written in one transaction: either every record is stored or
        none is.
        """
        if not entries:
            return []

        prepared = [
            (
                entry,
                to_amount(entry.amount, "amount"),
                to_amount(
                    entry.overtime if entry.overtime is not None else 0, "overtime"
                ),
            )
            for entry in entries
        ]

        async with self._unit_of_work("add hajari records"):
            await self.get(Site, site_id)
            workers = await self._site_workers(site_id, [e.worker_id for e in entries])
            now = self.clock()
            records = []
            for entry, amount, overtime in prepared:
                worker = workers[entry.worker_id]
                records.append(
                    HajariRecord(
                        site_id=site_id,
                        worker_id=worker.worker_id,
                        worker_name=worker.name,
                        worker_category=worker.category,
                        amount=amount,
                        overtime=overtime,
                        date=entry.date or record_date(now),
                        time=entry.time or record_time(now),
                        created_at=now,
                    )
                )
            self.session.add_all(records)
            await self.session.flush()

        logger.info("Stored %d hajari records for site %s", len(records), site_id)
        return records

    async def add_hajari_record(self, site_id: UUID, entry: HajariInput) -> HajariRecord:
        (record,) = await self.add_hajari_records(site_id, [entry])
        return record

    async def list_hajari(
        self, site_id: UUID, worker_id: UUID | None = None
    ) -> list[HajariRecord]:
        return await self.list_records(HajariRecord, RecordFilter(site_id, worker_id))

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------

    async def add_expenses(
        self, site_id: UUID, entries: Sequence[ExpenseInput]
    ) -> list[Expense]:
        """Store a batch of expenses atomically."""
        if not entries:
            return []

        prepared = [(entry, to_amount(entry.amount, "amount")) for entry in entries]

        async with self._unit_of_work("add expenses"):
            await self.get(Site, site_id)
            workers = await self._site_workers(
                site_id, [e.worker_id for e in entries if e.worker_id is not None]
            )
            now = self.clock()
            expenses = []
            for entry, amount in prepared:
                worker = workers.get(entry.worker_id) if entry.worker_id else None
                expenses.append(
                    Expense(
                        site_id=site_id,
                        worker_id=worker.worker_id if worker else None,
                        worker_name=worker.name if worker else None,
                        worker_category=worker.category if worker else None,
                        amount=amount,
                        description=(entry.description or "").strip(),
                        date=entry.date or record_date(now),
                        time=entry.time or record_time(now),
                        created_at=now,
                    )
                )
            self.session.add_all(expenses)
            await self.session.flush()

        logger.info("Stored %d expenses for site %s", len(expenses), site_id)
        return expenses

    async def add_expense(
        self,
        site_id: UUID,
        *,
        amount: Any,
        description: str = "",
        worker_id: UUID | None = None,
        date: str | None = None,
        time: str | None = None,
    ) -> Expense:
        (expense,) = await self.add_expenses(
            site_id,
            [
                ExpenseInput(
                    amount=amount,
                    description=description,
                    worker_id=worker_id,
                    date=date,
                    time=time,
                )
            ],
        )
        return expense

    async def list_expenses(
        self, site_id: UUID, worker_id: UUID | None = None
    ) -> list[Expense]:
        return await self.list_records(Expense, RecordFilter(site_id, worker_id))

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    async def add_payment(
        self,
        site_id: UUID,
        *,
        worker_id: UUID,
        amount: Any,
        method: str | None = None,
        date: str | None = None,
        time: str | None = None,
    ) -> PaymentRecord:
        """Record a payment to a worker. The amount must be positive."""
        paid = to_amount(amount, "amount", positive=True)
        payment_method = to_method(method)

        async with self._unit_of_work("add payment"):
            await self.get(Site, site_id)
            worker = (await self._site_workers(site_id, [worker_id]))[worker_id]
            now = self.clock()
            payment = PaymentRecord(
                site_id=site_id,
                worker_id=worker.worker_id,
                worker_name=worker.name,
                worker_category=worker.category,
                amount=paid,
                method=payment_method.value,
                date=date or record_date(now),
                time=time or record_time(now),
                created_at=now,
            )
            self.session.add(payment)
            await self.session.flush()

        logger.info("Recorded payment %s of %s to worker %s", payment.payment_id, paid, worker_id)
        return payment

    async def list_payments(
        self, site_id: UUID, worker_id: UUID | None = None
    ) -> list[PaymentRecord]:
        return await self.list_records(PaymentRecord, RecordFilter(site_id, worker_id))

    # ------------------------------------------------------------------
    # Materials
    # ------------------------------------------------------------------

    async def add_material(
        self,
        site_id: UUID,
        *,
        name: str,
        quantity: Any,
        cost: Any = None,
        rate_per_unit: Any = None,
        amount_paid: Any = 0,
        unit: str = "",
        date: str | None = None,
        vendor_name: str = "",
        vendor_phone: str = "",
    ) -> Material:
        """Record a material purchase.

        ``cost`` defaults to ``quantity * rate_per_unit``; one of the two
        must be given. ``remaining_payment`` is ``cost - amount_paid``.
        """
        name = require_text(name, "name")
        material_quantity = to_amount(quantity, "quantity")
        rate = to_amount(rate_per_unit, "rate_per_unit") if rate_per_unit is not None else None
        if cost is None:
            if rate is None:
                raise InvalidArgumentError("cost", "cost or rate_per_unit is required")
            material_cost = (material_quantity * rate).quantize(MONEY_PLACES, ROUND_HALF_UP)
        else:
            material_cost = to_amount(cost, "cost")
        paid = to_amount(amount_paid if amount_paid is not None else 0, "amount_paid")

        async with self._unit_of_work("add material"):
            await self.get(Site, site_id)
            now = self.clock()
            material = Material(
                site_id=site_id,
                name=name,
                quantity=material_quantity,
                unit=(unit or "").strip(),
                cost=material_cost,
                rate_per_unit=rate if rate is not None else Decimal("0"),
                amount_paid=paid,
                remaining_payment=material_cost - paid,
                date=date or record_date(now),
                vendor_name=(vendor_name or "").strip(),
                vendor_phone=(vendor_phone or "").strip(),
                created_at=now,
            )
            self.session.add(material)
            await self.session.flush()

        logger.info("Added material %s to site %s", material.material_id, site_id)
        return material

    async def list_materials(self, site_id: UUID) -> list[Material]:
        return await self.list_records(Material, RecordFilter(site_id))

    async def delete_material(self, material_id: UUID) -> None:
        """Delete a material together with its usage entries."""
        async with self._unit_of_work("delete material"):
            await self.get(Material, material_id)
            await self.session.execute(
                sa_delete(MaterialUsage).where(MaterialUsage.material_id == material_id)
            )
            await self.session.execute(
                sa_delete(Material).where(Material.material_id == material_id)
            )
        logger.info("Deleted material %s", material_id)

    async def add_material_usage(
        self,
        material_id: UUID,
        *,
        quantity_used: Any,
        note: str = "",
        date: str | None = None,
        time: str | None = None,
    ) -> MaterialUsage:
        """Record material consumed on site.

        Usage beyond the purchased quantity is stored as given; remaining
        stock bottoms out at zero.
        """
        used = to_amount(quantity_used, "quantity_used", positive=True)

        async with self._unit_of_work("add material usage"):
            material = await self.get(Material, material_id)
            now = self.clock()
            usage = MaterialUsage(
                material_id=material.material_id,
                site_id=material.site_id,
                quantity_used=used,
                note=(note or "").strip(),
                date=date or record_date(now),
                time=time or record_time(now),
                created_at=now,
            )
            self.session.add(usage)
            await self.session.flush()

        logger.info("Recorded usage of %s for material %s", used, material_id)
        return usage

    async def list_material_usages(
        self, site_id: UUID, material_id: UUID | None = None
    ) -> list[MaterialUsage]:
        query = select(MaterialUsage).where(MaterialUsage.site_id == site_id)
        if material_id is not None:
            query = query.where(MaterialUsage.material_id == material_id)
        query = query.order_by(*_ordering(MaterialUsage))
        result = await self._read("list material_usage", query)
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _site_workers(
        self, site_id: UUID, worker_ids: Sequence[UUID]
    ) -> dict[UUID, Worker]:
        """Load live workers of a site; any missing id is NotFound."""
        wanted = set(worker_ids)
        if not wanted:
            return {}
        result = await self.session.execute(
            select(Worker).where(
                Worker.site_id == site_id,
                Worker.worker_id.in_(wanted),
            )
        )
        workers = {w.worker_id: w for w in result.scalars().all()}
        for worker_id in worker_ids:
            if worker_id not in workers:
                raise NotFoundError("worker", worker_id)
        return workers

    async def _read(self, action: str, query: Any) -> Any:
        try:
            return await self.session.execute(query)
        except SQLAlchemyError as exc:
            logger.exception("Storage failure during %s", action)
            raise StorageFailureError(action) from exc

    @asynccontextmanager
    async def _unit_of_work(self, action: str) -> AsyncGenerator[None, None]:
        """Commit on success; roll everything back on any failure."""
        try:
            yield
            await self.session.commit()
        except SiteLedgerError:
            await self.session.rollback()
            raise
        except SQLAlchemyError as exc:
            await self.session.rollback()
            logger.exception("Storage failure during %s", action)
            raise StorageFailureError(action, type(exc).__name__) from exc
        except BaseException:
            # Cancellation or any other error: never leave flushed rows pending.
            await self.session.rollback()
            raise
