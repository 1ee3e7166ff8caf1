"""Tests for ledger aggregation."""

from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID, uuid4

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from site_ledger.calculators import (
    LedgerTotals,
    SubsetRequest,
    compute_site_summary,
    compute_worker_totals,
    remaining_stock,
    subset_total,
    summarize_stock,
    summarize_workers,
    unassigned_expense_totals,
)
from site_ledger.errors import NotFoundError
from site_ledger.services import ExpenseInput, HajariInput, LedgerService

SITE = uuid4()
WORKER = uuid4()


@dataclass
class Row:
    """Minimal stand-in for a stored record."""

    site_id: UUID
    worker_id: UUID | None
    amount: Decimal
    overtime: Decimal = Decimal("0")
    date: str = "2025-03-05"
    time: str = "10:00:00"
    worker_name: str | None = "Ramesh"
    worker_category: str | None = "karigar"
    hajari_record_id: UUID | None = None


@dataclass
class LiveWorker:
    site_id: UUID
    worker_id: UUID
    name: str
    category: str


amounts = st.decimals(min_value=0, max_value=100000, places=2, allow_nan=False, allow_infinity=False)


class TestWorkerTotals:
    """Per-worker ledger formula."""

    def test_example_scenario(self):
        hajari = [
            Row(SITE, WORKER, Decimal("500"), Decimal("50")),
            Row(SITE, WORKER, Decimal("500"), Decimal("0")),
        ]
        expenses = [Row(SITE, WORKER, Decimal("200"))]
        payments = [Row(SITE, WORKER, Decimal("600"))]

        totals = compute_worker_totals(SITE, WORKER, hajari, expenses, payments)

        assert totals == LedgerTotals(
            total_hajari=Decimal("1050"),
            total_expense=Decimal("200"),
            total_paid=Decimal("600"),
            remaining=Decimal("250"),
        )

    def test_overpaid_worker_goes_negative(self):
        totals = compute_worker_totals(
            SITE,
            WORKER,
            [Row(SITE, WORKER, Decimal("500"))],
            [],
            [Row(SITE, WORKER, Decimal("800"))],
        )
        assert totals.remaining == Decimal("-300")
        assert totals.is_overpaid

    def test_no_records_is_all_zero(self):
        totals = compute_worker_totals(SITE, WORKER, [], [], [])
        assert totals == LedgerTotals()

    def test_other_sites_and_workers_ignored(self):
        other_site, other_worker = uuid4(), uuid4()
        hajari = [
            Row(SITE, WORKER, Decimal("500")),
            Row(other_site, WORKER, Decimal("999")),
            Row(SITE, other_worker, Decimal("777")),
        ]
        totals = compute_worker_totals(SITE, WORKER, hajari, [], [])
        assert totals.total_hajari == Decimal("500")

    @given(
        hajari=st.lists(st.tuples(amounts, amounts), max_size=20),
        expenses=st.lists(amounts, max_size=20),
        payments=st.lists(amounts, max_size=20),
    )
    @settings(max_examples=100)
    def test_remaining_identity(self, hajari, expenses, payments):
        """remaining is always hajari minus expenses minus payments."""
        totals = compute_worker_totals(
            SITE,
            WORKER,
            [Row(SITE, WORKER, a, o) for a, o in hajari],
            [Row(SITE, WORKER, e) for e in expenses],
            [Row(SITE, WORKER, p) for p in payments],
        )
        assert totals.total_hajari == sum((a + o for a, o in hajari), Decimal("0"))
        assert totals.remaining == totals.total_hajari - totals.total_expense - totals.total_paid

    @given(st.lists(st.tuples(amounts, amounts), min_size=1, max_size=20), st.randoms())
    @settings(max_examples=50)
    def test_order_does_not_matter(self, entries, rnd):
        rows = [Row(SITE, WORKER, a, o) for a, o in entries]
        shuffled = list(rows)
        rnd.shuffle(shuffled)
        assert compute_worker_totals(SITE, WORKER, rows, [], []) == compute_worker_totals(
            SITE, WORKER, shuffled, [], []
        )


class TestSubsetTotal:
    """Caller-selected subsets."""

    def test_selected_ids(self):
        rows = [Row(SITE, WORKER, Decimal(a), hajari_record_id=uuid4()) for a in ("100", "200", "300")]
        request = SubsetRequest.of([rows[0].hajari_record_id, rows[2].hajari_record_id])
        assert subset_total(rows, request) == Decimal("400")

    def test_predicate(self):
        rows = [
            Row(SITE, WORKER, Decimal("100"), Decimal("10"), date="2025-03-04", hajari_record_id=uuid4()),
            Row(SITE, WORKER, Decimal("200"), date="2025-03-05", hajari_record_id=uuid4()),
        ]
        request = SubsetRequest(predicate=lambda r: r.date == "2025-03-04")
        assert subset_total(rows, request) == Decimal("110")

    def test_empty_request_selects_nothing(self):
        rows = [Row(SITE, WORKER, Decimal("100"), hajari_record_id=uuid4())]
        assert subset_total(rows, SubsetRequest()) == Decimal("0")


class TestSummaries:
    """Site-wide views."""

    def test_deleted_worker_listed_from_snapshot(self):
        live = LiveWorker(SITE, WORKER, "Ramesh", "karigar")
        gone = uuid4()
        hajari = [
            Row(SITE, WORKER, Decimal("500")),
            Row(SITE, gone, Decimal("400"), worker_name="Old Name", worker_category="mazdoor"),
            Row(SITE, gone, Decimal("400"), date="2025-03-06", worker_name="Kishor", worker_category="mazdoor"),
        ]
        payments = [
            Row(SITE, gone, Decimal("300"), date="2025-03-07", worker_name="Kishor", worker_category="mazdoor")
        ]

        summaries = summarize_workers([live], hajari, [], payments)

        assert [s.worker_id for s in summaries] == [WORKER, gone]
        departed = summaries[1]
        assert departed.is_active is False
        assert departed.worker_name == "Kishor"
        assert departed.totals.remaining == Decimal("500")
        assert departed.last_payment_date == "2025-03-07"
        assert summaries[0].last_payment_date is None

    def test_site_summary_includes_unassigned_expenses(self):
        summary = compute_site_summary(
            [Row(SITE, WORKER, Decimal("1000"))],
            [Row(SITE, None, Decimal("150"), worker_name=None, worker_category=None)],
            [Row(SITE, WORKER, Decimal("400"))],
            worker_count=1,
        )
        assert summary.totals.remaining == Decimal("450")
        assert summary.expense_count == 1

    def test_unassigned_expense_totals(self):
        totals = unassigned_expense_totals(
            [
                Row(SITE, None, Decimal("100"), worker_category=None),
                Row(SITE, None, Decimal("50"), worker_category=None),
                Row(SITE, WORKER, Decimal("900")),
            ]
        )
        assert totals == LedgerTotals.from_sums(Decimal("0"), Decimal("150"), Decimal("0"))
        assert totals.remaining == Decimal("-150")

    def test_no_unassigned_expenses(self):
        assert unassigned_expense_totals([Row(SITE, WORKER, Decimal("900"))]) is None


class TestMaterialStock:
    """Remaining stock from purchases and usage."""

    @dataclass
    class Purchase:
        material_id: UUID
        quantity: Decimal
        name: str = "Cement"
        unit: str = "bags"
        remaining_payment: Decimal = Decimal("0")

    @dataclass
    class Usage:
        material_id: UUID
        quantity_used: Decimal

    def test_remaining_subtracts_usage(self):
        cement = self.Purchase(uuid4(), Decimal("50"))
        usages = [
            self.Usage(cement.material_id, Decimal("12.5")),
            self.Usage(cement.material_id, Decimal("7.5")),
            self.Usage(uuid4(), Decimal("40")),
        ]
        assert remaining_stock(cement, usages) == Decimal("30")

    def test_overuse_bottoms_out_at_zero(self):
        sand = self.Purchase(uuid4(), Decimal("5"), name="Sand")
        assert remaining_stock(sand, [self.Usage(sand.material_id, Decimal("8"))]) == Decimal("0")

    def test_low_stock_flag(self):
        cement = self.Purchase(uuid4(), Decimal("50"), remaining_payment=Decimal("5000"))
        steel = self.Purchase(uuid4(), Decimal("10"), name="Steel")
        usages = [
            self.Usage(cement.material_id, Decimal("41")),
            self.Usage(steel.material_id, Decimal("8")),
        ]

        stock = summarize_stock([cement, steel], usages)

        assert [s.remaining for s in stock] == [Decimal("9"), Decimal("2")]
        assert stock[0].is_low and stock[0].used == Decimal("41")
        assert stock[0].remaining_payment == Decimal("5000")
        assert stock[1].is_low is False  # 2 left of 10 is exactly the threshold

class TestLedgerService:
    """Store-backed aggregation."""

    async def test_worker_totals_from_store(self, store, site, karigar):
        await store.add_hajari_records(
            site.site_id,
            [
                HajariInput(karigar.worker_id, 500, overtime=50),
                HajariInput(karigar.worker_id, 500),
            ],
        )
        await store.add_expenses(
            site.site_id, [ExpenseInput(amount=200, worker_id=karigar.worker_id)]
        )
        await store.add_payment(site.site_id, worker_id=karigar.worker_id, amount=600)

        totals = await LedgerService(store).compute_worker_totals(site.site_id, karigar.worker_id)

        assert totals.total_hajari == Decimal("1050")
        assert totals.remaining == Decimal("250")

    async def test_deleted_worker_still_computable(self, store, site, karigar):
        worker_id = karigar.worker_id
        await store.add_hajari_record(site.site_id, HajariInput(worker_id, 700))
        ledger = LedgerService(store)
        before = await ledger.compute_worker_totals(site.site_id, worker_id)

        await store.delete_worker(worker_id)

        assert await ledger.compute_worker_totals(site.site_id, worker_id) == before
        summaries = await ledger.worker_summaries(site.site_id)
        assert [(s.worker_name, s.is_active) for s in summaries] == [("Ramesh", False)]

    async def test_recomputes_after_new_payment(self, store, site, karigar):
        ledger = LedgerService(store)
        await store.add_hajari_record(site.site_id, HajariInput(karigar.worker_id, 700))
        assert (await ledger.site_summary(site.site_id)).totals.remaining == Decimal("700")

        await store.add_payment(site.site_id, worker_id=karigar.worker_id, amount=300)
        summary = await ledger.site_summary(site.site_id)
        assert summary.totals.remaining == Decimal("400")
        assert summary.worker_count == 1

    async def test_missing_site(self, store):
        with pytest.raises(NotFoundError):
            await LedgerService(store).site_summary(uuid4())

    async def test_material_stock(self, store, site):
        cement = await store.add_material(
            site.site_id, name="Cement", quantity=50, rate_per_unit=400, amount_paid=15000
        )
        await store.add_material_usage(cement.material_id, quantity_used=45)

        (stock,) = await LedgerService(store).material_stock(site.site_id)

        assert stock.remaining == Decimal("5")
        assert stock.remaining_payment == Decimal("5000")
        assert stock.is_low is True
