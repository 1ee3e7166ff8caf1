"""Ledger service: balances and material stock computed from the store."""

from __future__ import annotations

import logging
from uuid import UUID

from site_ledger.calculators import (
    LedgerTotals,
    MaterialStock,
    SiteSummary,
    WorkerSummary,
    compute_site_summary,
    compute_worker_totals,
    summarize_stock,
    summarize_workers,
)
from site_ledger.models import Site
from site_ledger.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class LedgerService:
    """Store-backed ledger aggregation.

    Nothing is cached: each call re-reads hajari, expenses and payments and
    recomputes, so the result reflects the store at the time of the reads.
    """

    def __init__(self, store: RecordStore):
        self.store = store

    async def compute_worker_totals(self, site_id: UUID, worker_id: UUID) -> LedgerTotals:
        """Totals for one worker on one site.

        The worker itself need not exist any more; a deleted worker's
        historical rows still add up.
        """
        await self.store.get(Site, site_id)
        hajari = await self.store.list_hajari(site_id, worker_id)
        expenses = await self.store.list_expenses(site_id, worker_id)
        payments = await self.store.list_payments(site_id, worker_id)
        return compute_worker_totals(site_id, worker_id, hajari, expenses, payments)

    async def worker_summaries(self, site_id: UUID) -> list[WorkerSummary]:
        await self.store.get(Site, site_id)
        workers = await self.store.list_workers(site_id)
        hajari = await self.store.list_hajari(site_id)
        expenses = await self.store.list_expenses(site_id)
        payments = await self.store.list_payments(site_id)
        return summarize_workers(workers, hajari, expenses, payments)

    async def site_summary(self, site_id: UUID) -> SiteSummary:
        """Grand totals across every record of a site."""
        await self.store.get(Site, site_id)
        workers = await self.store.list_workers(site_id)
        summary = compute_site_summary(
            await self.store.list_hajari(site_id),
            await self.store.list_expenses(site_id),
            await self.store.list_payments(site_id),
            worker_count=len(workers),
        )
        logger.debug("Site %s summary: %s", site_id, summary.totals)
        return summary

    async def material_stock(self, site_id: UUID) -> list[MaterialStock]:
        """Remaining stock per material, from purchases and recorded usage."""
        await self.store.get(Site, site_id)
        materials = await self.store.list_materials(site_id)
        usages = await self.store.list_material_usages(site_id)
        return summarize_stock(materials, usages)
