"""Ledger endpoints: balances are recomputed on every request."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path

from site_ledger.api.dependencies import Ledger, Submissions
from site_ledger.api.schemas import (
    ErrorResponse,
    LedgerTotalsResponse,
    MaterialStockResponse,
    PreviewTotalRequest,
    PreviewTotalResponse,
    SiteSummaryResponse,
    WorkerSummaryResponse,
)
from site_ledger.calculators import SubsetRequest
from site_ledger.services import HajariDraft

router = APIRouter(tags=["ledger"])


@router.get(
    "/sites/{site_id}/workers/{worker_id}/totals",
    response_model=LedgerTotalsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def worker_totals(
    ledger: Ledger,
    site_id: Annotated[UUID, Path()],
    worker_id: Annotated[UUID, Path()],
) -> LedgerTotalsResponse:
    """Earned, expensed, paid and remaining for one worker."""
    totals = await ledger.compute_worker_totals(site_id, worker_id)
    return LedgerTotalsResponse.model_validate(totals)


@router.get(
    "/sites/{site_id}/ledger/workers",
    response_model=list[WorkerSummaryResponse],
    responses={404: {"model": ErrorResponse}},
)
async def worker_summaries(
    ledger: Ledger, site_id: Annotated[UUID, Path()]
) -> list[WorkerSummaryResponse]:
    return [WorkerSummaryResponse.model_validate(s) for s in await ledger.worker_summaries(site_id)]


@router.get(
    "/sites/{site_id}/ledger/summary",
    response_model=SiteSummaryResponse,
    responses={404: {"model": ErrorResponse}},
)
async def site_summary(ledger: Ledger, site_id: Annotated[UUID, Path()]) -> SiteSummaryResponse:
    return SiteSummaryResponse.model_validate(await ledger.site_summary(site_id))


@router.get(
    "/sites/{site_id}/materials/stock",
    response_model=list[MaterialStockResponse],
    responses={404: {"model": ErrorResponse}},
)
async def material_stock(
    ledger: Ledger, site_id: Annotated[UUID, Path()]
) -> list[MaterialStockResponse]:
    """Remaining stock per material; low when under a fifth of the purchase."""
    return [MaterialStockResponse.model_validate(s) for s in await ledger.material_stock(site_id)]


@router.post("/ledger/preview-total", response_model=PreviewTotalResponse)
async def preview_total(
    submissions: Submissions, payload: PreviewTotalRequest
) -> PreviewTotalResponse:
    """Total of the selected attendance drafts, before anything is stored."""
    drafts = [
        HajariDraft(worker_id=e.worker_id, amount=e.amount, overtime=e.overtime)
        for e in payload.entries
    ]
    total = submissions.preview_total(drafts, SubsetRequest.of(payload.selected_worker_ids))
    return PreviewTotalResponse(total=total)
