"""Hajari, expense, payment and material endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Query, Response, status

from site_ledger.api.dependencies import Store, Submissions
from site_ledger.api.schemas import (
    ErrorResponse,
    ExpenseResponse,
    ExpenseSubmission,
    HajariResponse,
    HajariSubmission,
    MaterialCreate,
    MaterialResponse,
    MaterialUsageCreate,
    MaterialUsageResponse,
    PaymentCreate,
    PaymentResponse,
)
from site_ledger.calculators import SubsetRequest
from site_ledger.services import ExpenseInput, HajariDraft

router = APIRouter(tags=["records"])

SiteId = Annotated[UUID, Path()]
WorkerFilter = Annotated[UUID | None, Query()]

ERRORS = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


# ============================================================================
# Hajari
# ============================================================================


@router.post(
    "/sites/{site_id}/hajari",
    response_model=list[HajariResponse],
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
)
async def submit_hajari(
    submissions: Submissions,
    site_id: SiteId,
    payload: HajariSubmission,
) -> list[HajariResponse]:
    """Submit the selected attendance rows as one atomic batch."""
    drafts = [
        HajariDraft(worker_id=e.worker_id, amount=e.amount, overtime=e.overtime)
        for e in payload.entries
    ]
    selected = payload.selected_worker_ids
    if selected is None:
        selected = [d.worker_id for d in drafts]
    records = await submissions.submit_hajari(
        site_id,
        drafts,
        SubsetRequest.of(selected),
        date=payload.date,
        time=payload.time,
    )
    return [HajariResponse.model_validate(r) for r in records]


@router.get("/sites/{site_id}/hajari", response_model=list[HajariResponse])
async def list_hajari(
    store: Store, site_id: SiteId, worker_id: WorkerFilter = None
) -> list[HajariResponse]:
    return [HajariResponse.model_validate(r) for r in await store.list_hajari(site_id, worker_id)]


# ============================================================================
# Expenses
# ============================================================================


@router.post(
    "/sites/{site_id}/expenses",
    response_model=list[ExpenseResponse],
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
)
async def submit_expenses(
    submissions: Submissions,
    site_id: SiteId,
    payload: ExpenseSubmission,
) -> list[ExpenseResponse]:
    entries = [ExpenseInput(**e.model_dump()) for e in payload.entries]
    expenses = await submissions.submit_expenses(site_id, entries)
    return [ExpenseResponse.model_validate(e) for e in expenses]


@router.get("/sites/{site_id}/expenses", response_model=list[ExpenseResponse])
async def list_expenses(
    store: Store, site_id: SiteId, worker_id: WorkerFilter = None
) -> list[ExpenseResponse]:
    return [
        ExpenseResponse.model_validate(e) for e in await store.list_expenses(site_id, worker_id)
    ]


# ============================================================================
# Payments
# ============================================================================


@router.post(
    "/sites/{site_id}/payments",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
)
async def record_payment(
    submissions: Submissions,
    site_id: SiteId,
    payload: PaymentCreate,
) -> PaymentResponse:
    payment = await submissions.record_payment(site_id, **payload.model_dump())
    return PaymentResponse.model_validate(payment)


@router.get("/sites/{site_id}/payments", response_model=list[PaymentResponse])
async def list_payments(
    store: Store, site_id: SiteId, worker_id: WorkerFilter = None
) -> list[PaymentResponse]:
    return [
        PaymentResponse.model_validate(p) for p in await store.list_payments(site_id, worker_id)
    ]


# ============================================================================
# Materials
# ============================================================================


@router.post(
    "/sites/{site_id}/materials",
    response_model=MaterialResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
)
async def add_material(
    submissions: Submissions,
    site_id: SiteId,
    payload: MaterialCreate,
) -> MaterialResponse:
    material = await submissions.record_material(site_id, **payload.model_dump())
    return MaterialResponse.model_validate(material)


@router.get("/sites/{site_id}/materials", response_model=list[MaterialResponse])
async def list_materials(store: Store, site_id: SiteId) -> list[MaterialResponse]:
    return [MaterialResponse.model_validate(m) for m in await store.list_materials(site_id)]


@router.delete(
    "/materials/{material_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_material(store: Store, material_id: Annotated[UUID, Path()]) -> Response:
    await store.delete_material(material_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/materials/{material_id}/usages",
    response_model=MaterialUsageResponse,
    status_code=status.HTTP_201_CREATED,
    responses=ERRORS,
)
async def add_material_usage(
    store: Store,
    material_id: Annotated[UUID, Path()],
    payload: MaterialUsageCreate,
) -> MaterialUsageResponse:
    usage = await store.add_material_usage(material_id, **payload.model_dump())
    return MaterialUsageResponse.model_validate(usage)


@router.get("/sites/{site_id}/material-usages", response_model=list[MaterialUsageResponse])
async def list_material_usages(
    store: Store,
    site_id: SiteId,
    material_id: Annotated[UUID | None, Query()] = None,
) -> list[MaterialUsageResponse]:
    return [
        MaterialUsageResponse.model_validate(u)
        for u in await store.list_material_usages(site_id, material_id)
    ]
