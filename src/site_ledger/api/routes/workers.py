"""Worker API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Response, status

from site_ledger.api.dependencies import Store
from site_ledger.api.schemas import (
    ErrorResponse,
    WorkerCreate,
    WorkerResponse,
    WorkerUpdate,
)

router = APIRouter(tags=["workers"])


@router.post(
    "/sites/{site_id}/workers",
    response_model=WorkerResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def add_worker(
    store: Store,
    site_id: Annotated[UUID, Path()],
    payload: WorkerCreate,
) -> WorkerResponse:
    worker = await store.add_worker(site_id, **payload.model_dump())
    return WorkerResponse.model_validate(worker)


@router.get("/sites/{site_id}/workers", response_model=list[WorkerResponse])
async def list_workers(store: Store, site_id: Annotated[UUID, Path()]) -> list[WorkerResponse]:
    return [WorkerResponse.model_validate(w) for w in await store.list_workers(site_id)]


@router.get(
    "/workers/{worker_id}",
    response_model=WorkerResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_worker(store: Store, worker_id: Annotated[UUID, Path()]) -> WorkerResponse:
    return WorkerResponse.model_validate(await store.get_worker(worker_id))


@router.patch(
    "/workers/{worker_id}",
    response_model=WorkerResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_worker(
    store: Store,
    worker_id: Annotated[UUID, Path()],
    payload: WorkerUpdate,
) -> WorkerResponse:
    """Update profile fields; past records keep their snapshot."""
    worker = await store.update_worker(worker_id, **payload.model_dump(exclude_unset=True))
    return WorkerResponse.model_validate(worker)


@router.delete(
    "/workers/{worker_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_worker(store: Store, worker_id: Annotated[UUID, Path()]) -> Response:
    """Remove a worker; hajari, expenses and payments stay on the site."""
    await store.delete_worker(worker_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
