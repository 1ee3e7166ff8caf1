"""Site API endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Path, Response, status

from site_ledger.api.dependencies import Store
from site_ledger.api.schemas import (
    ErrorResponse,
    SiteCreate,
    SiteResponse,
    SiteStatusUpdate,
)
from site_ledger.errors import NotFoundError

router = APIRouter(prefix="/sites", tags=["sites"])


@router.post(
    "",
    response_model=SiteResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_site(store: Store, payload: SiteCreate) -> SiteResponse:
    """Create a site, optionally with a generated joining code."""
    site_code = payload.site_code
    if site_code is None and payload.generate_code:
        site_code = await store.generate_site_code()
    site = await store.create_site(
        name=payload.name,
        location=payload.location,
        site_code=site_code,
        is_running=payload.is_running,
        site_type=payload.site_type,
        start_date=payload.start_date,
        end_date=payload.end_date,
        owner_name=payload.owner_name,
        contact=payload.contact,
    )
    return SiteResponse.model_validate(site)


@router.get("", response_model=list[SiteResponse])
async def list_sites(store: Store) -> list[SiteResponse]:
    return [SiteResponse.model_validate(s) for s in await store.list_sites()]


@router.get(
    "/by-code/{site_code}",
    response_model=SiteResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_site_by_code(store: Store, site_code: str) -> SiteResponse:
    site = await store.get_site_by_code(site_code)
    if site is None:
        raise NotFoundError("site", site_code)
    return SiteResponse.model_validate(site)


@router.get(
    "/{site_id}",
    response_model=SiteResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_site(store: Store, site_id: Annotated[UUID, Path()]) -> SiteResponse:
    return SiteResponse.model_validate(await store.get_site(site_id))


@router.patch(
    "/{site_id}/status",
    response_model=SiteResponse,
    responses={404: {"model": ErrorResponse}},
)
async def update_site_status(
    store: Store,
    site_id: Annotated[UUID, Path()],
    payload: SiteStatusUpdate,
) -> SiteResponse:
    """Mark a site as running or completed."""
    site = await store.set_site_running(site_id, payload.is_running)
    return SiteResponse.model_validate(site)


@router.delete(
    "/{site_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_site(store: Store, site_id: Annotated[UUID, Path()]) -> Response:
    """Delete a site together with all of its workers and records."""
    await store.delete_site(site_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
