"""Report download endpoints."""

from typing import Annotated
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, Path, Query, Response

from site_ledger.api.dependencies import Reports
from site_ledger.api.schemas import ErrorResponse
from site_ledger.reports import ReportFormat, ReportKind

router = APIRouter(tags=["reports"])


def content_disposition(filename: str) -> str:
    """Attachment header that survives non-ASCII site names (RFC 6266/5987).

    Header values go out as latin-1, so the plain ``filename`` carries an
    ASCII stand-in and ``filename*`` carries the real UTF-8 name.
    """
    fallback = "".join(
        ch if " " <= ch <= "~" and ch not in '"\\' else "_" for ch in filename
    )
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename, safe='')}"


@router.get(
    "/sites/{site_id}/reports/{kind}",
    response_class=Response,
    responses={400: {"model": ErrorResponse}},
)
async def download_report(
    reports: Reports,
    site_id: Annotated[UUID, Path()],
    kind: ReportKind,
    fmt: Annotated[ReportFormat, Query(alias="format")] = ReportFormat.CSV,
) -> Response:
    """Render a report; sites without rows still get a valid empty document."""
    document = await reports.generate(site_id, kind, fmt)
    return Response(
        content=document.payload,
        media_type=document.media_type,
        headers={
            "Content-Disposition": content_disposition(document.filename),
            "X-Report-Empty": "true" if document.empty else "false",
        },
    )
