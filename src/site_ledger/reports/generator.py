"""Report generator: site records to CSV or HTML documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar
from uuid import UUID

from site_ledger.errors import InvalidArgumentError, NoDataError, NotFoundError
from site_ledger.models import Site
from site_ledger.reports.csv_writer import render_csv
from site_ledger.reports.formatting import format_timestamp, report_filename
from site_ledger.reports.html_writer import render_html
from site_ledger.reports.labels import ENGLISH, Labels
from site_ledger.reports.tables import (
    ReportTable,
    budget_table,
    materials_table,
    payments_table,
    workers_table,
)
from site_ledger.services.record_store import RecordStore
from site_ledger.services.types import Clock, system_clock

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class ReportKind(str, Enum):
    """Report types."""

    WORKERS = "workers"
    MATERIALS = "materials"
    BUDGET = "budget"
    PAYMENTS = "payments"

    @property
    def file_title(self) -> str:
        """Kind token used in file names (always English)."""
        return self.value.capitalize()


class ReportFormat(str, Enum):
    """Serialized output forms."""

    CSV = "csv"
    HTML = "html"

    @property
    def extension(self) -> str:
        return self.value

    @property
    def media_type(self) -> str:
        if self is ReportFormat.CSV:
            return "text/csv; charset=utf-8"
        return "text/html; charset=utf-8"


@dataclass(frozen=True)
class ReportDocument:
    """A rendered report, ready for preview or export."""

    site_id: UUID
    kind: ReportKind
    fmt: ReportFormat
    filename: str
    content: str
    media_type: str
    empty: bool

    @property
    def payload(self) -> bytes:
        return self.content.encode("utf-8")

    def ensure_data(self) -> ReportDocument:
        """Return self, or raise NoDataError when the report has no rows."""
        if self.empty:
            raise NoDataError(self.kind.value, self.site_id)
        return self


def _parse(enum_cls: type[E], value: Any, field: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise InvalidArgumentError(field, f"{value!r} is not one of {choices}")


class ReportGenerator:
    """Build report documents from the current store contents.

    Generation only reads. Missing data never fails: a site without rows,
    or a site that does not exist, yields a renderable empty document.
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Clock = system_clock,
        labels: Labels = ENGLISH,
    ):
        self.store = store
        self.clock = clock
        self.labels = labels

    async def generate(self, site_id: UUID, kind: Any, fmt: Any) -> ReportDocument:
        report_kind = _parse(ReportKind, kind, "kind")
        report_format = _parse(ReportFormat, fmt, "format")

        site_name = await self._site_name(site_id)
        table = await self.build_table(site_id, report_kind)
        moment = self.clock()

        if report_format is ReportFormat.CSV:
            content = render_csv(table)
        else:
            content = render_html(
                table,
                site_name=site_name,
                generated_at=format_timestamp(moment),
                labels=self.labels,
            )

        document = ReportDocument(
            site_id=site_id,
            kind=report_kind,
            fmt=report_format,
            filename=report_filename(
                site_name, report_kind.file_title, moment, report_format.extension
            ),
            content=content,
            media_type=report_format.media_type,
            empty=table.is_empty,
        )
        logger.info(
            "Generated %s %s report for site %s (%d rows)",
            report_kind.value,
            report_format.value,
            site_id,
            len(table.rows),
        )
        return document

    async def build_table(self, site_id: UUID, kind: ReportKind) -> ReportTable:
        """Rows for one report kind, shared by every output format."""
        if kind is ReportKind.WORKERS:
            return workers_table(await self.store.list_workers(site_id), self.labels)
        if kind is ReportKind.MATERIALS:
            return materials_table(await self.store.list_materials(site_id), self.labels)
        if kind is ReportKind.BUDGET:
            return budget_table(
                await self.store.list_workers(site_id),
                await self.store.list_hajari(site_id),
                await self.store.list_expenses(site_id),
                await self.store.list_payments(site_id),
                self.labels,
            )
        return payments_table(await self.store.list_payments(site_id), self.labels)

    async def _site_name(self, site_id: UUID) -> str:
        try:
            site = await self.store.get(Site, site_id)
        except NotFoundError:
            logger.warning("Report requested for unknown site %s", site_id)
            return self.labels.site
        return site.name
