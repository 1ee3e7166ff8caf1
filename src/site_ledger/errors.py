"""Error kinds surfaced by the store, the ledger and the reports."""

from __future__ import annotations

from typing import Any


class SiteLedgerError(Exception):
    """Base class for all site ledger errors."""


class NotFoundError(SiteLedgerError):
    """Raised when a referenced site, worker or record does not exist."""

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class InvalidArgumentError(SiteLedgerError):
    """Raised for negative or non-numeric amounts and empty required fields."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


class StorageFailureError(SiteLedgerError):
    """Raised when the underlying database fails; nothing was written."""

    def __init__(self, action: str, detail: str | None = None):
        self.action = action
        self.detail = detail
        msg = f"Storage failure during {action}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class NoDataError(SiteLedgerError):
    """A report had no qualifying rows.

    Report generation itself never raises this; callers that want to treat
    an empty report as a failure opt in via ``ReportDocument.ensure_data``.
    """

    def __init__(self, kind: str, site_id: Any):
        self.kind = kind
        self.site_id = site_id
        super().__init__(f"No {kind} data for site {site_id}")
