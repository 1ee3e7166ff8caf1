"""API routes."""

from site_ledger.api.routes.health import router as health_router
from site_ledger.api.routes.ledger import router as ledger_router
from site_ledger.api.routes.records import router as records_router
from site_ledger.api.routes.reports import router as reports_router
from site_ledger.api.routes.sites import router as sites_router
from site_ledger.api.routes.workers import router as workers_router

__all__ = [
    "health_router",
    "ledger_router",
    "records_router",
    "reports_router",
    "sites_router",
    "workers_router",
]
