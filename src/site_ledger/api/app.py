"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from site_ledger import __version__
from site_ledger.api.routes import (
    health_router,
    ledger_router,
    records_router,
    reports_router,
    sites_router,
    workers_router,
)
from site_ledger.database import create_schema, dispose_db, init_db
from site_ledger.errors import (
    InvalidArgumentError,
    NoDataError,
    NotFoundError,
    SiteLedgerError,
    StorageFailureError,
)
from site_ledger.services import LoggingNotifier, Notifier

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[SiteLedgerError], tuple[int, str]] = {
    NotFoundError: (status.HTTP_404_NOT_FOUND, "NOT_FOUND"),
    InvalidArgumentError: (status.HTTP_400_BAD_REQUEST, "INVALID_ARGUMENT"),
    StorageFailureError: (status.HTTP_503_SERVICE_UNAVAILABLE, "STORAGE_FAILURE"),
    NoDataError: (status.HTTP_404_NOT_FOUND, "NO_DATA"),
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    owns_database = app.state.session_factory is None
    if owns_database:
        engine, factory = init_db()
        await create_schema(engine)
        app.state.session_factory = factory
    yield
    if owns_database:
        await dispose_db()


def _error_context(exc: SiteLedgerError) -> dict:
    context = {}
    for attr in ("entity", "entity_id", "field", "reason", "action", "kind", "site_id"):
        if hasattr(exc, attr):
            context[attr] = str(getattr(exc, attr))
    return context


def create_app(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
    notifier: Notifier | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``session_factory`` lets callers (tests, embedding UIs) supply their own
    database; otherwise the configured database is opened on startup.
    """
    app = FastAPI(
        title="Site Ledger API",
        description="Construction site labour and material ledger",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.session_factory = session_factory
    app.state.notifier = notifier or LoggingNotifier()

    # Local UI only; served from the device.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(SiteLedgerError)
    async def site_ledger_exception_handler(
        request: Request, exc: SiteLedgerError
    ) -> JSONResponse:
        status_code, code = ERROR_STATUS.get(
            type(exc), (status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR")
        )
        return JSONResponse(
            status_code=status_code,
            content={"detail": str(exc), "code": code, "context": _error_context(exc)},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    app.include_router(health_router)
    for router in (sites_router, workers_router, records_router, ledger_router, reports_router):
        app.include_router(router, prefix="/api/v1")

    return app
