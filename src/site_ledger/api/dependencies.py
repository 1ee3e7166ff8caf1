"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from site_ledger.config import Settings, get_settings
from site_ledger.reports import Labels, ReportGenerator
from site_ledger.services import LedgerService, RecordStore, SubmissionService


async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    async with request.app.state.session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


DbSession = Annotated[AsyncSession, Depends(get_db_session)]
AppSettings = Annotated[Settings, Depends(get_settings)]


def get_store(db: DbSession) -> RecordStore:
    return RecordStore(db)


Store = Annotated[RecordStore, Depends(get_store)]


def get_ledger(store: Store) -> LedgerService:
    return LedgerService(store)


def get_submissions(request: Request, store: Store) -> SubmissionService:
    return SubmissionService(store, request.app.state.notifier)


def get_report_generator(
    store: Store,
    settings: AppSettings,
    lang: str | None = None,
) -> ReportGenerator:
    """Report generator in the requested language (``?lang=hi``)."""
    return ReportGenerator(store, labels=Labels.for_language(lang or settings.report_language))


# Type aliases for cleaner dependency injection
Ledger = Annotated[LedgerService, Depends(get_ledger)]
Submissions = Annotated[SubmissionService, Depends(get_submissions)]
Reports = Annotated[ReportGenerator, Depends(get_report_generator)]
