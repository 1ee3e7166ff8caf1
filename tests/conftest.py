"""Pytest fixtures for site ledger tests."""

from __future__ import annotations

from datetime import datetime
from typing import AsyncGenerator

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from site_ledger.database import build_engine, build_session_factory, create_schema
from site_ledger.models import Site, Worker
from site_ledger.services import RecordStore

# Fresh in-memory SQLite per test; the engine shares one connection.
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

FIXED_NOW = datetime(2025, 3, 5, 14, 30, 0)


class RecordingNotifier:
    """Notifier that keeps what it was sent."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def notify(self, title: str, body: str) -> None:
        self.messages.append((title, body))


@pytest.fixture
def clock():
    """Clock frozen at 5 Mar 2025, 14:30."""
    return lambda: FIXED_NOW


@pytest.fixture
async def engine():
    """Create test database engine."""
    engine = build_engine(TEST_DATABASE_URL)
    await create_schema(engine)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(session, clock) -> RecordStore:
    return RecordStore(session, clock=clock)


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
async def site(store) -> Site:
    return await store.create_site(name="Site A", location="Pune")


@pytest.fixture
async def karigar(store, site) -> Worker:
    return await store.add_worker(
        site.site_id,
        name="Ramesh",
        category="karigar",
        village="Shirur",
        contact="9876543210",
    )


@pytest.fixture
async def mazdoor(store, site) -> Worker:
    return await store.add_worker(site.site_id, name="Suresh", category="mazdoor", age=32)
