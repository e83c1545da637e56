from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from questpets.models.schema_models import TaskSchema
from questpets.models.schemas import Base

from .fakes import FakeClock, FakeSessionVerifier, FakeTaskStore

CATALOG = [
    TaskSchema(name="run", reward=10),
    TaskSchema(name="read", reward=5),
    TaskSchema(name="sleep", reward=0),
]


@pytest.fixture()
def catalog() -> list[TaskSchema]:
    return list(CATALOG)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 1, 9, 30, 0))


@pytest.fixture()
def sessions() -> FakeSessionVerifier:
    return FakeSessionVerifier({"tok": "u1", "tok2": "u2"})


@pytest.fixture()
def store(catalog) -> FakeTaskStore:
    return FakeTaskStore(catalog)


@pytest.fixture()
def sqlite_url(tmp_path: Path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'questpets.sqlite3'}"


@pytest_asyncio.fixture()
async def database_engine(sqlite_url: str) -> AsyncGenerator[AsyncEngine, None]:
    """
    Async engine on a per-test sqlite file with all tables created.

    The real CRUD layer runs against it, so store tests cover the SQL too.
    """
    engine = create_async_engine(sqlite_url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()
