"""Service test fixtures — file-backed async SQLite + FastAPI test client.

Invariants:
    - Every test gets a fresh SQLite database file under tmp_path
    - Engines are built with infrastructure.database.create_engine, so foreign
      keys (and their ON DELETE rules) are enforced exactly as in production
    - get_db dependency overridden to use the test engine; db_manager patched
      for the readiness check

Design Decisions:
    - File database over :memory: so concurrent sessions get separate
      connections and really contend for the write lock
    - Seed helpers commit through services, so seeded rows carry the same
      history rows production intake writes
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from httpx import ASGITransport, AsyncClient

from calftrack.db.base import Base
from calftrack.infrastructure.database import (
    DatabaseSessionManager, create_engine, get_db,
)
import calftrack.infrastructure.database as db_module
import calftrack.models  # noqa: F401
from calftrack.main import app
from calftrack.services.calf_ledger import CalfLedger
from calftrack.services.name_registry import MasterDataResolver
from calftrack.services.ranch_service import RanchService


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_engine(f"sqlite+aiosqlite:///{tmp_path / 'calftrack.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Seed helpers ───────────────────────────────────────────────

@pytest.fixture
def make_ranch(test_session_factory):
    async def _make(name: str, **fields):
        async with test_session_factory() as session:
            ranch = await RanchService(session).create({"name": name, **fields})
            return ranch.id
    return _make


@pytest.fixture
def make_calf(test_session_factory):
    async def _make(ranch_id: int, primary_id: str, **fields):
        record = {
            "primary_id": primary_id,
            "breed": "Angus",
            "seller": "Smith Farms",
            "sex": "heifer",
            "current_ranch_id": ranch_id,
            "placed_date": "2024-03-01",
            **fields,
        }
        async with test_session_factory() as session:
            calf = await CalfLedger(session, MasterDataResolver(session)).create(record)
            return calf.id
    return _make


@pytest.fixture
async def ranches(make_ranch):
    """Two ranches: North (origin) and South (destination)."""
    return {
        "north": await make_ranch("North Pasture"),
        "south": await make_ranch("South Feedyard"),
    }
