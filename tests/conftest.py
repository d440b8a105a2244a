import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from media_vault.core.config import DEFAULT_ALLOWED_CONTENT_TYPES
from media_vault.db import models  # noqa: F401
from media_vault.infrastructure.database.base import Base
from media_vault.infrastructure.database.repositories import SqlAssetRepository
from media_vault.modules.assets import AssetService, LocalBlobStore

from helpers import StepClock


@pytest.fixture
async def db_engine(tmp_path):
    """File-backed SQLite engine, one database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(bind=db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as sess:
        yield sess


@pytest.fixture
def blob_store(tmp_path):
    store = LocalBlobStore(
        tmp_path / "blobs",
        allowed_content_types=DEFAULT_ALLOWED_CONTENT_TYPES,
        max_upload_bytes=64 * 1024,
    )
    store.ensure_storage()
    return store


@pytest.fixture
def repository(session):
    return SqlAssetRepository(session)


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def service(repository, blob_store, clock):
    return AssetService(repository, blob_store, clock=clock)
