"""Integration test fixtures for database and HTTP client operations.

The schema is created on a shared in-memory SQLite database (aiosqlite) with
foreign keys enforced, so delete ordering is checked the way PostgreSQL would.
Uses polyfactory for type-safe test data generation.
"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from src.featuretree.api.dependencies import get_blob_storage, get_db_session
from src.featuretree.core import db
from src.featuretree.core.db import get_session
from src.featuretree.core.health import reset_health_cache
from src.featuretree.core.storage import LocalBlobStorage
from src.featuretree.main import create_app
from src.featuretree.models import Feature, Project
from src.featuretree.repositories import FeatureRepository, ProjectRepository
from src.featuretree.services import FeatureService, ProjectService
from tests.factories import ProjectFactory


def _enable_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Fresh in-memory database with all tables created."""
    await db.dispose_engine()
    reset_health_cache()

    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    event.listen(test_engine.sync_engine, "connect", _enable_foreign_keys)

    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield test_engine
    await test_engine.dispose()
    await db.dispose_engine()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Provide an async session for direct database operations.

    The session never commits on its own; tests must call ``commit()``.
    """
    async with get_session(engine) as session:
        yield session


@pytest.fixture
def feature_service(db_session: AsyncSession) -> FeatureService:
    return FeatureService(FeatureRepository(db_session), ProjectRepository(db_session), db_session)


@pytest.fixture
def project_service(db_session: AsyncSession) -> ProjectService:
    return ProjectService(ProjectRepository(db_session), FeatureRepository(db_session), db_session)


@pytest.fixture
async def project(db_session: AsyncSession) -> Project:
    project = ProjectFactory.build()
    db_session.add(project)
    await db_session.commit()
    return project


@pytest.fixture
def add_features(db_session: AsyncSession):
    """Persist factory-built features and return them in insertion order."""

    async def _add(*features: Feature) -> list[Feature]:
        for feature in features:
            db_session.add(feature)
            await db_session.flush()
        await db_session.commit()
        return list(features)

    return _add


@pytest.fixture
def upload_dir(tmp_path: Path) -> Path:
    return tmp_path / "uploads"


@pytest.fixture
async def client(engine: AsyncEngine, upload_dir: Path) -> AsyncGenerator[AsyncClient]:
    """HTTP client bound to the test database and a temporary upload directory."""
    app = create_app()

    async def _get_test_session() -> AsyncGenerator[AsyncSession]:
        async with get_session(engine) as session:
            yield session

    app.dependency_overrides[get_db_session] = _get_test_session
    app.dependency_overrides[get_blob_storage] = lambda: LocalBlobStorage(
        upload_dir, url_prefix="/uploads"
    )

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()

