"""Shared fixtures for catalog API tests."""

import os

# Keep the app off the production database during tests
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("IMAGE_MODE", "url")

from collections.abc import AsyncIterator, Iterator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from catalog_api.api.products import get_image_source, get_repository  # noqa: E402
from catalog_api.catalog.images import ReferenceImageSource, UploadImageSource  # noqa: E402
from catalog_api.catalog.repository import InMemoryProductRepository  # noqa: E402
from catalog_api.infrastructure.blob_store import LocalBlobStore  # noqa: E402
from catalog_api.infrastructure.database import Base  # noqa: E402
from catalog_api.main import app  # noqa: E402


@pytest.fixture
def repository() -> InMemoryProductRepository:
    """Create an empty in-memory product repository."""
    return InMemoryProductRepository()


@pytest.fixture
async def session() -> AsyncIterator[AsyncSession]:
    """Create a session on a fresh in-memory SQLite database."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session

    await engine.dispose()


@pytest.fixture
def blob_store(tmp_path) -> LocalBlobStore:
    """Create a blob store writing into a temporary directory."""
    return LocalBlobStore(tmp_path / "uploads", url_prefix="/uploads")


@pytest.fixture
def client(repository: InMemoryProductRepository) -> Iterator[TestClient]:
    """Create test client backed by the in-memory repository (URL images)."""
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_image_source] = lambda: ReferenceImageSource()
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def upload_client(
    repository: InMemoryProductRepository,
    blob_store: LocalBlobStore,
) -> Iterator[TestClient]:
    """Create test client that stores uploaded images in the blob store."""
    app.dependency_overrides[get_repository] = lambda: repository
    app.dependency_overrides[get_image_source] = lambda: UploadImageSource(blob_store)
    yield TestClient(app)
    app.dependency_overrides.clear()
