"""
Shared test fixtures for EventDrop Backend tests.

Provides:
- Test database (SQLite in-memory, fresh per test)
- Test client (httpx AsyncClient over the ASGI app)
- In-memory media host that records uploads and deletes
- Registered users with access tokens
- Test project factory
- Sample media files (small test image/video)
- Mock Redis for the rate limiter
"""

import os
import uuid
from typing import AsyncGenerator, BinaryIO, Callable, Generator, Optional
from unittest.mock import MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app modules
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-purposes-only-32chars"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["REDIS_URL"] = "redis://localhost:6379/0"
os.environ["FRONTEND_ORIGIN"] = "http://guests.test"
os.environ["CLOUDINARY_CLOUD_NAME"] = "test-cloud"
os.environ["CLOUDINARY_API_KEY"] = "test-key"
os.environ["CLOUDINARY_API_SECRET"] = "test-secret"

from app.api.deps import get_db
from app.core.database import Base, get_async_session
from app.core.errors import UploadError
from app.core.media_host import MediaHost, StoredObject, get_media_host
from app.main import app


# =============================================================================
# Fake Media Host
# =============================================================================


class FakeMediaHost(MediaHost):
    """
    In-memory media host.

    Records every upload and delete so tests can assert on calls made to
    the external service. Set ``fail_uploads``/``fail_deletes`` to simulate
    an outage.
    """

    def __init__(self):
        self.uploads: list[dict] = []
        self.deleted: list[str] = []
        self.fail_uploads = False
        self.fail_deletes = False

    async def upload(
        self,
        fileobj: BinaryIO,
        *,
        folder: str,
        filename: str,
        content_type: Optional[str],
    ) -> StoredObject:
        if self.fail_uploads:
            raise UploadError("Media host upload failed after 3 attempts")

        data = fileobj.read()
        storage_id = f"eventdrop/{folder}/{uuid.uuid4().hex[:12]}"
        resource_type = "image" if (content_type or "").startswith("image/") else "video"
        self.uploads.append({
            "storage_id": storage_id,
            "folder": folder,
            "filename": filename,
            "content_type": content_type,
            "size": len(data),
        })
        return StoredObject(
            url=f"https://media.test/{resource_type}/upload/{storage_id}",
            storage_id=storage_id,
            resource_type=resource_type,
        )

    async def delete(self, storage_id: str, resource_type: str) -> None:
        self.deleted.append(storage_id)
        if self.fail_deletes:
            raise UploadError(f"Media host delete failed for {storage_id}")


@pytest.fixture
def media_host() -> FakeMediaHost:
    return FakeMediaHost()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """
    Provide a session factory bound to a fresh in-memory database.

    Creates all tables before the test and disposes the engine after.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(session_factory: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session for direct assertions."""
    async with session_factory() as session:
        yield session


def make_db_override(factory: async_sessionmaker) -> Callable:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        """Override database dependency for testing."""
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return override_get_db


# =============================================================================
# Mock Redis Fixtures
# =============================================================================


@pytest.fixture
def mock_redis() -> Generator[MagicMock, None, None]:
    """Mock Redis connection used by the rate limiter."""
    mock = MagicMock()
    mock.get.return_value = None
    mock.ttl.return_value = 42
    mock.pipeline.return_value = MagicMock(
        incr=MagicMock(return_value=mock),
        expire=MagicMock(return_value=mock),
        execute=MagicMock(return_value=[1, True]),
    )

    with patch("app.core.rate_limit.get_redis_connection", return_value=mock):
        yield mock


# =============================================================================
# Test Client Fixtures
# =============================================================================


@pytest_asyncio.fixture(scope="function")
async def async_client(
    session_factory: async_sessionmaker,
    media_host: FakeMediaHost,
    mock_redis: MagicMock,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Provide an async HTTP client for testing the FastAPI application.

    Overrides the database and media host dependencies.
    """
    override = make_db_override(session_factory)
    app.dependency_overrides[get_db] = override
    app.dependency_overrides[get_async_session] = override
    app.dependency_overrides[get_media_host] = lambda: media_host

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


# =============================================================================
# User Fixtures
# =============================================================================


async def register_user(
    client: AsyncClient,
    email: Optional[str] = None,
    password: str = "TestPassword123!",
    name: str = "Test Photographer",
) -> dict:
    """Register a user through the API and return credentials plus token."""
    if email is None:
        email = f"photographer_{uuid.uuid4().hex[:8]}@example.com"

    response = await client.post(
        "/api/auth/register",
        json={"email": email, "password": password, "name": name},
    )
    assert response.status_code == 201, f"Failed to create user: {response.text}"
    data = response.json()

    return {
        "id": data["user"]["id"],
        "email": email,
        "password": password,
        "name": name,
        "access_token": data["access_token"],
    }


@pytest_asyncio.fixture
async def test_user(async_client: AsyncClient) -> dict:
    """
    Create a test user and return user data with ID.

    Returns dict with id, email, password, name and access_token.
    """
    return await register_user(async_client)


@pytest.fixture
def auth_headers(test_user: dict) -> dict:
    """Provide authentication headers for the test user."""
    return {"Authorization": f"Bearer {test_user['access_token']}"}


@pytest_asyncio.fixture
async def second_test_user(async_client: AsyncClient) -> dict:
    """Create a second test user for authorization tests."""
    return await register_user(
        async_client,
        email=f"second_{uuid.uuid4().hex[:8]}@example.com",
        password="SecondPassword123!",
        name="Second Photographer",
    )


@pytest.fixture
def second_auth_headers(second_test_user: dict) -> dict:
    """Provide authentication headers for the second test user."""
    return {"Authorization": f"Bearer {second_test_user['access_token']}"}


# =============================================================================
# Project Fixtures
# =============================================================================


@pytest_asyncio.fixture
async def test_project(
    async_client: AsyncClient,
    auth_headers: dict,
) -> dict:
    """Create a test project and return project data."""
    response = await async_client.post(
        "/api/projects",
        json={"name": f"Test Project {uuid.uuid4().hex[:8]}"},
        headers=auth_headers,
    )
    assert response.status_code == 201, f"Failed to create project: {response.text}"
    return response.json()


async def upload_as_guest(
    client: AsyncClient,
    project_id: str,
    content: bytes,
    guest_name: str = "Guest",
    filename: str = "photo.png",
    content_type: str = "image/png",
):
    """Post one file to the guest upload endpoint and return the response."""
    return await client.post(
        "/api/upload",
        files={"media": (filename, content, content_type)},
        data={"projectId": project_id, "guestName": guest_name},
    )


# =============================================================================
# Sample File Fixtures
# =============================================================================


@pytest.fixture
def sample_png() -> bytes:
    """
    Create a minimal valid PNG image for testing.

    This is a 1x1 pixel red PNG image.
    """
    png_data = bytes([
        0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A,  # PNG signature
        0x00, 0x00, 0x00, 0x0D, 0x49, 0x48, 0x44, 0x52,  # IHDR chunk start
        0x00, 0x00, 0x00, 0x01, 0x00, 0x00, 0x00, 0x01,  # Width=1, Height=1
        0x08, 0x02, 0x00, 0x00, 0x00, 0x90, 0x77, 0x53,  # Bit depth, color type, etc.
        0xDE,                                            # IHDR CRC
        0x00, 0x00, 0x00, 0x0C, 0x49, 0x44, 0x41, 0x54,  # IDAT chunk start
        0x08, 0xD7, 0x63, 0xF8, 0xCF, 0xC0, 0x00, 0x00,  # Compressed data
        0x01, 0x01, 0x01, 0x00, 0x18, 0xDD, 0x8D, 0xB4,  # CRC
        0x00, 0x00, 0x00, 0x00, 0x49, 0x45, 0x4E, 0x44,  # IEND chunk
        0xAE, 0x42, 0x60, 0x82                           # IEND CRC
    ])
    return png_data


@pytest.fixture
def sample_video_mp4() -> bytes:
    """
    Create minimal MP4 file bytes for testing.

    Note: This is a minimal ftyp box that identifies as MP4.
    """
    mp4_data = bytes([
        0x00, 0x00, 0x00, 0x18,  # Box size (24 bytes)
        0x66, 0x74, 0x79, 0x70,  # 'ftyp' box type
        0x69, 0x73, 0x6F, 0x6D,  # 'isom' brand
        0x00, 0x00, 0x00, 0x00,  # Version
        0x69, 0x73, 0x6F, 0x6D,  # 'isom' compatible brand
        0x61, 0x76, 0x63, 0x31,  # 'avc1' compatible brand
    ])
    return mp4_data
