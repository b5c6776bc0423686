"""Test configuration and fixtures for Glimpse.

This module provides isolated test environments:
- Document store per test (parametrized over memory and SQLite)
- Local object storage in a temporary directory
- Identity provider and session over the same store
- A TestClient for the web app with in-memory backends
"""
import os
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Ensure glimpse is importable
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment BEFORE importing glimpse modules
_TEST_ROOT = Path(tempfile.mkdtemp(prefix="glimpse-tests-"))
os.environ["GLIMPSE_DOCUMENT_BACKEND"] = "memory"
os.environ["GLIMPSE_DATABASE_PATH"] = str(_TEST_ROOT / "glimpse.db")
os.environ["STORAGE_BACKEND"] = "local"
os.environ["STORAGE_BASE_PATH"] = str(_TEST_ROOT / "media")
os.environ["STORAGE_PUBLIC_URL"] = "/media"

from glimpse.application import SessionStore, create_backend  # noqa: E402
from glimpse.infrastructure.auth import LocalAuthProvider  # noqa: E402
from glimpse.infrastructure.documents import (  # noqa: E402
    MemoryDocumentStore,
    SqliteDocumentStore,
)
from glimpse.infrastructure.storage import LocalStorage, StorageConfig  # noqa: E402
from glimpse.models import AlbumCreate, PhotoCreate  # noqa: E402

# Smallest cost bcrypt accepts; keeps auth tests fast
TEST_BCRYPT_ROUNDS = 4

# Minimal JPEG header + padding; storage never decodes images
JPEG_BYTES = b"\xff\xd8\xff\xe0\x00\x10JFIF\x00\x01" + b"\x00" * 64 + b"\xff\xd9"


@pytest_asyncio.fixture(params=["memory", "sqlite"])
async def store(request, tmp_path: Path):
    """Opened document store, once per backend."""
    if request.param == "memory":
        document_store = MemoryDocumentStore()
    else:
        document_store = SqliteDocumentStore(tmp_path / "documents.db")

    await document_store.open()
    yield document_store
    await document_store.close()


@pytest_asyncio.fixture
async def memory_store():
    document_store = MemoryDocumentStore()
    await document_store.open()
    yield document_store
    await document_store.close()


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    """Local object storage rooted in a temp directory."""
    return LocalStorage(StorageConfig(backend="local", base_path=tmp_path / "media"))


@pytest.fixture
def backend(store, storage):
    return create_backend(store, storage)


@pytest.fixture
def image_file(tmp_path: Path) -> Path:
    """A small image file on local disk."""
    path = tmp_path / "beach.jpg"
    path.write_bytes(JPEG_BYTES)
    return path


@pytest.fixture
def auth_provider(store) -> LocalAuthProvider:
    return LocalAuthProvider(store, bcrypt_rounds=TEST_BCRYPT_ROUNDS)


@pytest_asyncio.fixture
async def session(auth_provider, backend):
    """Started session store."""
    session_store = SessionStore(auth_provider, backend.users)
    await session_store.start()
    yield session_store
    await session_store.stop()


@pytest_asyncio.fixture
async def signed_in(session):
    """Session with a registered, signed-in user 'alice'."""
    await session.register("alice@example.com", "secret123", "alice")
    return session


async def create_album_with_photos(
    backend,
    user_id: str,
    image_file: Path,
    title: str = "Trip",
    photo_count: int = 1
) -> tuple[str, list[str]]:
    """Create an album and upload ``photo_count`` copies of ``image_file``.

    Returns:
        (album_id, photo_ids)
    """
    album_id = await backend.albums.create_album(
        AlbumCreate(title=title, user_id=user_id, photo_count=photo_count)
    )
    photo_ids = []
    for index in range(photo_count):
        url = await backend.photos.upload_photo(image_file, f"{album_id}_{index}_0")
        photo_ids.append(await backend.photos.add_photo(PhotoCreate(
            album_id=album_id, user_id=user_id, image_url=url
        )))
    return album_id, photo_ids


# =============================================================================
# Web app
# =============================================================================

@pytest.fixture(scope="function")
def client(tmp_path: Path) -> Generator[TestClient, None, None]:
    """Test client over a fresh in-memory app.

    Usage:
        def test_something(client):
            response = client.get("/login")
            assert response.status_code == 200
    """
    from glimpse.main import create_app

    app = create_app(
        store=MemoryDocumentStore(),
        storage=LocalStorage(StorageConfig(backend="local", base_path=tmp_path / "media")),
        auth_factory=lambda s: LocalAuthProvider(s, bcrypt_rounds=TEST_BCRYPT_ROUNDS),
        setup_logging=False,
    )

    with TestClient(app) as test_client:
        yield test_client


def register(
    client: TestClient,
    username: str = "alice",
    email: str = "alice@example.com",
    password: str = "secret123"
):
    """Register (and thereby sign in) through the web form."""
    return client.post(
        "/register",
        data={"username": username, "email": email, "password": password},
        follow_redirects=False
    )


@pytest.fixture(scope="function")
def authenticated_client(client: TestClient) -> TestClient:
    """Client whose app has 'alice' signed in."""
    response = register(client)
    assert response.status_code == 303
    return client
