import os
import tempfile

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Point the app at SQLite and a scratch upload root before fileguard is imported
TEST_DB_URL = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("DATABASE_URL", TEST_DB_URL)
os.environ.setdefault("FILE_STORAGE_PATH", tempfile.mkdtemp(prefix="fileguard-uploads-"))
os.environ.setdefault("SEED_DEFAULT_EXTENSIONS", "false")

from fileguard.database import get_db
from fileguard.models import Base
from fileguard.routes.files import get_file_storage
from fileguard.services.extension_policy import ExtensionPolicyService
from fileguard.services.file_storage import FileStorageService
from fileguard.services.file_upload import FileUploadService


@pytest_asyncio.fixture
async def engine():
    # In-memory SQLite needs StaticPool to keep the same DB across connections
    eng = create_async_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path):
    return FileStorageService(tmp_path / "uploads")


@pytest.fixture
def policy(db_session):
    return ExtensionPolicyService(db_session)


@pytest.fixture
def upload_service(db_session, storage, policy):
    return FileUploadService(db_session, storage, policy)


@pytest_asyncio.fixture
async def client(db_session, storage):
    from fileguard.main import app

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_file_storage] = lambda: storage
    # ASGITransport does not run the lifespan, so no Postgres connection is attempted
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
