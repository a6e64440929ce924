"""
Centralized Test Configuration.
"""

import os
import tempfile

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession
from sqlalchemy.pool import NullPool

from backend.app.main import app
from backend.app.db.session import build_engine, get_db, Base
from backend.app.core.jwt import create_access_token
from backend.app.core.security import get_password_hash
from backend.app.models.user import User
from backend.app.models.enums import UserRole
from backend.app.services.audit import AuditRecorder, get_audit_recorder
import backend.app.core.redis_client as redis_client_module

# Setup Test Database
# A file rather than :memory: so the detached audit writer gets its own
# connection instead of sharing the request session's transaction.
TEST_DATABASE_PATH = os.path.join(tempfile.gettempdir(), "building_manager_test.db")
TEST_DATABASE_URL = f"sqlite+aiosqlite:///{TEST_DATABASE_PATH}"

if os.path.exists(TEST_DATABASE_PATH):
    os.remove(TEST_DATABASE_PATH)

# Foreign keys are switched on by build_engine for SQLite URLs
engine = build_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=NullPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False

    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        self.store[key] = value
        return True

    async def exists(self, key):
        if self._closed:
            return 0
        return 1 if key in self.store else 0

    async def flushdb(self):
        if not self._closed:
            self.store = {}

# Redis Fixture (Session Scope)
@pytest.fixture(scope="session")
def redis_client_session():
    return MockRedis()

@pytest.fixture(scope="session", autouse=True)
def apply_overrides(redis_client_session):
    """Apply overrides once for the session.
    Global override is safer here than per-test override to avoid app state flux.
    """

    # Patch the global redis client used for session revocation
    original_client = redis_client_module.redis_client
    redis_client_module.redis_client = redis_client_session

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield

    # Restore and clear
    app.dependency_overrides = {}
    redis_client_module.redis_client = original_client

@pytest.fixture(autouse=True)
async def setup_database(redis_client_session):
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await redis_client_session.flushdb()

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

@pytest.fixture(autouse=True)
async def recorder(setup_database):
    """Audit recorder bound to the test database.

    Audit writes are detached from the request; tests call
    ``await recorder.drain()`` before reading the trail.
    """
    test_recorder = AuditRecorder(TestingSessionLocal)
    app.dependency_overrides[get_audit_recorder] = lambda: test_recorder
    yield test_recorder
    await test_recorder.drain()
    app.dependency_overrides.pop(get_audit_recorder, None)

@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


def auth_headers(user: User) -> dict:
    """Bearer header carrying the session record of ``user``."""
    token = create_access_token(data={"sub": user.id, "email": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


async def create_user(db_session, email: str, role: UserRole, password: str = "password123") -> User:
    user = User(email=email, password_hash=get_password_hash(password), role=role.value)
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user

@pytest.fixture
async def admin_user(db_session):
    return await create_user(db_session, "admin@parkview-towers.com", UserRole.ADMIN)

@pytest.fixture
async def resident_user(db_session):
    return await create_user(db_session, "resident@parkview-towers.com", UserRole.RESIDENT)

@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)

@pytest.fixture
def resident_headers(resident_user):
    return auth_headers(resident_user)

@pytest.fixture
def headers_for():
    """Build auth headers for an arbitrary user row."""
    return auth_headers

@pytest.fixture
def make_user(db_session):
    async def factory(email: str, role: UserRole = UserRole.RESIDENT, password: str = "password123") -> User:
        return await create_user(db_session, email, role, password)
    return factory
