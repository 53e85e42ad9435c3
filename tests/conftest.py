"""Test fixtures for the SnapLink application."""

import os
import tempfile

# Settings are read at import time, so the environment must be set first
os.environ["ENVIRONMENT"] = "testing"
os.environ["DEBUG"] = "false"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "true"
os.environ["BASE_URL"] = "http://sn.ap"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id"
os.environ["LOG_DIR"] = os.path.join(tempfile.gettempdir(), "snaplink-test-logs")

from typing import AsyncGenerator, Dict
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from snaplink.api.dependencies import get_identity_verifier, get_rate_limiter
from snaplink.core.identity import IdentityClaims
from snaplink.core.rate_limit import CreationRateLimiter, MemoryBackend
from snaplink.core.redis import redis_manager
from snaplink.db.session import get_db
from snaplink.main import app as main_app
from snaplink.services.exceptions import InvalidTokenError
# Import models to ensure they're registered with SQLModel metadata
from snaplink.models import ShortLink, User, Visit  # noqa: F401


# Test database URL - using SQLite in-memory
TEST_SQLALCHEMY_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def test_engine():
    """Create a fresh in-memory SQLite engine for each test."""
    engine = create_async_engine(
        TEST_SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session bound to the test engine."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )

    async with async_session() as session:
        yield session


@pytest.fixture
def override_get_db(test_db):
    """Override the get_db dependency for testing."""
    async def _override_get_db():
        yield test_db

    return _override_get_db


class FakeIdentityVerifier:
    """Identity verifier accepting a fixed set of tokens."""

    def __init__(self):
        self.tokens: Dict[str, IdentityClaims] = {}

    def register(self, token: str, subject: str, email: str, name: str = "Test User") -> IdentityClaims:
        claims = IdentityClaims(subject=subject, email=email, name=name, picture=None)
        self.tokens[token] = claims
        return claims

    async def verify(self, token: str) -> IdentityClaims:
        if token not in self.tokens:
            raise InvalidTokenError("Invalid identity token")
        return self.tokens[token]


@pytest.fixture
def identity_verifier() -> FakeIdentityVerifier:
    verifier = FakeIdentityVerifier()
    verifier.register("google-token-alice", subject="google-alice", email="alice@example.com", name="Alice")
    verifier.register("google-token-bob", subject="google-bob", email="bob@example.com", name="Bob")
    return verifier


@pytest.fixture
def rate_limiter() -> CreationRateLimiter:
    """Memory-backed limiter with the production limits."""
    return CreationRateLimiter(MemoryBackend())


@pytest.fixture
def test_app(override_get_db, identity_verifier, rate_limiter):
    """FastAPI app with database, identity and rate limit dependencies overridden."""
    app = main_app
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_verifier] = lambda: identity_verifier
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Return an HTTP client talking to the app in-process."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture
def offline_redis(monkeypatch):
    """Make the shared Redis manager report itself unreachable."""
    monkeypatch.setattr(redis_manager, "ping", AsyncMock(return_value=False))
    return redis_manager


class MockPipeline:
    """Queues commands and applies them on execute, like a MULTI block."""

    def __init__(self, redis):
        self.redis = redis
        self.commands = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.commands = []

    def incr(self, key):
        self.commands.append(("incr", key))
        return self

    def expire(self, key, seconds):
        self.commands.append(("expire", key, seconds))
        return self

    async def execute(self):
        if self.redis.fail:
            raise self.redis.fail
        results = []
        for command in self.commands:
            if command[0] == "incr":
                self.redis.data[command[1]] = self.redis.data.get(command[1], 0) + 1
                results.append(self.redis.data[command[1]])
            else:
                self.redis.expiry[command[1]] = command[2]
                results.append(True)
        self.commands = []
        return results


class MockRedis:
    """Minimal async Redis double for the rate limit counters."""

    def __init__(self):
        self.data = {}
        self.expiry = {}
        self.fail = None

    def pipeline(self, transaction=True):
        return MockPipeline(self)

    async def ping(self):
        if self.fail:
            raise self.fail
        return True


class MockRedisManager:
    def __init__(self, client: MockRedis):
        self.client = client

    async def get_client(self):
        return self.client

    async def ping(self):
        return self.client.fail is None


@pytest.fixture
def mock_redis():
    """Mock Redis for testing."""
    return MockRedis()


@pytest.fixture
def mock_redis_manager(mock_redis):
    return MockRedisManager(mock_redis)
