import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from storefront.config import Settings
from storefront.database import StoreHandle
from storefront.main import create_app


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


class RecordingSleep:
    """Stand-in for asyncio.sleep that records requested delays without waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture(scope="function")
def engine():
    """Fresh in-memory database for each test."""
    test_engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield test_engine
    test_engine.dispose()


@pytest.fixture(scope="function")
def settings():
    """Settings isolated from the environment's database configuration."""
    return Settings(
        _env_file=None,
        DATABASE_URL=None,
        PLATFORM="test",
        ENVIRONMENT="test",
        PORT=3000,
        DB_INIT_TIMEOUT=5.0,
        DB_INIT_BACKOFF=0.0,
    )


@pytest.fixture(scope="function")
def recording_sleep():
    return RecordingSleep()


@pytest.fixture(scope="function")
def client(settings, engine):
    """Test client whose store is initialized and seeded at startup."""
    app = create_app(settings, store=StoreHandle(engine))

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(scope="function")
def degraded_client(settings):
    """Test client started without any database configured."""
    app = create_app(settings)

    with TestClient(app) as test_client:
        yield test_client
