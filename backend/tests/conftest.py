"""Pytest configuration and fixtures."""
import os
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test settings BEFORE importing app so the scheduler and seed stay off
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["DEBUG"] = "False"
os.environ["WAREHOUSE_PROVIDER"] = "mock"
os.environ["SYNC_INTERVAL_MINUTES"] = "0"
os.environ["SEED_DEMO_DATA"] = "False"

from app.main import app
from app.api.deps import get_warehouse
from app.db.base import Base, get_db
from app.services.adapters.base import WarehouseAdapter, WarehouseError

# Use SQLite for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class StubWarehouseAdapter(WarehouseAdapter):
    """Warehouse adapter serving canned records keyed by client folder id.

    A record that is an exception instance is raised instead of returned.
    Unknown folders get an empty record.
    """

    def __init__(self, records=None, connected=True):
        self.records = dict(records or {})
        self.connected = connected
        self.calls = []

    def test_connection(self) -> bool:
        return self.connected

    async def fetch_external_record(self, folder_id, list_id):
        self.calls.append((folder_id, list_id))
        record = self.records.get(folder_id, {})
        if isinstance(record, Exception):
            raise record
        return self.normalize(record)

    def normalize(self, raw_data):
        return dict(raw_data)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def warehouse():
    """Stub warehouse shared by the app and the test."""
    return StubWarehouseAdapter()


@pytest.fixture(scope="function")
def client(db_session, warehouse):
    """Create a test client with database and warehouse overrides."""
    app.dependency_overrides[get_db] = lambda: db_session
    app.dependency_overrides[get_warehouse] = lambda: warehouse
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def warehouse_error():
    """A warehouse failure to plant in the stub."""
    return WarehouseError("Warehouse returned 503 for folder")
