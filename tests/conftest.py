# Imports for testing tools
import pytest
from fastapi.testclient import TestClient

# Import your application code
from travel_booking.main import app
from travel_booking.config import settings
from travel_booking.identifiers import IdGenerator
from travel_booking.orchestrator import BookingOrchestrator
from travel_booking.repositories import BookingRepository, TransactionRepository
from travel_booking.storage import JsonDocumentStore, get_store
from travel_booking.uploads import UploadStorage, get_upload_storage


# --- Storage Fixtures ---
@pytest.fixture(scope="function", autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Points the app's data and upload directories at a per-test temp dir."""
    monkeypatch.setattr(settings, "DATA_DIR", tmp_path / "data")
    monkeypatch.setattr(settings, "UPLOAD_DIR", tmp_path / "uploads")


@pytest.fixture(scope="function")
def store(tmp_path):
    """Provides an empty document store for each test."""
    return JsonDocumentStore(tmp_path / "data", settings.collection_files())


@pytest.fixture(scope="function")
def upload_storage(tmp_path):
    return UploadStorage(tmp_path / "uploads", ids=IdGenerator())


@pytest.fixture
def bookings(store):
    return BookingRepository(store)


@pytest.fixture
def transactions(store):
    return TransactionRepository(store)


@pytest.fixture
def orchestrator(bookings, transactions):
    return BookingOrchestrator(bookings, transactions, ids=IdGenerator())


# --- API Test Client Fixture ---
@pytest.fixture(scope="function")
def client(store, upload_storage):
    """Provides a TestClient wired to the temp store and upload directory."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_upload_storage] = lambda: upload_storage

    # Create and yield the TestClient
    with TestClient(app) as c:
        yield c

    # Clean up overrides
    app.dependency_overrides.clear()
