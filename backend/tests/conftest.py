"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database (tables rebuilt per test)
- MemoryStore for service-level tests
- Fake document store and email service wired in through dependency overrides
- FastAPI TestClient
"""
import os
import tempfile
from typing import Dict, Generator, List, Optional

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EMAIL_PROVIDER"] = "dev"
os.environ["DOCUMENT_STORE_BACKEND"] = "local"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="backoffice-test-")
os.environ["ALLOW_OVERPAYMENT"] = "true"
os.environ["CSV_IMPORT_MODE"] = "quoted"

import pytest
from fastapi.testclient import TestClient

from backoffice.api.v1.deps import get_document_store, get_email_service
from backoffice.db.database import Base, SessionLocal, engine
from backoffice.main import app
from backoffice.services.document_store import DocumentBackendError, DocumentStore
from backoffice.services.email_service import EmailDeliveryError
from backoffice.store.memory import MemoryStore
from backoffice.store.sql import SqlStore


# =============================================================================
# Fakes
# =============================================================================

class FakeDocumentStore(DocumentStore):
    """Keeps blobs in a dict and records every call."""

    def __init__(self):
        self.blobs: Dict[str, bytes] = {}
        self.removed: List[str] = []
        self.fail_upload = False
        self.fail_remove = False

    def upload(self, path: str, data: bytes, content_type: str = "application/pdf") -> str:
        if self.fail_upload:
            raise DocumentBackendError("upload refused")
        self.blobs[path] = data
        return path

    def remove(self, path: str) -> None:
        if self.fail_remove:
            raise DocumentBackendError("remove refused")
        self.blobs.pop(path, None)
        self.removed.append(path)

    def get_public_url(self, path: str) -> str:
        return f"https://files.test/{path}"


class FakeEmailService:
    """Stands in for EmailService; records sends, fails on demand."""

    def __init__(self):
        self.sent: List[Dict[str, Optional[str]]] = []
        self.fail = False

    def send_completion_notice(self, to, nature_of_work=None):
        if self.fail:
            raise EmailDeliveryError("provider down")
        self.sent.append({"to": to, "work": nature_of_work})
        return {"provider": "fake", "target": to}


# =============================================================================
# Service-level fixtures
# =============================================================================

@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def documents() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture
def emails() -> FakeEmailService:
    return FakeEmailService()


# =============================================================================
# Database fixtures
# =============================================================================

@pytest.fixture
def db() -> Generator:
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def sql_store(db) -> SqlStore:
    return SqlStore(db)


@pytest.fixture
def client(db, documents, emails) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_document_store] = lambda: documents
    app.dependency_overrides[get_email_service] = lambda: emails
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
