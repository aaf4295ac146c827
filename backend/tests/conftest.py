"""Pytest configuration and fixtures."""

import copy
import logging
import os
import secrets
import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

# Generate a unique test secret for this test run to prevent token forgery
_TEST_JWT_SECRET = f"test-only-{secrets.token_urlsafe(32)}"

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("JWT_SECRET_KEY", _TEST_JWT_SECRET)

from fastapi.testclient import TestClient  # noqa: E402
from memorylane.database import get_db  # noqa: E402
from memorylane.main import app  # noqa: E402
from memorylane.rate_limit import limiter  # noqa: E402
from memorylane.storage import UploadTarget, get_blob_store  # noqa: E402

ALICE = "usr_TEST_ONLY_alice"
BOB = "usr_TEST_ONLY_bob"


class FakeQuery:
    """Just enough of the PostgREST query builder for the record store."""

    def __init__(self, store: "FakeSupabase", table: str):
        self.store = store
        self.table = table
        self.action = "select"
        self.payload = None
        self.filters = []
        self.ordering = None
        self.max_rows = None

    def select(self, columns="*"):
        self.action = "select"
        return self

    def insert(self, data):
        self.action = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.action = "update"
        self.payload = data
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def gte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] >= value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda row: row.get(column) is not None and row[column] <= value)
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    def _matches(self):
        rows = self.store.tables.setdefault(self.table, [])
        return [row for row in rows if all(f(row) for f in self.filters)]

    def execute(self):
        self.store.calls.append((self.table, self.action))
        rows = self.store.tables.setdefault(self.table, [])
        if self.action == "insert":
            row = copy.deepcopy(self.payload)
            row.setdefault("id", str(uuid.uuid4()))
            row.setdefault("created_at", self.store.next_timestamp())
            rows.append(row)
            return SimpleNamespace(data=[copy.deepcopy(row)])
        matched = self._matches()
        if self.action == "update":
            for row in matched:
                row.update(copy.deepcopy(self.payload))
        elif self.action == "delete":
            self.store.tables[self.table] = [row for row in rows if row not in matched]
        else:
            if self.ordering:
                column, desc = self.ordering
                present = [r for r in matched if r.get(column) is not None]
                missing = [r for r in matched if r.get(column) is None]
                present.sort(key=lambda r: r[column], reverse=desc)
                matched = present + missing
            if self.max_rows is not None:
                matched = matched[: self.max_rows]
        return SimpleNamespace(data=copy.deepcopy(matched))


class FakeSupabase:
    """In-memory stand-in for the Supabase table client."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.calls: list[tuple[str, str]] = []
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def next_timestamp(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


class FakeBlobStore:
    """Blob store keeping uploaded keys in a set."""

    def __init__(self):
        self.objects: set[str] = set()
        self.resolved: list[str] = []

    def put(self, key: str) -> str:
        self.objects.add(key)
        return key

    def create_upload_target(self, owner_id: str) -> UploadTarget:
        key = f"{owner_id}/{uuid.uuid4().hex}"
        return UploadTarget(url=f"https://blobs.test/upload/{key}?token=abc", key=key, expires_in=3600)

    def resolve(self, key: str) -> str | None:
        self.resolved.append(key)
        if key not in self.objects:
            return None
        return f"https://blobs.test/object/{key}?token=signed"


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Keep logger level/handler changes made by one test from leaking into others."""
    logger = logging.getLogger("memorylane")
    level, handlers = logger.level, list(logger.handlers)
    yield
    logger.setLevel(level)
    logger.handlers[:] = handlers


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def blobs():
    return FakeBlobStore()


@pytest.fixture
def client(db, blobs):
    """Create a test client wired to the in-memory store and blob store."""
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_blob_store] = lambda: blobs
    limiter.reset()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        limiter.reset()


def make_headers(user_id: str) -> dict[str, str]:
    from memorylane.auth import create_access_token
    from memorylane.config import get_settings

    token = create_access_token(user_id, get_settings())
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice_headers():
    return make_headers(ALICE)


@pytest.fixture
def bob_headers():
    return make_headers(BOB)


def memory_fields(**overrides) -> dict:
    """A valid event memory payload."""
    fields = {
        "title": "Beach day",
        "content": "Swam until sunset.",
        "type": "event",
        "tags": ["summer"],
        "importance": 5,
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def make_memory():
    return memory_fields
