"""
Shared test fixtures.
"""

import os
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings are read at import time
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("LEGACY_BACKEND", "retired")

import json
import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock
from datetime import datetime
from typing import Callable, Optional

from tests.factories import MockAPIError


# ===================
# MOCK SUPABASE CLIENT
# ===================

class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """Mock Supabase query builder with chainable methods."""

    def __init__(self, client: "MockSupabaseClient", table: str, data: list = None, count: int = None):
        self._client = client
        self._table = table
        self._data = data or []
        self._count = count
        self._op = "select"
        self._payload = None
        self.filters = []
        self._limit = None

    def select(self, *args, **kwargs):
        return self

    def insert(self, data):
        self._op = "insert"
        self._payload = data
        return self

    def delete(self):
        self._op = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(("eq", column, value))
        return self

    def neq(self, column, value):
        self.filters.append(("neq", column, value))
        return self

    def order(self, column, **kwargs):
        return self

    def range(self, start, end):
        return self

    def limit(self, count):
        self._limit = count
        return self

    def execute(self) -> MockSupabaseResponse:
        self._client.executed.append((self._table, self._op))

        error = self._client._errors.get((self._table, self._op))
        if error is None:
            error = self._client._errors.get((self._table, None))
        if error is not None:
            raise error

        if self._op == "insert":
            rule = self._client._insert_failures.get(self._table)
            if rule and rule[0](self._payload):
                raise rule[1]
            self._client.inserted.setdefault(self._table, []).append(self._payload)
            row = {
                **self._payload,
                "id": f"test-uuid-{len(self._client.inserted[self._table])}",
                "created_at": datetime.utcnow().isoformat() + "Z",
            }
            return MockSupabaseResponse(data=[row])

        if self._op == "delete":
            self._client.deleted.append((self._table, self.filters))
            return MockSupabaseResponse(data=[])

        data = self._data if self._limit is None else self._data[:self._limit]
        return MockSupabaseResponse(data=data, count=self._count if self._count is not None else len(self._data))


class MockSupabaseTable:
    """Mock Supabase table with configurable responses."""

    def __init__(self, client: "MockSupabaseClient", name: str, data: list = None, count: int = None):
        self._client = client
        self._name = name
        self._data = data or []
        self._count = count

    def _query(self) -> MockSupabaseQuery:
        return MockSupabaseQuery(self._client, self._name, self._data.copy(), self._count)

    def select(self, *args, **kwargs):
        return self._query()

    def insert(self, data):
        return self._query().insert(data)

    def delete(self):
        return self._query().delete()


class MockRpc:
    def __init__(self, client: "MockSupabaseClient", name: str):
        self._client = client
        self._name = name

    def execute(self) -> MockSupabaseResponse:
        error = self._client._rpc_errors.get(self._name)
        if error is not None:
            raise error
        return MockSupabaseResponse(data=self._client._rpc_data.get(self._name, []))


class MockStorageBucket:
    def __init__(self, storage: "MockStorage", name: str):
        self._storage = storage
        self._name = name

    def list(self, path=None, options=None):
        """
        One level of the bucket, paged like the SDK (100 entries by default).

        Folders come back as placeholders with no id.
        """
        error = self._storage.list_errors.get(self._name)
        if error is not None:
            raise error

        options = options or {}
        limit = options.get("limit", 100)
        offset = options.get("offset", 0)
        self._storage.list_calls.append((self._name, path, limit, offset))

        prefix = f"{path}/" if path else ""
        entries = []
        folders = set()
        for i, file_path in enumerate(self._storage.buckets.get(self._name, [])):
            if not file_path.startswith(prefix):
                continue
            rest = file_path[len(prefix):]
            if "/" in rest:
                folder = rest.split("/", 1)[0]
                if folder not in folders:
                    folders.add(folder)
                    entries.append({"name": folder, "id": None})
            else:
                entries.append({"name": rest, "id": f"file-{i}"})

        return entries[offset:offset + limit]

    def remove(self, paths):
        error = self._storage.remove_errors.get(self._name)
        if error is not None:
            raise error
        self._storage.removed.append((self._name, list(paths)))
        return [{"name": p} for p in paths]


class MockStorage:
    """Mock Supabase storage client."""

    def __init__(self):
        self.buckets: dict[str, list[str]] = {}
        self.list_errors: dict[str, Exception] = {}
        self.remove_errors: dict[str, Exception] = {}
        self.list_buckets_error: Optional[Exception] = None
        self.removed: list[tuple[str, list[str]]] = []
        self.list_calls: list[tuple] = []

    def list_buckets(self):
        if self.list_buckets_error is not None:
            raise self.list_buckets_error
        return [SimpleNamespace(name=name, id=name) for name in self.buckets]

    def from_(self, name: str) -> MockStorageBucket:
        return MockStorageBucket(self, name)


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables = {}
        self._errors: dict[tuple, Exception] = {}
        self._insert_failures: dict[str, tuple[Callable[[dict], bool], Exception]] = {}
        self._rpc_data: dict[str, list] = {}
        self._rpc_errors: dict[str, Exception] = {}
        self.storage = MockStorage()
        self.inserted: dict[str, list[dict]] = {}
        self.deleted: list[tuple[str, list]] = []
        self.executed: list[tuple[str, str]] = []

    def set_table_data(self, table_name: str, data: list, count: int = None):
        """Configure mock data for a table."""
        self._tables[table_name] = {"data": data, "count": count}

    def set_error(self, table_name: str, error: Exception, op: Optional[str] = None):
        """Raise `error` for every (or one kind of) query on a table."""
        self._errors[(table_name, op)] = error

    def fail_inserts(self, table_name: str, predicate: Callable[[dict], bool], error: Exception):
        """Raise `error` for inserted rows matching `predicate`."""
        self._insert_failures[table_name] = (predicate, error)

    def set_rpc_data(self, name: str, data: list):
        self._rpc_data[name] = data

    def set_rpc_error(self, name: str, error: Exception):
        self._rpc_errors[name] = error

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        config = self._tables.get(name, {"data": [], "count": None})
        return MockSupabaseTable(self, name, config["data"], config["count"])

    def rpc(self, name: str, params: dict = None) -> MockRpc:
        return MockRpc(self, name)


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("products", [
                {"id": "1", "sku": "TEST", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def destination(mock_supabase):
    """SupabaseBackend over the mock client."""
    from integrations.supabase_backend import SupabaseBackend

    return SupabaseBackend(mock_supabase, probe_table="products")


@pytest.fixture
def mock_firestore() -> MagicMock:
    """MagicMock standing in for a Firestore client."""
    return MagicMock(name="firestore")


@pytest.fixture
def write_cache(tmp_path):
    """
    Write a local cache export and return a LocalCache over it.

    Usage:
        cache = write_cache({"products": [...]})
    """
    from integrations.local_cache import LocalCache

    def _write(content) -> LocalCache:
        path = tmp_path / "local_cache.json"
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return LocalCache(path)

    return _write


@pytest.fixture
def empty_cache(tmp_path):
    """LocalCache pointing at a file that does not exist."""
    from integrations.local_cache import LocalCache

    return LocalCache(tmp_path / "missing.json")


@pytest.fixture
def sample_cache_products() -> list:
    """Products as the client-side cache stores them (camelCase)."""
    return [
        {
            "id": "1",
            "sku": "SKU-123-BLK",
            "name": "Men's Casual Shoes",
            "category": "men_shoes",
            "pairsPerBox": 12,
            "sizes": ["40", "41", "42"],
            "colors": ["Black"],
        },
        {
            "id": "2",
            "sku": "SKU-456-RED",
            "name": "Women's Heels",
            "category": "women_shoes",
            "pairsPerBox": 10,
            "sizes": "36,37,38",
            "colors": "Red",
        },
    ]


@pytest.fixture
def sample_cache_deliveries() -> list:
    return [
        {
            "id": 1001,
            "date": "2025-03-01T10:00:00.000Z",
            "sku": "SKU-123-BLK",
            "boxCount": 5,
            "pairsPerBox": 12,
            "totalPairs": 60,
        },
    ]


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def admin_backends(mock_supabase, empty_cache):
    """Backends container wired to mocks (admin client included)."""
    from config.database import Backends
    from integrations.supabase_backend import SupabaseBackend
    from integrations.retired_backend import RetiredBackend

    backend = SupabaseBackend(mock_supabase, probe_table="products")
    return Backends(
        destination=backend,
        admin=backend,
        legacy=RetiredBackend(),
        local_cache=empty_cache,
    )


@pytest.fixture
def test_client_with_mock_db(admin_backends):
    """
    Create FastAPI test client with mocked backends.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("products", [...])
            response = test_client_with_mock_db.get("/api/admin/status")
    """
    from fastapi.testclient import TestClient
    from main import app
    from routes.admin import get_backends

    app.dependency_overrides[get_backends] = lambda: admin_backends
    app.state.backends = admin_backends
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        app.state.backends = None
