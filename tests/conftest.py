"""
Shared test fixtures.

Mock Supabase client (tables and storage), sessions and sample data.
"""

import os
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings require these at import time
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")

import pytest
from unittest.mock import MagicMock, patch
from datetime import datetime
from typing import Generator

from services.session_service import StaticSession

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

    def __init__(self, data: list = None, count: int = None, error: Exception = None):
        self._data = data or []
        self._count = count
        self._error = error
        self._is_single = False

    def select(self, *args, **kwargs):
        return self

    def insert(self, data):
        # Simulate insert - add id and timestamps
        if isinstance(data, dict):
            data = [data]
        rows = []
        for i, item in enumerate(data):
            row = dict(item)
            row.setdefault("id", f"test-uuid-{i + 1}")
            row["created_at"] = datetime.utcnow().isoformat() + "Z"
            row["updated_at"] = datetime.utcnow().isoformat() + "Z"
            rows.append(row)
        self._data = rows
        return self

    def eq(self, column, value):
        return self

    def single(self):
        self._is_single = True
        return self

    def order(self, column, **kwargs):
        return self

    def limit(self, count):
        return self

    def execute(self) -> MockSupabaseResponse:
        if self._error is not None:
            raise self._error
        if self._is_single:
            # Return first item or empty for single()
            data = self._data[0] if self._data else None
            return MockSupabaseResponse(
                data=data,
                count=1 if data else 0
            )
        return MockSupabaseResponse(
            data=self._data,
            count=self._count if self._count is not None else len(self._data)
        )


class MockSupabaseTable:
    """Mock Supabase table with configurable responses."""

    def __init__(self, name: str, client: "MockSupabaseClient"):
        config = client._tables.get(name, {"data": [], "count": None, "error": None})
        self._name = name
        self._client = client
        self._data = config["data"]
        self._count = config["count"]
        self._error = config["error"]

    def select(self, *args, **kwargs):
        return MockSupabaseQuery(self._data.copy(), self._count, self._error)

    def insert(self, data):
        self._client.inserts.setdefault(self._name, []).append(data)
        query = MockSupabaseQuery(self._data.copy(), self._count, self._error)
        return query.insert(data)


class MockStorageBucket:
    """Mock Supabase Storage bucket recording uploads."""

    def __init__(self, name: str, storage: "MockStorage"):
        self._name = name
        self._storage = storage

    def upload(self, path, file, file_options=None):
        if self._storage.error is not None:
            raise self._storage.error
        self._storage.uploads.append({
            "bucket": self._name,
            "path": path,
            "content": file,
            "file_options": file_options or {},
        })
        return {"Key": f"{self._name}/{path}"}


class MockStorage:
    """Mock Supabase Storage."""

    def __init__(self):
        self.uploads: list[dict] = []
        self.error: Exception = None

    def from_(self, bucket: str) -> MockStorageBucket:
        return MockStorageBucket(bucket, self)


class MockSupabaseClient:
    """Mock Supabase client."""

    def __init__(self):
        self._tables = {}
        self.inserts: dict[str, list] = {}
        self.storage = MockStorage()

    def set_table_data(self, table_name: str, data: list, count: int = None):
        """Configure mock data for a table."""
        self._tables[table_name] = {"data": data, "count": count, "error": None}

    def set_table_error(self, table_name: str, error: Exception):
        """Make every query on a table raise."""
        self._tables[table_name] = {"data": [], "count": None, "error": error}

    def table(self, name: str) -> MockSupabaseTable:
        """Get mock table."""
        return MockSupabaseTable(name, self)


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Create a mock Supabase client.

    Usage:
        def test_something(mock_supabase):
            mock_supabase.set_table_data("categories", [
                {"id": "...", "name": "Eletrônicos", ...}
            ])
    """
    return MockSupabaseClient()


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """
    Patch the database client with mock.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("products", [...])
            # Now any code using get_supabase_client() gets the mock
    """
    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("services.product_service.get_supabase_client", return_value=mock_supabase):
            with patch("services.category_service.get_supabase_client", return_value=mock_supabase):
                yield mock_supabase


@pytest.fixture
def admin_session() -> StaticSession:
    return StaticSession(is_admin=True)


@pytest.fixture
def anonymous_session() -> StaticSession:
    return StaticSession(is_admin=False)


@pytest.fixture
def mock_http_response():
    """
    Build a fake requests.Response.

    Usage:
        response = mock_http_response(200, json_data={"photos": []})
    """
    def _build(status_code: int = 200, json_data=None, content: bytes = b"", headers: dict = None):
        response = MagicMock()
        response.status_code = status_code
        response.ok = 200 <= status_code < 300
        response.json.return_value = json_data if json_data is not None else {}
        response.content = content
        response.headers = headers or {}
        return response

    return _build


@pytest.fixture
def sample_categories_data() -> list:
    """Sample categories rows."""
    return [
        {
            "id": "11111111-1111-4111-8111-111111111111",
            "name": "Eletrônicos",
            "created_at": "2025-01-10T10:00:00Z",
            "updated_at": None
        },
        {
            "id": "22222222-2222-4222-8222-222222222222",
            "name": "Móveis",
            "created_at": "2025-01-11T10:00:00Z",
            "updated_at": None
        },
        {
            "id": "33333333-3333-4333-8333-333333333333",
            "name": "Roupas e Calçados",
            "created_at": "2025-01-12T10:00:00Z",
            "updated_at": None
        }
    ]


@pytest.fixture
def sample_pexels_payload() -> dict:
    """Pexels search response with two photos, one missing optional fields."""
    return {
        "page": 1,
        "per_page": 3,
        "photos": [
            {
                "id": 1001,
                "alt": "Impressora em uma mesa",
                "photographer": "Ana Souza",
                "src": {
                    "medium": "https://images.pexels.com/photos/1001/medium.jpeg",
                    "large": "https://images.pexels.com/photos/1001/large.jpeg"
                }
            },
            {
                "id": 1002,
                "src": {
                    "medium": "https://images.pexels.com/photos/1002/medium.jpeg"
                }
            }
        ]
    }


@pytest.fixture
def sample_import_csv() -> str:
    """Import CSV with two valid rows and one invalid row."""
    return (
        "nome,categoria,valor,tipo\n"
        "Impressora,Eletrônicos,150.00,monetário\n"
        "Cadeira de escritório,Móveis,80.00,físico\n"
        ",Roupas,abc,outro\n"
    )


# ===================
# API TEST CLIENT
# ===================

@pytest.fixture
def test_client_with_mock_db(mock_supabase):
    """
    Create FastAPI test client with mocked database.

    Usage:
        def test_endpoint(test_client_with_mock_db, mock_supabase):
            mock_supabase.set_table_data("categories", [...])
            response = test_client_with_mock_db.get("/api/categories")
    """
    from fastapi.testclient import TestClient
    from main import app

    with patch("config.database.get_supabase_client", return_value=mock_supabase):
        with patch("main.check_connection", return_value={"status": "healthy", "products_count": 0, "categories_count": 0}):
            with patch("services.category_service.get_supabase_client", return_value=mock_supabase):
                with patch("services.category_service._category_service", None):
                    yield TestClient(app)
