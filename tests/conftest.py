"""
Pytest configuration - shared fixtures
"""
import sys
import os
import json
from typing import Generator

import pytest
from fastapi.testclient import TestClient

# Add backend directory to sys.path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "../backend"))

from app.config import settings
from app.core.rate_limit import limiter
from app.database import get_db
from app.main import app
from app.repositories import Database
from app.services.catalog_service import CatalogService, get_catalog

ADMIN_EMAIL = "admin@example.com"

SAMPLE_CATALOG = {
    "flowers": [
        {"id": 1, "name": "Красные розы", "price": 2500, "rating": 4.5, "ratingCount": 2},
        {"id": 2, "name": "Белые тюльпаны", "price": 1800},
        {"id": 3, "name": "Весенний букет", "price": 3200, "rating": 0, "ratingCount": 0},
    ]
}


@pytest.fixture
def data_dir(tmp_path):
    """Directory holding the JSON documents for one test"""
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def test_db(data_dir) -> Database:
    """Stores backed by empty documents in a temporary directory"""
    return Database(data_dir)


@pytest.fixture
def catalog_path(tmp_path):
    path = tmp_path / "db.json"
    path.write_text(json.dumps(SAMPLE_CATALOG, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def catalog(catalog_path) -> CatalogService:
    return CatalogService(catalog_path)


@pytest.fixture
def admin_emails(monkeypatch):
    """Put ADMIN_EMAIL on the admin allow-list"""
    monkeypatch.setattr(settings, "ADMIN_EMAILS", ADMIN_EMAIL)
    return [ADMIN_EMAIL]


@pytest.fixture
def client(test_db, catalog) -> Generator[TestClient, None, None]:
    """API client wired to the temporary stores, with rate limiting off"""
    app.dependency_overrides[get_db] = lambda: test_db
    app.dependency_overrides[get_catalog] = lambda: catalog
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        limiter.enabled = settings.RATE_LIMIT_ENABLED
        app.dependency_overrides.clear()


@pytest.fixture
def register():
    """Helper posting a registration for (client, username, email[, password])"""

    def _register(client: TestClient, username: str, email: str, password: str = "secret123"):
        return client.post(
            "/auth/register",
            json={"username": username, "email": email, "password": password},
        )

    return _register


@pytest.fixture
def user_client(client, register) -> TestClient:
    """Client holding the session cookie of a freshly registered user"""
    response = register(client, "alice", "alice@example.com")
    assert response.status_code == 201
    return client
