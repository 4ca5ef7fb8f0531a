"""
Test configuration and fixtures for the catalog API test suite.

Provides:
- A fresh CatalogSession per test, injected through dependency overrides
- FastAPI TestClient fixture (startup loading disabled)
- A client with the sample native dump already loaded
"""
import json
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from nativedb.catalog import CatalogSession


FIXTURES_DIR = Path(__file__).resolve().parents[2] / "nativedb" / "catalog" / "tests" / "fixtures"
NATIVES_JSON = FIXTURES_DIR / "natives_sample.json"


# ---------------------------------------------------------------------------
# Session fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def session():
    """Provide an empty catalog session for each test."""
    return CatalogSession()


@pytest.fixture()
def client(session):
    """
    Provide a FastAPI TestClient wired to the per-test session.

    Skips the startup source load so tests never touch the network.
    """
    from backend.api.main import app
    from backend.api.routers.catalog import get_session

    app.dependency_overrides[get_session] = lambda: session
    with patch("backend.api.main.load_default_source"):
        with TestClient(app) as c:
            yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def loaded_client(client, session):
    """TestClient with natives_sample.json already loaded."""
    session.load("map", json.loads(NATIVES_JSON.read_text()), source="natives_sample.json")
    return client
