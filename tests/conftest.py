# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up environment variables before any imports
# - Points the app at a temporary data directory and static root per test
# - Provides a TestClient that runs the app lifespan (store + writer)
# =============================================================================

import json
import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "false")

import pytest
from fastapi.testclient import TestClient

from core.services import SubscriberStore


# =============================================================================
# Helpers
# =============================================================================

def read_store_file(path) -> list[dict]:
    """Read the raw JSON array from a store file."""
    with open(path, encoding="utf-8") as f:
        return json.load(f)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def data_dir(tmp_path):
    """Directory holding the subscriber store for one test."""
    return tmp_path / "data"


@pytest.fixture
def subscribers_path(data_dir):
    """Path of the subscriber store file for one test."""
    return data_dir / "subscribers.json"


@pytest.fixture
def store(subscribers_path):
    """A store over a file that does not exist yet."""
    return SubscriberStore(subscribers_path)


@pytest.fixture
def static_dir(tmp_path):
    """A small landing page tree, with a secret file next to (not inside) it."""
    root = tmp_path / "public"
    (root / "css").mkdir(parents=True)
    (root / "guide").mkdir()
    (root / "index.html").write_text("<h1>Nafez</h1>", encoding="utf-8")
    (root / "css" / "site.css").write_text("body { margin: 0; }", encoding="utf-8")
    (root / "guide" / "index.html").write_text("<h1>Guide</h1>", encoding="utf-8")
    (root / "logo.PNG").write_bytes(b"\x89PNG\r\n")
    (root / "archive.bin").write_bytes(b"\x00\x01")
    (tmp_path / "secret.txt").write_text("do not serve", encoding="utf-8")
    return root


@pytest.fixture
def client(data_dir, static_dir, monkeypatch):
    """
    TestClient with lifespan running.

    Settings are patched before startup so the lifespan creates the store
    inside the per-test data directory.
    """
    from app.config import settings
    from app.main import app

    monkeypatch.setattr(settings, "DATA_DIR", data_dir)
    monkeypatch.setattr(settings, "STATIC_DIR", static_dir)

    with TestClient(app) as test_client:
        yield test_client
