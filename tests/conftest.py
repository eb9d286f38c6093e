"""
Shared fixtures.

Every test gets a fresh app with its own in-memory storage and rate
window store, and deterministic settings.
"""

import pytest
from fastapi.testclient import TestClient

from bugbounty.config import get_settings
from bugbounty.storage import InMemoryMetadataStorage

from helpers import create_program, register


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    """Test settings, re-read for every test."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("JWT_SECRET_KEY", "test-secret-key-0123456789abcdef0123456789")
    monkeypatch.setenv("PASSWORD_HASH_ITERATIONS", "1000")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def storage():
    return InMemoryMetadataStorage()


@pytest.fixture
def app(storage):
    from bugbounty.api.app import create_app
    return create_app(storage=storage)


@pytest.fixture
def client(app):
    return TestClient(app)


# =============================================================================
# Actors (token, user json)
# =============================================================================


@pytest.fixture
def company(client):
    return register(client, "COMPANY", name="Acme Corp")


@pytest.fixture
def other_company(client):
    return register(client, "COMPANY", name="Globex")


@pytest.fixture
def researcher(client):
    return register(client, "RESEARCHER", name="Rita")


@pytest.fixture
def other_researcher(client):
    return register(client, "RESEARCHER", name="Sam")


@pytest.fixture
def admin(client):
    return register(client, "ADMIN", name="Root")


@pytest.fixture
def program(client, company):
    token, _ = company
    return create_program(client, token)
