"""Shared test fixtures: in-memory backend, caller profiles and API clients."""

import pytest
from unittest.mock import MagicMock

from starlette.testclient import TestClient

from fakes import FakeBackend, make_profile


# ---------------------------------------------------------------------------
# Backend fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def backend():
    """Empty in-memory backend."""
    return FakeBackend()


@pytest.fixture
def admin_client():
    """Stand-in for the service-role Supabase client."""
    return MagicMock()


@pytest.fixture(autouse=True)
def reset_notifications():
    """Each test starts with no pending notifications."""
    from family_tree.modules.notifications.service import notification_center
    notification_center.clear()
    yield
    notification_center.clear()


# ---------------------------------------------------------------------------
# Profile fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def secretary():
    """Approved family secretary (unrestricted)."""
    return make_profile("family_secretary", user_id="secretary-1")


@pytest.fixture
def writer():
    """Approved content writer: changes go through approval."""
    return make_profile("content_writer", user_id="writer-1")


@pytest.fixture
def viewer():
    """Approved read-only user."""
    return make_profile("viewer", user_id="viewer-1")


# ---------------------------------------------------------------------------
# Client fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def client_as(backend, admin_client):
    """Factory: a TestClient whose caller is the given profile."""
    from family_tree.main import app
    from family_tree.core.dependencies import get_current_profile
    from family_tree.database.supabase_client import get_backend, get_admin_client

    def make(profile, raise_server_exceptions=True):
        app.dependency_overrides[get_backend] = lambda: backend
        app.dependency_overrides[get_admin_client] = lambda: admin_client
        app.dependency_overrides[get_current_profile] = lambda: profile
        return TestClient(app, raise_server_exceptions=raise_server_exceptions)

    yield make
    app.dependency_overrides.clear()


@pytest.fixture
def client(client_as, secretary):
    """TestClient acting as the family secretary."""
    return client_as(secretary)
