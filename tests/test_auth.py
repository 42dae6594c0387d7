"""Tests for auth flows: register, login, token lookup, logout and /auth/me."""

import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock

from fastapi import HTTPException

from fakes import FakeBackend, make_profile, profile_row
from family_tree.config.settings import settings
from family_tree.database.backend import Backend
from family_tree.modules.auth.schemas import ApprovalStatus, LoginRequest, RegisterRequest
from family_tree.modules.auth.service import AuthService, TokenCache, clear_auth_cache
from family_tree.modules.members.mapping import Tables


@pytest.fixture(autouse=True)
def empty_auth_cache():
    clear_auth_cache()
    yield
    clear_auth_cache()


@pytest.fixture
def auth_backend():
    backend = FakeBackend()
    backend.seed(Tables.USER_PROFILES_SAFE, profile_row("user-1", "content_writer", "approved"))
    return backend


@pytest.fixture
def auth_client():
    """Throwaway client handed out for sign-up and sign-in."""
    return MagicMock()


@pytest.fixture
def service(auth_backend, auth_client, admin_client):
    return AuthService(auth_backend, admin_client=admin_client, auth_client_factory=lambda: auth_client)


def auth_user(user_id="user-1"):
    return SimpleNamespace(
        id=user_id, email=f"{user_id}@example.com", user_metadata={"full_name": "User"},
        app_metadata={}, created_at=None, updated_at=None,
    )


class TestRegister:

    def test_register_sends_full_name_metadata(self, service, auth_client):
        auth_client.auth.sign_up.return_value = SimpleNamespace(user=auth_user("user-2"))
        response = service.register(
            RegisterRequest(email="new@example.com", password="secret1", full_name="New Person")
        )
        assert response.user_id == "user-2"
        assert response.approval_status == ApprovalStatus.pending
        payload = auth_client.auth.sign_up.call_args[0][0]
        assert payload["options"]["data"] == {"full_name": "New Person"}

    def test_existing_user(self, service, auth_client):
        auth_client.auth.sign_up.side_effect = Exception("User already registered")
        with pytest.raises(HTTPException) as excinfo:
            service.register(
                RegisterRequest(email="new@example.com", password="secret1", full_name="New Person")
            )
        assert excinfo.value.status_code == 400

    def test_short_password_rejected(self, client):
        response = client.post("/api/v1/auth/register", json={
            "email": "new@example.com", "password": "123", "full_name": "New Person",
        })
        assert response.status_code == 422


class TestLogin:

    def test_login_reports_role_and_status(self, service, auth_client):
        auth_client.auth.sign_in_with_password.return_value = SimpleNamespace(
            user=auth_user(), session=SimpleNamespace(access_token="jwt-token"),
        )
        token = service.login(LoginRequest(email="user-1@example.com", password="x"))
        assert token.access_token == "jwt-token"
        assert token.role_name == "content_writer"
        assert token.approval_status == ApprovalStatus.approved

    def test_invalid_credentials(self, service, auth_client):
        auth_client.auth.sign_in_with_password.side_effect = Exception("Invalid login credentials")
        with pytest.raises(HTTPException) as excinfo:
            service.login(LoginRequest(email="user-1@example.com", password="x"))
        assert excinfo.value.status_code == 401


class TestSharedClientSession:

    def test_auth_flows_leave_shared_client_alone(self, auth_client, admin_client):
        shared = MagicMock()
        shared.table.return_value.select.return_value.eq.return_value.limit.return_value.execute.return_value = (
            SimpleNamespace(data=[profile_row("user-1", "viewer", "approved")])
        )
        auth_client.auth.sign_in_with_password.return_value = SimpleNamespace(
            user=auth_user(), session=SimpleNamespace(access_token="jwt-token"),
        )
        auth_client.auth.sign_up.return_value = SimpleNamespace(user=auth_user("user-2"))
        service = AuthService(Backend(shared), admin_client=admin_client, auth_client_factory=lambda: auth_client)

        service.register(RegisterRequest(email="new@example.com", password="secret1", full_name="New Person"))
        service.login(LoginRequest(email="user-1@example.com", password="x"))
        service.logout("jwt-token")

        assert shared.auth.method_calls == []

    def test_each_sign_in_uses_a_new_client(self, auth_backend):
        clients = []

        def factory():
            client = MagicMock()
            client.auth.sign_in_with_password.return_value = SimpleNamespace(
                user=auth_user(), session=SimpleNamespace(access_token=f"jwt-{len(clients)}"),
            )
            clients.append(client)
            return client

        service = AuthService(auth_backend, auth_client_factory=factory)
        service.login(LoginRequest(email="user-1@example.com", password="x"))
        service.login(LoginRequest(email="user-1@example.com", password="x"))
        assert len(clients) == 2

    def test_logout_revokes_callers_own_session(self, service, admin_client, auth_backend):
        assert service.logout("token-of-user-b") is True
        admin_client.auth.admin.sign_out.assert_called_once_with("token-of-user-b")
        auth_backend.auth.sign_out.assert_not_called()


class TestCurrentUser:

    def test_token_lookup_is_cached(self, service, auth_backend):
        auth_backend.auth.get_user.return_value = SimpleNamespace(user=auth_user())
        assert service.get_current_user("token")["id"] == "user-1"
        assert service.get_current_user("token")["id"] == "user-1"
        assert auth_backend.auth.get_user.call_count == 1

    def test_cached_user_expires(self):
        now = [0.0]
        cache = TokenCache(clock=lambda: now[0])
        cache.put("token", {"id": "user-1"})
        assert cache.get("token") == {"id": "user-1"}
        now[0] += settings.auth_cache_ttl_seconds
        assert cache.get("token") is None

    def test_logout_forgets_cached_user(self, service, auth_backend):
        auth_backend.auth.get_user.return_value = SimpleNamespace(user=auth_user())
        service.get_current_user("token")
        service.logout("token")
        service.get_current_user("token")
        assert auth_backend.auth.get_user.call_count == 2

    def test_expired_token(self, service, auth_backend):
        auth_backend.auth.get_user.side_effect = Exception("JWT expired")
        with pytest.raises(HTTPException) as excinfo:
            service.get_current_user("token")
        assert excinfo.value.status_code == 401

    def test_missing_profile(self, service):
        assert service.get_profile("nobody") is None

    def test_logout_tolerates_stale_session(self, service, admin_client):
        admin_client.auth.admin.sign_out.side_effect = Exception("Auth session missing!")
        assert service.logout("token") is True

    def test_logout_other_failure(self, service, admin_client):
        admin_client.auth.admin.sign_out.side_effect = Exception("network down")
        assert service.logout("token") is False


class TestMeRoute:

    def test_me_lists_permissions(self, client_as):
        data = client_as(make_profile("level_manager")).get("/api/v1/auth/me").json()
        assert data["role_display_name"] == "مدير فرع"
        assert data["permissions"] == ["read", "write", "manage_branch", "edit_branch_data"]

    def test_pending_user_sees_no_permissions(self, client_as):
        client = client_as(make_profile("viewer", status=ApprovalStatus.pending))
        data = client.get("/api/v1/auth/me").json()
        assert data["approval_status"] == "pending"
        assert data["permissions"] == []

    def test_missing_token(self):
        from starlette.testclient import TestClient
        from family_tree.main import app
        response = TestClient(app).get("/api/v1/auth/me")
        assert response.status_code in (401, 403)

    def test_token_resolves_profile(self, backend):
        from starlette.testclient import TestClient
        from family_tree.core.dependencies import get_auth_service
        from family_tree.main import app

        backend.seed(Tables.USER_PROFILES_SAFE, profile_row("user-9", "editor", "approved"))
        service = MagicMock()
        service.get_current_user.return_value = {"id": "user-9"}
        service.get_profile.side_effect = AuthService(backend).get_profile
        app.dependency_overrides[get_auth_service] = lambda: service
        try:
            response = TestClient(app).get("/api/v1/auth/me", headers={"Authorization": "Bearer abc"})
        finally:
            app.dependency_overrides.clear()
        assert response.status_code == 200
        assert response.json()["role_name"] == "editor"
        service.get_current_user.assert_called_once_with("abc")
