"""Tests for the role hierarchy and the route guards built on it."""

import pytest

from fakes import make_profile
from family_tree.config.permissions_config import (
    ROLES, can_access, get_permission_matrix, get_role_level, get_role_permissions,
    has_permission, has_unrestricted_access,
)
from family_tree.modules.auth.schemas import ApprovalStatus


class TestRoleHierarchy:

    def test_levels_are_strictly_increasing(self):
        levels = [role["level"] for role in ROLES.values()]
        assert levels == sorted(levels)
        assert len(set(levels)) == len(levels)

    def test_unknown_role(self):
        assert get_role_level("overlord") == 0
        assert get_role_permissions("overlord") == []
        assert has_permission("overlord", "read") is False

    @pytest.mark.parametrize("role_name", ["admin", "family_secretary"])
    def test_wildcard_roles(self, role_name):
        assert has_permission(role_name, "manage_branch")
        assert has_unrestricted_access(role_name)
        assert "write" in get_role_permissions(role_name)

    @pytest.mark.parametrize("role_name", ["viewer", "family_member", "content_writer", "level_manager", "editor"])
    def test_restricted_roles(self, role_name):
        assert not has_unrestricted_access(role_name)

    def test_can_access(self):
        assert can_access("family_secretary", "admin")
        assert can_access("admin", "admin")
        assert not can_access("editor", "admin")

    def test_matrix_lists_every_role(self):
        matrix = get_permission_matrix()
        assert [role["name"] for role in matrix["roles"]] == list(ROLES)
        assert {p["name"] for p in matrix["permissions"]} >= {"read", "write", "edit", "manage_branch"}


class TestRouteGuards:

    def test_pending_user_is_refused(self, client_as):
        client = client_as(make_profile("family_secretary", status=ApprovalStatus.pending))
        response = client.get("/api/v1/members")
        assert response.status_code == 403
        assert "approval" in response.json()["detail"]

    def test_rejected_user_is_refused(self, client_as):
        client = client_as(make_profile("family_secretary", status=ApprovalStatus.rejected))
        assert client.get("/api/v1/members").status_code == 403

    def test_family_member_can_read(self, client_as):
        assert client_as(make_profile("family_member")).get("/api/v1/members").status_code == 200

    def test_missing_permission_is_named(self, client_as, viewer):
        response = client_as(viewer).post("/api/v1/members", json={"first_name": "Ali"})
        assert response.json()["detail"] == "Insufficient permissions. Required: write"
