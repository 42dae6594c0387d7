import logging
from fastapi import HTTPException
from supabase import Client
from typing import Any, Dict, List, Optional

from family_tree.config.permissions_config import (
    ROLES, get_display_name, get_role_level, get_role_permissions,
)
from family_tree.database.backend import Backend
from family_tree.modules.admin.schemas import PendingChangeResponse, RoleAssignment, RoleResponse
from family_tree.modules.auth.schemas import ApprovalStatus, UserProfile
from family_tree.modules.members.mapping import Tables, PERSON_FIELDS

logger = logging.getLogger(__name__)


def to_pending_change(row: Dict[str, Any]) -> PendingChangeResponse:
    values = dict(row)
    values["person_data"] = PERSON_FIELDS.to_record(row.get("person_data") or {})
    return PendingChangeResponse(**values)


class AdminService:
    def __init__(self, backend: Backend, admin_client: Optional[Client] = None):
        self.backend = backend
        self.admin_client = admin_client

    def list_users(self, status: Optional[ApprovalStatus] = None, search: Optional[str] = None) -> List[UserProfile]:
        """All profiles, newest first; search matches email or full name"""
        filters = {"approval_status": status.value} if status else None
        rows = self.backend.fetch_table(Tables.USER_PROFILES_SAFE, filters, order="created_at", desc=True)
        users = [UserProfile(**row) for row in rows]
        if search:
            term = search.lower()
            users = [
                user for user in users
                if term in user.email.lower() or term in (user.full_name or "").lower()
            ]
        return users

    def get_user(self, user_id: str) -> UserProfile:
        row = self.backend.fetch_one(Tables.USER_PROFILES_SAFE, {"id": user_id})
        if not row:
            raise HTTPException(status_code=404, detail="User not found")
        return UserProfile(**row)

    def approve_user(self, user_id: str, assignment: RoleAssignment, approver: UserProfile) -> UserProfile:
        user = self.get_user(user_id)
        if user.approval_status != ApprovalStatus.pending:
            raise HTTPException(status_code=400, detail=f"User is already {user.approval_status.value}")
        self._check_assignment(assignment, approver)
        self.backend.call_procedure("approve_user", {
            "user_id": user_id,
            "approver_id": approver.id,
            "new_level": assignment.role_name,
            "new_branch_id": assignment.branch_id,
        })
        logger.info(f"User {user_id} approved as {assignment.role_name} by {approver.id}")
        return self.get_user(user_id)

    def reject_user(self, user_id: str, reason: Optional[str], approver: UserProfile) -> UserProfile:
        user = self.get_user(user_id)
        if user.approval_status != ApprovalStatus.pending:
            raise HTTPException(status_code=400, detail=f"User is already {user.approval_status.value}")
        self.backend.call_procedure("reject_user", {
            "user_id": user_id,
            "approver_id": approver.id,
            "reason": reason,
        })
        logger.info(f"User {user_id} rejected by {approver.id}")
        return self.get_user(user_id)

    def update_user_role(self, user_id: str, assignment: RoleAssignment, updater: UserProfile) -> UserProfile:
        self.get_user(user_id)
        if user_id == updater.id:
            raise HTTPException(status_code=400, detail="Administrators cannot change their own role")
        self._check_assignment(assignment, updater)
        self.backend.call_procedure("update_user_role_and_branch", {
            "target_user_id": user_id,
            "new_level": assignment.role_name,
            "new_branch_id": assignment.branch_id,
            "updater_id": updater.id,
        })
        logger.info(f"User {user_id} role set to {assignment.role_name} by {updater.id}")
        return self.get_user(user_id)

    def delete_user(self, user_id: str, requester: UserProfile) -> bool:
        """Delete the profile row, then the auth user; auth deletion failures are only logged"""
        if user_id == requester.id:
            raise HTTPException(status_code=400, detail="Administrators cannot delete themselves")
        self.get_user(user_id)
        self.backend.delete(Tables.USER_PROFILES, {"id": user_id})

        if self.admin_client is None:
            logger.warning(f"No admin client configured; auth user {user_id} was not deleted")
            return True
        try:
            self.admin_client.auth.admin.delete_user(user_id)
        except Exception as e:
            logger.warning(f"Could not delete auth user {user_id}: {e}")
        logger.info(f"User {user_id} deleted by {requester.id}")
        return True

    def list_pending_changes(self, status: Optional[str] = "pending") -> List[PendingChangeResponse]:
        filters = {"status": status} if status else None
        rows = self.backend.fetch_table(Tables.PENDING_PERSON_CHANGES, filters, order="created_at", desc=True)
        return [to_pending_change(row) for row in rows]

    def approve_change(self, change_id: int, approver: UserProfile) -> PendingChangeResponse:
        self._get_pending_change(change_id)
        self.backend.call_procedure("approve_person_change", {
            "p_change_id": change_id,
            "p_approver_id": approver.id,
        })
        logger.info(f"Person change {change_id} approved by {approver.id}")
        return self._get_change(change_id)

    def reject_change(self, change_id: int, reason: Optional[str], approver: UserProfile) -> PendingChangeResponse:
        self._get_pending_change(change_id)
        self.backend.call_procedure("reject_person_change", {
            "p_change_id": change_id,
            "p_approver_id": approver.id,
            "p_reason": reason,
        })
        logger.info(f"Person change {change_id} rejected by {approver.id}")
        return self._get_change(change_id)

    def list_roles(self) -> List[RoleResponse]:
        """Roles stored in the backend, ordered by hierarchy level"""
        rows = self.backend.fetch_table(Tables.ROLES, order="name")
        roles = [
            RoleResponse(
                id=str(row["id"]) if row.get("id") is not None else None,
                name=row["name"],
                level=get_role_level(row["name"]),
                display_name=get_display_name(row["name"]),
                description=row.get("description") or ROLES.get(row["name"], {}).get("description"),
                permissions=get_role_permissions(row["name"]),
            )
            for row in rows
        ]
        return sorted(roles, key=lambda role: role.level)

    def _check_assignment(self, assignment: RoleAssignment, actor: UserProfile):
        if assignment.role_name == "level_manager" and assignment.branch_id is None:
            raise HTTPException(status_code=400, detail="A branch manager must be assigned a branch")
        if get_role_level(assignment.role_name) > get_role_level(actor.role_name):
            raise HTTPException(status_code=403, detail="Cannot assign a role above your own")

    def _get_change(self, change_id: int) -> PendingChangeResponse:
        row = self.backend.fetch_one(Tables.PENDING_PERSON_CHANGES, {"id": change_id})
        if not row:
            raise HTTPException(status_code=404, detail="Change not found")
        return to_pending_change(row)

    def _get_pending_change(self, change_id: int) -> PendingChangeResponse:
        change = self._get_change(change_id)
        if change.status != "pending":
            raise HTTPException(status_code=400, detail=f"Change is already {change.status}")
        return change
