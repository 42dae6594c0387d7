from fastapi import APIRouter, Depends
from supabase import Client
from family_tree.config.permissions_config import get_permission_matrix
from family_tree.core.dependencies import require_role
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import get_backend, get_admin_client
from family_tree.modules.admin.schemas import (
    RoleAssignment, RejectUserRequest, RejectChangeRequest,
    PendingChangeResponse, RoleResponse, AdminActionResponse
)
from family_tree.modules.admin.service import AdminService
from family_tree.modules.auth.schemas import ApprovalStatus, UserProfile
from family_tree.modules.notifications.schemas import NotificationLevel
from family_tree.modules.notifications.service import NotificationCenter, get_notification_center
from typing import Dict, List, Literal, Optional

router = APIRouter(prefix="/admin", tags=["admin"])

require_admin = require_role("admin")


def get_admin_service(
    backend: Backend = Depends(get_backend),
    admin_client: Client = Depends(get_admin_client)
) -> AdminService:
    return AdminService(backend, admin_client)


@router.get("/users", response_model=List[UserProfile])
async def list_users(
    status: Optional[ApprovalStatus] = None,
    search: Optional[str] = None,
    profile: UserProfile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    """List user profiles, optionally filtered by approval status and email / name"""
    return service.list_users(status=status, search=search)


@router.get("/users/pending", response_model=List[UserProfile])
async def list_pending_users(
    profile: UserProfile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    return service.list_users(status=ApprovalStatus.pending)


@router.post("/users/{user_id}/approve", response_model=UserProfile)
async def approve_user(
    user_id: str,
    assignment: RoleAssignment,
    profile: UserProfile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
    notifications: NotificationCenter = Depends(get_notification_center)
):
    user = service.approve_user(user_id, assignment, profile)
    notifications.push(profile.id, f"{user.email} approved as {user.role_name}")
    return user


@router.post("/users/{user_id}/reject", response_model=UserProfile)
async def reject_user(
    user_id: str,
    body: RejectUserRequest,
    profile: UserProfile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
    notifications: NotificationCenter = Depends(get_notification_center)
):
    user = service.reject_user(user_id, body.reason, profile)
    notifications.push(profile.id, f"{user.email} rejected", NotificationLevel.info)
    return user


@router.put("/users/{user_id}/role", response_model=UserProfile)
async def update_user_role(
    user_id: str,
    assignment: RoleAssignment,
    profile: UserProfile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
    notifications: NotificationCenter = Depends(get_notification_center)
):
    """Change a user's role and assigned branch"""
    user = service.update_user_role(user_id, assignment, profile)
    notifications.push(profile.id, f"{user.email} is now {user.role_name}")
    return user


@router.delete("/users/{user_id}", response_model=AdminActionResponse)
async def delete_user(
    user_id: str,
    profile: UserProfile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
    notifications: NotificationCenter = Depends(get_notification_center)
):
    service.delete_user(user_id, profile)
    notifications.push(profile.id, "User deleted", NotificationLevel.info)
    return AdminActionResponse(message="User deleted successfully")


@router.get("/changes", response_model=List[PendingChangeResponse])
async def list_pending_changes(
    status: Optional[Literal["pending", "approved", "rejected"]] = "pending",
    profile: UserProfile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    """Person inserts / updates submitted for approval"""
    return service.list_pending_changes(status=status)


@router.post("/changes/{change_id}/approve", response_model=PendingChangeResponse)
async def approve_change(
    change_id: int,
    profile: UserProfile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
    notifications: NotificationCenter = Depends(get_notification_center)
):
    change = service.approve_change(change_id, profile)
    notifications.push(profile.id, f"Change {change_id} approved")
    return change


@router.post("/changes/{change_id}/reject", response_model=PendingChangeResponse)
async def reject_change(
    change_id: int,
    body: RejectChangeRequest,
    profile: UserProfile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service),
    notifications: NotificationCenter = Depends(get_notification_center)
):
    change = service.reject_change(change_id, body.reason, profile)
    notifications.push(profile.id, f"Change {change_id} rejected", NotificationLevel.info)
    return change


@router.get("/roles", response_model=List[RoleResponse])
async def list_roles(
    profile: UserProfile = Depends(require_admin),
    service: AdminService = Depends(get_admin_service)
):
    return service.list_roles()


@router.get("/permissions", response_model=Dict[str, List[Dict]])
async def get_permissions_matrix(profile: UserProfile = Depends(require_admin)):
    """Every permission and the permissions each role carries"""
    return get_permission_matrix()
