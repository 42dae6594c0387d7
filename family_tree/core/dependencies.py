"""
Core dependencies for route protection and permission checking
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from family_tree.config.permissions_config import has_permission, can_access
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import get_admin_client, get_backend
from family_tree.modules.auth.schemas import UserProfile, ApprovalStatus
from family_tree.modules.auth.service import AuthService
from supabase import Client
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer()


def _get_request_cache(request: Request) -> Dict[str, Any]:
    """Return request-scoped cache for access data (profile)."""
    if not hasattr(request.state, "access_cache"):
        request.state.access_cache = {}
    return request.state.access_cache


def get_auth_service(
    backend: Backend = Depends(get_backend),
    admin_client: Client = Depends(get_admin_client)
) -> AuthService:
    return AuthService(backend, admin_client=admin_client)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user_id(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Extract current user info from JWT token"""
    return auth_service.get_current_user(token)


def get_current_profile(
    request: Request,
    user_data: dict = Depends(get_current_user_id),
    auth_service: AuthService = Depends(get_auth_service)
) -> UserProfile:
    """Load the caller's profile (role, approval status). Cached for the request."""
    cache = _get_request_cache(request)
    if "profile" in cache:
        return cache["profile"]
    profile = auth_service.get_profile(user_data["id"])
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User profile not found. Please contact an administrator."
        )
    cache["profile"] = profile
    return profile


def require_approved(profile: UserProfile = Depends(get_current_profile)) -> UserProfile:
    """Reject callers whose account is pending or rejected"""
    if profile.approval_status == ApprovalStatus.pending:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is awaiting administrator approval"
        )
    if profile.approval_status == ApprovalStatus.rejected:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account registration was rejected"
        )
    return profile


def require_permission(required_permission: str):
    """Factory function to create permission check dependency"""
    def check_permission(profile: UserProfile = Depends(require_approved)) -> UserProfile:
        """Dependency to check if the caller's role carries the permission"""
        if not has_permission(profile.role_name, required_permission):
            logger.info(f"User {profile.id} ({profile.role_name}) denied permission {required_permission}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient permissions. Required: {required_permission}"
            )
        return profile
    return check_permission


def require_role(required_role: str):
    """Factory function to create a minimum-role dependency"""
    def check_role(profile: UserProfile = Depends(require_approved)) -> UserProfile:
        if not can_access(profile.role_name, required_role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Insufficient role. Required: {required_role} or higher"
            )
        return profile
    return check_role
