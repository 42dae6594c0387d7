"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.admin.sign_out(jwt) - Revoke the caller's session

A backend trigger creates a user_profiles row with approval_status 'pending'
for every new auth user; an administrator approves it before data routes open.
"""
from fastapi import APIRouter, Depends
from family_tree.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    UserProfile, CurrentUserResponse
)
from family_tree.modules.auth.service import AuthService
from family_tree.core.dependencies import get_auth_service, get_current_token, get_current_profile
from family_tree.config.permissions_config import get_role_permissions, get_display_name

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user (account stays pending until approved)"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    return service.login(login_data)


@router.post("/logout", status_code=200)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return {"message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(profile: UserProfile = Depends(get_current_profile)):
    """Current user profile, approval status and permissions (pending users may call this)"""
    return CurrentUserResponse(
        **profile.model_dump(),
        role_display_name=get_display_name(profile.role_name),
        permissions=get_role_permissions(profile.role_name) if profile.is_approved else []
    )
