import hashlib
import logging
import time
from family_tree.config.settings import settings
from family_tree.database.backend import Backend
from family_tree.database.supabase_client import create_auth_client
from family_tree.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse, UserProfile
)
from family_tree.modules.members.mapping import Tables
from fastapi import HTTPException
from supabase import Client
from typing import Callable, Dict, Any, Optional, Tuple

logger = logging.getLogger(__name__)

# Errors Supabase returns on sign-out when the session is already gone
_STALE_SESSION_ERRORS = (
    "Session from session_id claim in JWT does not exist",
    "Invalid Refresh Token",
    "Auth session missing",
    "session_not_found",
)


class TokenCache:
    """Token -> user data for a short TTL, so parallel requests with one token hit Supabase Auth once."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[Dict[str, Any], float]] = {}

    @staticmethod
    def _key(token: str) -> str:
        return hashlib.sha256(token.encode()).hexdigest()

    def get(self, token: str) -> Optional[Dict[str, Any]]:
        key = self._key(token)
        entry = self._entries.get(key)
        if entry is None:
            return None
        user_data, expiry = entry
        if self._clock() >= expiry:
            del self._entries[key]
            return None
        return user_data

    def put(self, token: str, user_data: Dict[str, Any]):
        if len(self._entries) >= settings.auth_cache_max_size:
            return
        self._entries[self._key(token)] = (user_data, self._clock() + settings.auth_cache_ttl_seconds)

    def discard(self, token: str):
        self._entries.pop(self._key(token), None)

    def clear(self):
        self._entries.clear()


token_cache = TokenCache()


def clear_auth_cache():
    token_cache.clear()


def _user_data(user) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "user_metadata": user.user_metadata or {},
        "app_metadata": user.app_metadata or {},
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


class AuthService:
    """Auth flows over Supabase Auth.

    Token lookups use the shared backend client. Sign-up and sign-in run on a
    throwaway client from auth_client_factory, and logout revokes the caller's
    session through admin_client; neither touches the shared client's session.
    """

    def __init__(self, backend: Backend, admin_client: Optional[Client] = None,
                 auth_client_factory: Callable[[], Client] = create_auth_client):
        self.backend = backend
        self.admin_client = admin_client
        self.auth_client_factory = auth_client_factory

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new user; the backend creates a pending profile for them"""
        try:
            auth_response = self.auth_client_factory().auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {"data": {"full_name": register_data.full_name}},
            })
        except Exception as e:
            message = str(e).lower()
            if "already registered" in message or "already exists" in message:
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=500, detail=f"Registration failed: {e}")

        user = auth_response.user
        if not user:
            raise HTTPException(status_code=400, detail="Failed to register user")
        logger.info(f"Registered user {user.id}, awaiting approval")
        return RegisterResponse(
            user_id=user.id,
            email=user.email or register_data.email,
            message="User registered; an administrator must approve the account",
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate user and report their role and approval status"""
        try:
            auth_response = self.auth_client_factory().auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password,
            })
        except Exception as e:
            message = str(e).lower()
            if "invalid" in message or "credentials" in message:
                raise HTTPException(status_code=401, detail="Invalid email or password")
            raise HTTPException(status_code=500, detail=f"Login failed: {e}")

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid credentials")

        profile = self.get_profile(auth_response.user.id)
        return TokenResponse(
            access_token=auth_response.session.access_token,
            user_id=auth_response.user.id,
            email=auth_response.user.email or login_data.email,
            role_name=profile.role_name if profile else None,
            approval_status=profile.approval_status if profile else None,
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Resolve a bearer token to the Supabase Auth user"""
        cached = token_cache.get(token)
        if cached is not None:
            return cached
        try:
            user_response = self.backend.auth.get_user(jwt=token)
        except Exception as e:
            message = str(e)
            if "JWT" in message or "expired" in message.lower() or "invalid" in message.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

        if not user_response.user:
            raise HTTPException(status_code=401, detail="Invalid or expired token")
        user_data = _user_data(user_response.user)
        token_cache.put(token, user_data)
        return user_data

    def get_profile(self, user_id: str) -> Optional[UserProfile]:
        """Profile with role and approval status from the safe profile view"""
        row = self.backend.fetch_one(Tables.USER_PROFILES_SAFE, {"id": user_id})
        return UserProfile(**row) if row else None

    def logout(self, token: str) -> bool:
        """Revoke the caller's session; a session that is already gone counts as logged out"""
        token_cache.discard(token)
        try:
            (self.admin_client or self.backend).auth.admin.sign_out(token)
        except Exception as e:
            message = str(e)
            if any(stale in message for stale in _STALE_SESSION_ERRORS):
                logger.warning(f"Session already invalid during logout: {message}")
                return True
            logger.error(f"Error signing out: {message}")
            return False
        return True
