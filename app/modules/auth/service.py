import hashlib
import time
import logging
from supabase import Client
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from app.modules.roles.service import RoleService
from app.config.settings import settings
from fastapi import HTTPException
from typing import Dict, Any

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500

LOGIN_FAILED = "Login failed. Please check your credentials."
ACCESS_DENIED = "Access denied. You do not have permission to access the admin dashboard."
RESET_REQUESTED = "If an account exists for this email, a password reset link has been sent."


def _token_cache_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def clear_auth_cache():
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Register a new member using Supabase Auth"""
        try:
            user_metadata = {}
            if register_data.full_name:
                user_metadata["full_name"] = register_data.full_name

            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")

            return RegisterResponse(
                user_id=auth_response.user.id,
                email=auth_response.user.email or register_data.email,
                message="User registered successfully"
            )
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            logger.error(f"Registration failed: {error_message}")
            raise HTTPException(status_code=500, detail="Registration failed")

    def _sign_in(self, login_data: LoginRequest):
        """Sign in; every failure collapses into one generic 401 so accounts cannot be enumerated."""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email.strip(),
                "password": login_data.password
            })
        except Exception as e:
            logger.info(f"Sign-in rejected: {e}")
            raise HTTPException(status_code=401, detail=LOGIN_FAILED)

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail=LOGIN_FAILED)
        return auth_response

    def login(self, login_data: LoginRequest) -> TokenResponse:
        """Authenticate a member"""
        auth_response = self._sign_in(login_data)
        return TokenResponse(
            access_token=auth_response.session.access_token,
            refresh_token=auth_response.session.refresh_token,
            token_type="bearer",
            user_id=auth_response.user.id,
            email=auth_response.user.email or login_data.email
        )

    def admin_login(self, login_data: LoginRequest) -> TokenResponse:
        """
        Authenticate and require the admin role.

        A valid login without the admin role (or whose role check errors) is
        signed out immediately so no live session to the admin surface remains.
        """
        auth_response = self._sign_in(login_data)
        user_id = auth_response.user.id

        try:
            is_admin = RoleService(self.supabase).is_admin(user_id)
        except Exception as e:
            logger.error(f"Error checking admin status for {user_id}: {e}")
            is_admin = False

        if not is_admin:
            self._end_session(auth_response.session.access_token)
            logger.warning(f"Non-admin login attempt to admin dashboard by user {user_id}")
            raise HTTPException(status_code=403, detail=ACCESS_DENIED)

        logger.info(f"Admin {user_id} logged in")
        return TokenResponse(
            access_token=auth_response.session.access_token,
            refresh_token=auth_response.session.refresh_token,
            token_type="bearer",
            user_id=user_id,
            email=auth_response.user.email or login_data.email,
            is_admin=True
        )

    def _end_session(self, token: str):
        try:
            self.supabase.auth.sign_out()
        except Exception as e:
            logger.warning(f"Local sign-out failed: {e}")
        self.logout(token)

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = _token_cache_key(token)
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "access_token": token,
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")

    def logout(self, token: str) -> bool:
        """Revoke the session behind this JWT and forget it locally"""
        _AUTH_USER_CACHE.pop(_token_cache_key(token), None)
        try:
            self.supabase.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning(f"Logout failed: {e}")
            return False

    def request_password_reset(self, email: str) -> None:
        """Send a reset link. Failures are logged, never reported, so the response cannot reveal accounts."""
        try:
            self.supabase.auth.reset_password_for_email(
                email.strip(),
                {"redirect_to": settings.password_reset_redirect_url}
            )
        except Exception as e:
            logger.warning(f"Password reset request failed: {e}")
