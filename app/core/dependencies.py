"""
Core dependencies for route protection and caller resolution
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.core.access_policy import CallerContext
from app.core.admin_guard import AdminGuard, GuardState
from app.database.supabase_client import get_supabase, get_client_factory
from app.modules.auth.service import AuthService
from app.modules.roles.service import RoleService
from supabase import Client
from typing import Any, Callable, Dict, Optional
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    auth_service: AuthService = Depends(get_auth_service)
) -> Optional[Dict[str, Any]]:
    """Resolve the bearer JWT to a user dict, or None when there is no valid session"""
    if credentials is None:
        return None
    try:
        return auth_service.get_current_user(credentials.credentials)
    except HTTPException:
        return None


def get_current_user_id(
    session: Optional[Dict[str, Any]] = Depends(get_current_session)
) -> dict:
    """Extract current user info from JWT token"""
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


def get_current_token(user_data: dict = Depends(get_current_user_id)) -> str:
    return user_data["access_token"]


def get_caller_client(
    user_data: dict = Depends(get_current_user_id),
    client_factory: Callable[[str], Client] = Depends(get_client_factory)
) -> Client:
    """Supabase client acting as the caller, so RLS policies see the caller's auth.uid()"""
    return client_factory(user_data["access_token"])


def resolve_admin(role_service: RoleService, user_id: str) -> bool:
    """Role check that fails closed: any error counts as not admin"""
    try:
        return role_service.is_admin(user_id)
    except Exception as e:
        logger.error(f"Error checking admin status for {user_id}: {e}")
        return False


def get_caller_context(
    user_data: dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_caller_client)
) -> CallerContext:
    """Explicit caller identity threaded into every service call"""
    return CallerContext(
        user_id=str(user_data["id"]),
        email=user_data.get("email"),
        is_admin=resolve_admin(RoleService(supabase), str(user_data["id"])),
        access_token=user_data["access_token"],
    )


def require_admin(
    session: Optional[Dict[str, Any]] = Depends(get_current_session),
    client_factory: Callable[[str], Client] = Depends(get_client_factory)
) -> CallerContext:
    """Admin route guard: authorized sessions pass, everything else is sent to the admin login"""
    resolve_role = None
    if session is not None:
        resolve_role = RoleService(client_factory(session["access_token"])).is_admin
    guard = AdminGuard(resolve_role or (lambda _user_id: False))
    state = guard.check(session)

    if state != GuardState.AUTHORIZED:
        redirect = {"Location": settings.admin_login_url}
        if session is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
                headers={"WWW-Authenticate": "Bearer", **redirect},
            )
        logger.warning(f"Admin access denied for user {session['id']}")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied",
            headers=redirect,
        )

    return CallerContext(
        user_id=str(session["id"]),
        email=session.get("email"),
        is_admin=True,
        access_token=session["access_token"],
    )
