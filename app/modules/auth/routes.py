from fastapi import APIRouter, Depends
from app.database.supabase_client import get_anon_client_factory
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, TokenResponse, RegisterResponse,
    PasswordResetRequest, MessageResponse, CurrentUserResponse
)
from app.modules.auth.service import AuthService, RESET_REQUESTED
from app.core.access_policy import CallerContext
from app.core.dependencies import get_auth_service, get_caller_context, get_current_token
from typing import Callable

router = APIRouter(prefix="/auth", tags=["auth"])


def get_session_auth_service(
    client_factory: Callable = Depends(get_anon_client_factory)
) -> AuthService:
    """AuthService on a fresh client, so a sign-in never leaks its session into other requests"""
    return AuthService(client_factory())


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_session_auth_service)
):
    """Register a new member"""
    return service.register(register_data)


@router.post("/login", response_model=TokenResponse)
async def login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_session_auth_service)
):
    """Member login"""
    return service.login(login_data)


@router.post("/admin/login", response_model=TokenResponse)
async def admin_login(
    login_data: LoginRequest,
    service: AuthService = Depends(get_session_auth_service)
):
    """Admin login: non-admins are signed out and refused"""
    return service.admin_login(login_data)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    token: str = Depends(get_current_token),
    service: AuthService = Depends(get_auth_service)
):
    """Logout and invalidate token"""
    service.logout(token)
    return MessageResponse(message="Logged out successfully")


@router.post("/password-reset", response_model=MessageResponse, status_code=202)
async def request_password_reset(
    request: PasswordResetRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Send a password reset link to the given email"""
    service.request_password_reset(request.email)
    return MessageResponse(message=RESET_REQUESTED)


@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user(
    ctx: CallerContext = Depends(get_caller_context),
):
    """Current authenticated user and whether they hold the admin role"""
    return CurrentUserResponse(id=ctx.user_id, email=ctx.email, is_admin=ctx.is_admin)
