from fastapi import APIRouter, Depends, Query
from app.core.access_policy import CallerContext
from app.core.dependencies import get_caller_client, get_caller_context, require_admin
from app.core.pagination import Page
from app.modules.profiles.schemas import ProfileUpsert, ProfileResponse
from app.modules.profiles.service import ProfileService
from supabase import Client

router = APIRouter(prefix="/profiles", tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_caller_client)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    ctx: CallerContext = Depends(get_caller_context),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the caller's own profile"""
    return service.get_own(ctx)


@router.put("/me", response_model=ProfileResponse)
async def upsert_my_profile(
    profile_data: ProfileUpsert,
    ctx: CallerContext = Depends(get_caller_context),
    service: ProfileService = Depends(get_profile_service)
):
    """Create or update the caller's own profile"""
    return service.upsert_own(ctx, profile_data)


@router.get("", response_model=Page[ProfileResponse])
async def list_profiles(
    page: int = Query(1, ge=1),
    ctx: CallerContext = Depends(require_admin),
    service: ProfileService = Depends(get_profile_service)
):
    """List all profiles (admin)"""
    return service.list_profiles(ctx, page)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: str,
    ctx: CallerContext = Depends(get_caller_context),
    service: ProfileService = Depends(get_profile_service)
):
    """Get a profile by ID (own profile, or any profile for admins)"""
    return service.get_profile(ctx, profile_id)
