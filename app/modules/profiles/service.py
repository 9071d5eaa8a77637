from datetime import datetime, timezone
from supabase import Client
from app.core.access_policy import CallerContext, Operation, PROFILES, authorize, is_allowed, visible_rows, AccessDenied
from app.core.pagination import Page, fetch_page
from app.modules.profiles.schemas import ProfileUpsert, ProfileResponse
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, ctx: CallerContext, profile_id: str) -> ProfileResponse:
        """Get a profile the caller may see; invisible rows look exactly like missing ones"""
        if not is_allowed(ctx, PROFILES, Operation.SELECT, profile_id):
            raise HTTPException(status_code=404, detail="Profile not found")
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", profile_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading profile {profile_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load profile")

        if not result.data:
            raise HTTPException(status_code=404, detail="Profile not found")
        return ProfileResponse(**result.data[0])

    def get_own(self, ctx: CallerContext) -> ProfileResponse:
        return self.get_profile(ctx, ctx.user_id)

    def upsert_own(self, ctx: CallerContext, profile_data: ProfileUpsert) -> ProfileResponse:
        """Create or update the caller's profile; id and email always come from the session"""
        if not ctx.email:
            raise HTTPException(status_code=400, detail="Account has no email address")
        try:
            payload = profile_data.model_dump(mode="json")
            payload.update({
                "id": ctx.user_id,
                "email": ctx.email,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })
            result = self.supabase.table("profiles")\
                .upsert(payload, on_conflict="id")\
                .execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to save profile")

            logger.info(f"Profile saved for user {ctx.user_id}")
            return ProfileResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error saving profile for {ctx.user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save profile")

    def set_document_path(self, ctx: CallerContext, path: str) -> bool:
        """Record an uploaded ID document on the caller's profile. False when no profile exists yet."""
        try:
            authorize(ctx, PROFILES, Operation.UPDATE, ctx.user_id)
            result = self.supabase.table("profiles")\
                .update({
                    "id_document_path": path,
                    "updated_at": datetime.now(timezone.utc).isoformat(),
                })\
                .eq("id", ctx.user_id)\
                .execute()
            return bool(result.data)
        except AccessDenied:
            raise HTTPException(status_code=403, detail="Access denied")
        except Exception as e:
            logger.error(f"Error linking document to profile {ctx.user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update profile")

    def list_profiles(self, ctx: CallerContext, page: int = 1) -> Page[ProfileResponse]:
        """List profiles newest first, ten per page"""
        try:
            rows, count = fetch_page(
                lambda: self.supabase.table("profiles").select("*", count="exact"),
                page,
            )
            return Page[ProfileResponse].build(
                [ProfileResponse(**row) for row in visible_rows(ctx, PROFILES, rows, owner_field="id")],
                count,
                page,
            )
        except Exception as e:
            logger.error(f"Error listing profiles: {e}")
            raise HTTPException(status_code=500, detail="Failed to load profiles")
