from datetime import datetime, timezone
from supabase import Client
from postgrest.exceptions import APIError
from app.core.access_policy import (
    CallerContext, Operation, APPLICATIONS, AccessDenied, authorize, visible_rows
)
from app.core.pagination import Page, fetch_all, fetch_page
from app.modules.applications.schemas import (
    ApplicationCreate, ApplicationResponse, ApplicationStatus, MemberResponse
)
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

APPLICATION_COLUMNS = (
    "id, user_id, membership_type, amount, payment_reference, status, admin_notes, "
    "created_at, updated_at, profiles(full_name, email)"
)
MEMBER_COLUMNS = "id, user_id, membership_type, amount, created_at, profiles(full_name, email, phone)"
RECENT_LIMIT = 5
FOREIGN_KEY_VIOLATION = "23503"


class ApplicationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def submit(self, ctx: CallerContext, application_data: ApplicationCreate) -> ApplicationResponse:
        """Submit a membership application for the caller; it always starts as pending"""
        try:
            authorize(ctx, APPLICATIONS, Operation.INSERT, ctx.user_id)
            result = self.supabase.table("membership_applications").insert({
                "user_id": ctx.user_id,
                "membership_type": application_data.membership_type.value,
                "amount": str(application_data.amount),
                "payment_reference": application_data.payment_reference,
                "status": ApplicationStatus.PENDING.value,
            }).execute()

            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to submit application")

            logger.info(f"Application {result.data[0]['id']} submitted by user {ctx.user_id}")
            return ApplicationResponse(**result.data[0])
        except HTTPException:
            raise
        except AccessDenied:
            raise HTTPException(status_code=403, detail="Access denied")
        except APIError as e:
            if e.code == FOREIGN_KEY_VIOLATION:
                raise HTTPException(status_code=400, detail="Complete your profile before applying")
            logger.error(f"Error submitting application for {ctx.user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to submit application")
        except Exception as e:
            logger.error(f"Error submitting application for {ctx.user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to submit application")

    def list_own(self, ctx: CallerContext) -> List[ApplicationResponse]:
        """The caller's own applications, newest first"""
        try:
            rows = fetch_all(
                lambda: self.supabase.table("membership_applications")
                .select(APPLICATION_COLUMNS, count="exact")
                .eq("user_id", ctx.user_id),
                order_by="created_at",
                desc=True,
            )
            return [ApplicationResponse(**row) for row in rows]
        except Exception as e:
            logger.error(f"Error listing applications of {ctx.user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load applications")

    def get_application(self, ctx: CallerContext, application_id: str) -> ApplicationResponse:
        try:
            result = self.supabase.table("membership_applications")\
                .select(APPLICATION_COLUMNS)\
                .eq("id", application_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading application {application_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load application")

        rows = visible_rows(ctx, APPLICATIONS, result.data or [])
        if not rows:
            raise HTTPException(status_code=404, detail="Application not found")
        return ApplicationResponse(**rows[0])

    def list_applications(
        self,
        ctx: CallerContext,
        page: int = 1,
        status: Optional[ApplicationStatus] = None,
    ) -> Page[ApplicationResponse]:
        """One page of applications, newest first, optionally narrowed to one status"""
        def make_query():
            query = self.supabase.table("membership_applications")\
                .select(APPLICATION_COLUMNS, count="exact")
            if status is not None:
                query = query.eq("status", status.value)
            return query

        try:
            rows, count = fetch_page(make_query, page)
            items = [ApplicationResponse(**row) for row in visible_rows(ctx, APPLICATIONS, rows)]
            return Page[ApplicationResponse].build(items, count, page)
        except Exception as e:
            logger.error(f"Error listing applications (page {page}, status {status}): {e}")
            raise HTTPException(status_code=500, detail="Failed to load applications")

    def list_members(self, ctx: CallerContext, page: int = 1) -> Page[MemberResponse]:
        """Approved applications with the member's contact details"""
        try:
            rows, count = fetch_page(
                lambda: self.supabase.table("membership_applications")
                .select(MEMBER_COLUMNS, count="exact")
                .eq("status", ApplicationStatus.APPROVED.value),
                page,
            )
            items = [MemberResponse(**row) for row in visible_rows(ctx, APPLICATIONS, rows)]
            return Page[MemberResponse].build(items, count, page)
        except Exception as e:
            logger.error(f"Error listing members (page {page}): {e}")
            raise HTTPException(status_code=500, detail="Failed to load members")

    def list_recent(self, ctx: CallerContext, limit: int = RECENT_LIMIT) -> List[ApplicationResponse]:
        """Newest applications for the dashboard widget"""
        try:
            result = self.supabase.table("membership_applications")\
                .select(APPLICATION_COLUMNS)\
                .order("created_at", desc=True)\
                .limit(limit)\
                .execute()
            return [ApplicationResponse(**row) for row in visible_rows(ctx, APPLICATIONS, result.data or [])]
        except Exception as e:
            logger.error(f"Error listing recent applications: {e}")
            raise HTTPException(status_code=500, detail="Failed to load recent applications")

    def update_status(
        self,
        ctx: CallerContext,
        application_id: str,
        status: ApplicationStatus,
        admin_notes: Optional[str] = None,
    ) -> ApplicationResponse:
        """Move an application to any status (admin only)"""
        try:
            authorize(ctx, APPLICATIONS, Operation.UPDATE)
            update_data = {
                "status": status.value,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            }
            if admin_notes is not None:
                update_data["admin_notes"] = admin_notes

            result = self.supabase.table("membership_applications")\
                .update(update_data)\
                .eq("id", application_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Application not found")

            logger.info(f"Application {application_id} set to {status.value} by {ctx.user_id}")
            return ApplicationResponse(**result.data[0])
        except HTTPException:
            raise
        except AccessDenied:
            raise HTTPException(status_code=403, detail="Access denied")
        except Exception as e:
            logger.error(f"Error updating application {application_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update application")
