from decimal import Decimal
from supabase import Client
from app.core.access_policy import CallerContext
from app.core.pagination import fetch_all
from app.modules.applications.schemas import ApplicationStatus
from app.modules.dashboard.schemas import DashboardStats
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _count_by_status(self, status: ApplicationStatus) -> int:
        result = self.supabase.table("membership_applications")\
            .select("id", count="exact")\
            .eq("status", status.value)\
            .limit(1)\
            .execute()
        return result.count or 0

    def _approved_revenue(self) -> Decimal:
        # Every approved row, not just the first max-rows of them
        rows = fetch_all(
            lambda: self.supabase.table("membership_applications")
            .select("id, amount", count="exact")
            .eq("status", ApplicationStatus.APPROVED.value)
        )
        return sum((Decimal(str(row["amount"])) for row in rows), Decimal("0"))

    def get_stats(self, ctx: CallerContext) -> DashboardStats:
        """Approved member count, pending count and revenue from approved memberships"""
        try:
            return DashboardStats(
                total_members=self._count_by_status(ApplicationStatus.APPROVED),
                pending_applications=self._count_by_status(ApplicationStatus.PENDING),
                total_revenue=self._approved_revenue(),
            )
        except Exception as e:
            logger.error(f"Error fetching dashboard stats for {ctx.user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch dashboard statistics")
