from fastapi import APIRouter, Depends
from app.core.access_policy import CallerContext
from app.core.dependencies import get_caller_client, require_admin
from app.modules.dashboard.schemas import DashboardStats
from app.modules.dashboard.service import DashboardService
from supabase import Client

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


def get_dashboard_service(supabase: Client = Depends(get_caller_client)) -> DashboardService:
    return DashboardService(supabase)


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    ctx: CallerContext = Depends(require_admin),
    service: DashboardService = Depends(get_dashboard_service)
):
    """Aggregate membership statistics (admin)"""
    return service.get_stats(ctx)
