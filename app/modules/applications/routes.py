from fastapi import APIRouter, Depends, Query
from app.core.access_policy import CallerContext
from app.core.dependencies import get_caller_client, get_caller_context, require_admin
from app.core.pagination import Page
from app.modules.applications.schemas import (
    ApplicationCreate, ApplicationResponse, ApplicationStatusUpdate,
    MemberResponse, StatusFilter
)
from app.modules.applications.service import ApplicationService
from supabase import Client
from typing import List

router = APIRouter(prefix="/applications", tags=["applications"])
members_router = APIRouter(prefix="/members", tags=["members"])


def get_application_service(supabase: Client = Depends(get_caller_client)) -> ApplicationService:
    return ApplicationService(supabase)


@router.post("", response_model=ApplicationResponse, status_code=201)
async def submit_application(
    application_data: ApplicationCreate,
    ctx: CallerContext = Depends(get_caller_context),
    service: ApplicationService = Depends(get_application_service)
):
    """Submit a membership application for the caller"""
    return service.submit(ctx, application_data)


@router.get("/mine", response_model=List[ApplicationResponse])
async def list_my_applications(
    ctx: CallerContext = Depends(get_caller_context),
    service: ApplicationService = Depends(get_application_service)
):
    """The caller's own applications"""
    return service.list_own(ctx)


@router.get("", response_model=Page[ApplicationResponse])
async def list_applications(
    page: int = Query(1, ge=1),
    status: StatusFilter = StatusFilter.ALL,
    ctx: CallerContext = Depends(require_admin),
    service: ApplicationService = Depends(get_application_service)
):
    """List applications ten per page, optionally filtered by status (admin)"""
    return service.list_applications(ctx, page=page, status=status.to_status())


@router.get("/recent", response_model=List[ApplicationResponse])
async def list_recent_applications(
    ctx: CallerContext = Depends(require_admin),
    service: ApplicationService = Depends(get_application_service)
):
    """Five newest applications (admin)"""
    return service.list_recent(ctx)


@router.get("/{application_id}", response_model=ApplicationResponse)
async def get_application(
    application_id: str,
    ctx: CallerContext = Depends(get_caller_context),
    service: ApplicationService = Depends(get_application_service)
):
    """Get an application (owner or admin)"""
    return service.get_application(ctx, application_id)


@router.patch("/{application_id}/status", response_model=ApplicationResponse)
async def update_application_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    ctx: CallerContext = Depends(require_admin),
    service: ApplicationService = Depends(get_application_service)
):
    """Approve, reject or reopen an application (admin)"""
    return service.update_status(ctx, application_id, update.status, update.admin_notes)


@members_router.get("", response_model=Page[MemberResponse])
async def list_members(
    page: int = Query(1, ge=1),
    ctx: CallerContext = Depends(require_admin),
    service: ApplicationService = Depends(get_application_service)
):
    """Approved members ten per page (admin)"""
    return service.list_members(ctx, page=page)
