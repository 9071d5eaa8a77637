from fastapi import APIRouter, Depends, HTTPException
from app.core.access_policy import CallerContext
from app.core.dependencies import get_caller_client, get_caller_context, require_admin
from app.modules.roles.schemas import RoleGrantCreate, RoleGrantResponse, AdminStatusResponse
from app.modules.roles.service import RoleService
from supabase import Client
from typing import List, Optional

router = APIRouter(prefix="/roles", tags=["roles"])


def get_role_service(supabase: Client = Depends(get_caller_client)) -> RoleService:
    return RoleService(supabase)


@router.get("/me", response_model=AdminStatusResponse)
async def get_my_admin_status(
    ctx: CallerContext = Depends(get_caller_context),
):
    """Whether the caller holds the admin role (fails closed)"""
    return AdminStatusResponse(user_id=ctx.user_id, is_admin=ctx.is_admin)


@router.get("", response_model=List[RoleGrantResponse])
async def list_role_grants(
    role: Optional[str] = None,
    ctx: CallerContext = Depends(require_admin),
    service: RoleService = Depends(get_role_service)
):
    """List role grants"""
    return service.list_grants(role=role)


@router.post("", response_model=RoleGrantResponse, status_code=201)
async def grant_role(
    grant: RoleGrantCreate,
    ctx: CallerContext = Depends(require_admin),
    service: RoleService = Depends(get_role_service)
):
    """Grant a role to a user; repeating an existing grant changes nothing"""
    return service.grant_role(grant.user_id, grant.role)


@router.delete("/{user_id}/{role}", status_code=204)
async def revoke_role(
    user_id: str,
    role: str,
    ctx: CallerContext = Depends(require_admin),
    service: RoleService = Depends(get_role_service)
):
    """Revoke a role grant"""
    if not service.revoke_role(user_id, role):
        raise HTTPException(status_code=404, detail="Role grant not found")
    return None
