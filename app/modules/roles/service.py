from supabase import Client
from app.modules.roles.schemas import RoleGrantResponse, ADMIN_ROLE
from typing import List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class RoleService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def is_admin(self, user_id: str) -> bool:
        """Ask the is_admin() database function. Errors propagate so callers can fail closed."""
        result = self.supabase.rpc("is_admin", {"check_user_id": user_id}).execute()
        return result.data is True

    def get_grant(self, user_id: str, role: str = ADMIN_ROLE) -> Optional[RoleGrantResponse]:
        result = self.supabase.table("user_roles")\
            .select("*")\
            .eq("user_id", user_id)\
            .eq("role", role)\
            .execute()
        if not result.data:
            return None
        return RoleGrantResponse(**result.data[0])

    def list_grants(self, role: Optional[str] = None) -> List[RoleGrantResponse]:
        """List role grants, newest first"""
        try:
            query = self.supabase.table("user_roles").select("*")
            if role:
                query = query.eq("role", role)
            result = query.order("created_at", desc=True).execute()
            return [RoleGrantResponse(**grant) for grant in result.data or []]
        except Exception as e:
            logger.error(f"Error listing role grants: {e}")
            raise HTTPException(status_code=500, detail="Failed to load role grants")

    def grant_role(self, user_id: str, role: str = ADMIN_ROLE) -> RoleGrantResponse:
        """Grant a role. Granting an existing (user_id, role) pair is a no-op."""
        try:
            self.supabase.table("user_roles")\
                .upsert(
                    {"user_id": user_id, "role": role},
                    on_conflict="user_id,role",
                    ignore_duplicates=True,
                )\
                .execute()
            grant = self.get_grant(user_id, role)
            if grant is None:
                raise HTTPException(status_code=500, detail="Failed to grant role")
            logger.info(f"Role '{role}' granted to user {user_id}")
            return grant
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error granting role {role} to {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to grant role")

    def revoke_role(self, user_id: str, role: str) -> bool:
        """Remove a role grant; only ever done explicitly by an admin"""
        try:
            result = self.supabase.table("user_roles")\
                .delete()\
                .eq("user_id", user_id)\
                .eq("role", role)\
                .execute()
            revoked = bool(result.data)
            if revoked:
                logger.info(f"Role '{role}' revoked from user {user_id}")
            return revoked
        except Exception as e:
            logger.error(f"Error revoking role {role} from {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to revoke role")
