from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

ADMIN_ROLE = "admin"


class RoleGrantCreate(BaseModel):
    user_id: str
    role: str = Field(default=ADMIN_ROLE, min_length=1)


class RoleGrantResponse(BaseModel):
    id: str
    user_id: str
    role: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminStatusResponse(BaseModel):
    user_id: str
    is_admin: bool
