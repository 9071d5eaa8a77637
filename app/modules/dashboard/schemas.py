from pydantic import BaseModel
from decimal import Decimal


class DashboardStats(BaseModel):
    total_members: int
    pending_applications: int
    total_revenue: Decimal
