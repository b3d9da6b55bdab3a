from pydantic import Field
from typing import List, Optional

from trackerpro.schemas.user import CamelModel, UserView
from trackerpro.schemas.auth import MessageResponse


# ==================== Dashboard Schemas ====================

class DashboardStats(CamelModel):
    """Dashboard KPI statistics (active users per role)"""
    total_students: int
    total_faculty: int
    total_hr: int = Field(..., alias="totalHR")
    pending_requests: int
    active_batches: int  # configured placeholder, no batch entity
    total_users: int


class DashboardResponse(MessageResponse):
    data: Optional[DashboardStats] = None


# ==================== User Management Schemas ====================

class UserListResponse(MessageResponse):
    data: List[UserView] = []
    count: int = 0
