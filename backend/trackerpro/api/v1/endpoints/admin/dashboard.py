"""
Admin Dashboard endpoint - KPI counts
"""
from fastapi import APIRouter, Depends

from trackerpro.core.config import settings
from trackerpro.models.user import UserRole
from trackerpro.modules.auth.dependencies import get_account_service, get_current_admin
from trackerpro.schemas.admin import DashboardStats, DashboardResponse
from trackerpro.schemas.user import UserView
from trackerpro.services.account_service import AccountService

router = APIRouter()


@router.get("/dashboard-stats", response_model=DashboardResponse)
async def get_dashboard_stats(
    admin: UserView = Depends(get_current_admin),
    service: AccountService = Depends(get_account_service)
):
    """
    Active users per role plus the pending queue size.

    totalUsers is the sum of the three role counts. activeBatches is read
    from DASHBOARD_ACTIVE_BATCHES; there is no batch entity behind it.
    """
    total_students = await service.count_active_by_role(UserRole.STUDENT)
    total_faculty = await service.count_active_by_role(UserRole.FACULTY)
    total_hr = await service.count_active_by_role(UserRole.HR)

    stats = DashboardStats(
        total_students=total_students,
        total_faculty=total_faculty,
        total_hr=total_hr,
        pending_requests=await service.count_pending(),
        active_batches=settings.DASHBOARD_ACTIVE_BATCHES,
        total_users=total_students + total_faculty + total_hr,
    )
    return DashboardResponse(success=True, data=stats)
