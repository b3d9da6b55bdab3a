"""
Admin API endpoints for the TrackerPro admin dashboard.
All endpoints require an admin bearer token.
"""
from fastapi import APIRouter

from trackerpro.api.v1.endpoints.admin import dashboard, users

admin_router = APIRouter(prefix="/admin", tags=["Admin"])

admin_router.include_router(users.router, tags=["Admin Users"])
admin_router.include_router(dashboard.router, tags=["Admin Dashboard"])
