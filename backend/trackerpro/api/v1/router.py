from fastapi import APIRouter
from trackerpro.api.v1.endpoints import auth, health
from trackerpro.api.v1.endpoints.admin import admin_router

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(admin_router)
