"""
Admin User Management endpoints: approval workflow, listing, update,
status toggling and deletion.
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from trackerpro.modules.auth.dependencies import get_account_service, get_current_admin
from trackerpro.schemas.admin import UserListResponse
from trackerpro.schemas.auth import MessageResponse, UserResponse, UserUpdate
from trackerpro.schemas.user import UserView
from trackerpro.services.account_service import AccountService

router = APIRouter()


@router.get("/pending-registrations", response_model=UserListResponse)
async def get_pending_registrations(
    admin: UserView = Depends(get_current_admin),
    service: AccountService = Depends(get_account_service)
):
    """Accounts awaiting approval, newest first"""
    users = await service.list_pending()
    return UserListResponse(success=True, data=users, count=len(users))


@router.post("/approve-user/{user_id}", response_model=UserResponse)
async def approve_user(
    user_id: int,
    admin: UserView = Depends(get_current_admin),
    service: AccountService = Depends(get_account_service)
):
    user = await service.approve(user_id)
    return UserResponse(success=True, message="User approved successfully!", user=user)


@router.post("/reject-user/{user_id}", response_model=UserResponse)
async def reject_user(
    user_id: int,
    admin: UserView = Depends(get_current_admin),
    service: AccountService = Depends(get_account_service)
):
    user = await service.reject(user_id)
    return UserResponse(success=True, message="User rejected successfully!", user=user)


@router.get("/users", response_model=UserListResponse)
async def list_users(
    role: Optional[str] = Query(None, description="Role filter; 'all' or absent lists every non-admin user"),
    admin: UserView = Depends(get_current_admin),
    service: AccountService = Depends(get_account_service)
):
    if role and role.strip().lower() != "all":
        users = await service.list_by_role(role)
    else:
        users = await service.list_all()
    return UserListResponse(success=True, data=users, count=len(users))


@router.put("/users/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    update_data: UserUpdate,
    admin: UserView = Depends(get_current_admin),
    service: AccountService = Depends(get_account_service)
):
    """Partial update; only keys present in the body are changed"""
    user = await service.update(user_id, update_data.model_dump(exclude_unset=True))
    return UserResponse(success=True, message="User updated successfully!", user=user)


@router.post("/toggle-user-status/{user_id}", response_model=UserResponse)
async def toggle_user_status(
    user_id: int,
    admin: UserView = Depends(get_current_admin),
    service: AccountService = Depends(get_account_service)
):
    user = await service.toggle_status(user_id)
    return UserResponse(success=True, message="User status updated successfully!", user=user)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    admin: UserView = Depends(get_current_admin),
    service: AccountService = Depends(get_account_service)
):
    await service.delete(user_id)
    return MessageResponse(success=True, message="User deleted successfully!")
