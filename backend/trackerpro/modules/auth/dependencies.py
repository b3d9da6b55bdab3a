from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from trackerpro.core.database import get_db
from trackerpro.core.exceptions import (
    AccountNotActiveError,
    AdminAccessRequiredError,
    UserNotFoundError,
)
from trackerpro.core.logging_config import set_user_id
from trackerpro.core.security import decode_token, password_hasher
from trackerpro.models.user import UserRole, UserStatus
from trackerpro.repositories.user_repository import UserRepository
from trackerpro.schemas.user import UserView
from trackerpro.services.account_service import AccountService

security = HTTPBearer()


def get_account_service(db: AsyncSession = Depends(get_db)) -> AccountService:
    """One AccountService per request, bound to the request's session"""
    return AccountService(UserRepository(db), password_hasher)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    service: AccountService = Depends(get_account_service)
) -> UserView:
    """Get current authenticated user"""

    payload = decode_token(credentials.credentials)

    if payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type"
        )

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload"
        )

    try:
        user = await service.get_user(user_id)
    except UserNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    if user.role != UserRole.ADMIN and user.status != UserStatus.ACTIVE:
        raise AccountNotActiveError("User account is not active", status=user.status.value)

    set_user_id(str(user.id))
    return user


async def get_current_admin(
    current_user: UserView = Depends(get_current_user)
) -> UserView:
    """Get current admin user"""
    if current_user.role != UserRole.ADMIN:
        raise AdminAccessRequiredError()
    return current_user
