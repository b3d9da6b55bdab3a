from fastapi import APIRouter, Depends, Request

from trackerpro.core.exceptions import AdminAccessRequiredError
from trackerpro.core.logging_config import logger, set_user_id
from trackerpro.core.security import create_access_token, token_lifetime
from trackerpro.models.user import UserRole
from trackerpro.schemas.auth import (
    UserRegister,
    UserLogin,
    ForgotPasswordRequest,
    MessageResponse,
    UserResponse,
    LoginResponse,
)
from trackerpro.schemas.user import UserView
from trackerpro.modules.auth.dependencies import get_account_service, get_current_user
from trackerpro.services.account_service import AccountService
from trackerpro.core.rate_limiter import (
    login_rate_limit,
    register_rate_limit,
    forgot_password_rate_limit,
)

router = APIRouter()

ADMIN_DASHBOARD_URL = "/adminDashboard.html"


def _issue_token(user: UserView, remember_me: bool) -> str:
    token_data = {
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value
    }
    return create_access_token(token_data, expires_delta=token_lifetime(remember_me))


@router.post("/register", response_model=UserResponse, response_model_exclude_unset=True)
@register_rate_limit()
async def register(
    request: Request,
    user_data: UserRegister,
    service: AccountService = Depends(get_account_service)
):
    """Register a new account; it stays PENDING until an admin approves it"""
    logger.info(f"Registration request received for email: {user_data.email}")

    user = await service.register(
        first_name=user_data.first_name,
        last_name=user_data.last_name,
        email=user_data.email,
        password=user_data.password,
        confirm_password=user_data.confirm_password,
        mobile=user_data.mobile_no,
        role_category=user_data.role_category,
    )

    return UserResponse(
        success=True,
        message="Registration successful! Your account is pending approval.",
        user=user
    )


@router.post("/login", response_model=LoginResponse, response_model_exclude_unset=True)
@login_rate_limit()
async def login(
    request: Request,
    credentials: UserLogin,
    service: AccountService = Depends(get_account_service)
):
    """Login user (rate limited)"""
    user = await service.authenticate(credentials.email, credentials.password)
    set_user_id(str(user.id))

    return LoginResponse(
        success=True,
        message="Login successful!",
        user=user,
        access_token=_issue_token(user, credentials.remember_me),
        token_type="bearer"
    )


@router.post("/admin/login", response_model=LoginResponse, response_model_exclude_unset=True)
@login_rate_limit()
async def admin_login(
    request: Request,
    credentials: UserLogin,
    service: AccountService = Depends(get_account_service)
):
    """
    Login for administrators.

    Full authentication runs first, so a pending or deactivated account
    reports its status before the role check.
    """
    user = await service.authenticate(credentials.email, credentials.password)

    if user.role != UserRole.ADMIN:
        logger.log_auth_event(
            event="admin_login",
            success=False,
            user_email=user.email,
            reason="not an admin"
        )
        raise AdminAccessRequiredError()

    set_user_id(str(user.id))
    logger.log_auth_event(event="admin_login", success=True, user_email=user.email)

    return LoginResponse(
        success=True,
        message="Admin login successful!",
        user=user,
        access_token=_issue_token(user, credentials.remember_me),
        token_type="bearer",
        redirect_url=ADMIN_DASHBOARD_URL
    )


@router.post("/forgot-password", response_model=MessageResponse)
@forgot_password_rate_limit()
async def forgot_password(request: Request, body: ForgotPasswordRequest):
    """
    Always answers with the same message so callers cannot discover which
    emails or mobile numbers are registered. No reset is sent yet.
    """
    logger.info(f"Forgot password request received for: {body.email_or_mobile}")

    return MessageResponse(
        success=True,
        message="If the email/mobile exists in our system, you will receive password reset instructions."
    )


@router.get("/me", response_model=UserResponse, response_model_exclude_unset=True)
async def get_me(current_user: UserView = Depends(get_current_user)):
    """Get current user info"""
    return UserResponse(success=True, user=current_user)
