from pydantic import AliasChoices, EmailStr, Field, StringConstraints
from typing import Annotated, Optional

from trackerpro.schemas.user import CamelModel, UserView

# Blank after trimming counts as missing
FirstName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class UserRegister(CamelModel):
    first_name: FirstName
    last_name: Optional[str] = Field(None, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)
    confirm_password: str = Field(..., min_length=1)
    mobile_no: Optional[str] = Field(
        None,
        max_length=20,
        validation_alias=AliasChoices("mobileNo", "mobile", "mobile_no"),
    )
    role_category: str = Field(..., min_length=1)


class UserLogin(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)
    remember_me: bool = False


class ForgotPasswordRequest(CamelModel):
    email_or_mobile: Optional[str] = None


class UserUpdate(CamelModel):
    """Partial update; only the keys present in the request are applied"""
    first_name: Optional[FirstName] = None
    last_name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    mobile_no: Optional[str] = Field(
        None,
        max_length=20,
        validation_alias=AliasChoices("mobileNo", "mobile", "mobile_no"),
    )
    password: Optional[str] = Field(None, min_length=1)
    confirm_password: Optional[str] = None
    role_category: Optional[str] = None


# ============================================
# Response envelopes
# ============================================

class MessageResponse(CamelModel):
    success: bool
    message: Optional[str] = None


class UserResponse(MessageResponse):
    user: Optional[UserView] = None


class LoginResponse(UserResponse):
    access_token: Optional[str] = None
    token_type: Optional[str] = None
    redirect_url: Optional[str] = None
