from pydantic import BaseModel, ConfigDict, computed_field
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime

from trackerpro.models.user import User, UserRole, UserStatus


class CamelModel(BaseModel):
    """Base schema whose JSON keys are camelCase (firstName, createdAt, ...)"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UserView(CamelModel):
    """Public projection of a user. Never carries the password hash."""
    id: int
    first_name: str
    last_name: Optional[str] = None
    email: str
    mobile: Optional[str] = None
    role: UserRole
    status: UserStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def full_name(self) -> str:
        if self.last_name:
            return f"{self.first_name} {self.last_name}"
        return self.first_name


def to_user_view(user: Optional[User]) -> Optional[UserView]:
    """Map a User row to its response view; None maps to None"""
    if user is None:
        return None
    return UserView.model_validate(user)
