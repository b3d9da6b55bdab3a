from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Integer
from datetime import datetime, timezone
from typing import Optional
import enum

from trackerpro.core.database import Base
from trackerpro.core.exceptions import InvalidRoleError


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the DateTime columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class UserRole(str, enum.Enum):
    """User roles"""
    ADMIN = "ADMIN"
    STUDENT = "STUDENT"
    FACULTY = "FACULTY"
    HR = "HR"

    @property
    def display_name(self) -> str:
        return _ROLE_DISPLAY_NAMES[self]

    @classmethod
    def from_string(cls, value: Optional[str]) -> "UserRole":
        """Match a role by name or display name, ignoring case"""
        if value is not None:
            wanted = value.strip().lower()
            for role in cls:
                if wanted in (role.name.lower(), role.display_name.lower()):
                    return role
        raise InvalidRoleError(value)


_ROLE_DISPLAY_NAMES = {
    UserRole.ADMIN: "Admin",
    UserRole.STUDENT: "Student",
    UserRole.FACULTY: "Faculty",
    UserRole.HR: "HR",
}


class UserStatus(str, enum.Enum):
    """Account approval status"""
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    REJECTED = "REJECTED"

    @property
    def display_name(self) -> str:
        return _STATUS_DISPLAY_NAMES[self]


_STATUS_DISPLAY_NAMES = {
    UserStatus.PENDING: "Pending Approval",
    UserStatus.ACTIVE: "Active",
    UserStatus.INACTIVE: "Inactive",
    UserStatus.REJECTED: "Rejected",
}


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    mobile = Column(String(20), unique=True, nullable=True)

    role = Column(SQLEnum(UserRole, name="user_role"), nullable=False, index=True)
    status = Column(
        SQLEnum(UserStatus, name="user_status"),
        default=UserStatus.PENDING,
        nullable=False,
        index=True
    )

    # Timestamps (written by UserRepository)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self):
        return f"<User {self.email} {self.role} {self.status}>"
