# Re-export all models for convenient imports
from trackerpro.models.user import User, UserRole, UserStatus

__all__ = ["User", "UserRole", "UserStatus"]
