"""
User Repository

Handles all database operations for the users table. No business rules live
here; callers decide what a result means.
"""
from typing import Optional, List

from sqlalchemy import select, update, delete, func, exists
from sqlalchemy.ext.asyncio import AsyncSession

from trackerpro.models.user import User, UserRole, UserStatus, utcnow


class UserRepository:
    """Repository for user data access, bound to one session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ==================== Lookups ====================

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        return await self.db.get(User, user_id)

    async def get_for_update(self, user_id: int) -> Optional[User]:
        """Get user by ID, locking the row until the transaction ends."""
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        result = await self.db.execute(
            select(User).where(User.email == email)
        )
        return result.scalar_one_or_none()

    async def exists_by_email(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """Whether ``email`` belongs to a user (other than ``exclude_id``)"""
        condition = User.email == email
        if exclude_id is not None:
            condition = condition & (User.id != exclude_id)
        return bool(await self.db.scalar(select(exists().where(condition))))

    async def exists_by_mobile(self, mobile: str, exclude_id: Optional[int] = None) -> bool:
        condition = User.mobile == mobile
        if exclude_id is not None:
            condition = condition & (User.id != exclude_id)
        return bool(await self.db.scalar(select(exists().where(condition))))

    # ==================== Listings (newest first) ====================

    async def _list(self, *conditions) -> List[User]:
        result = await self.db.execute(
            select(User)
            .where(*conditions)
            .order_by(User.created_at.desc(), User.id.desc())
        )
        return list(result.scalars().all())

    async def list_by_role(self, role: UserRole) -> List[User]:
        return await self._list(User.role == role)

    async def list_by_status(self, status: UserStatus) -> List[User]:
        return await self._list(User.status == status)

    async def list_pending(self) -> List[User]:
        return await self.list_by_status(UserStatus.PENDING)

    async def list_excluding_role(self, role: UserRole) -> List[User]:
        return await self._list(User.role != role)

    # ==================== Counts ====================

    async def count_by_role_and_status(self, role: UserRole, status: UserStatus) -> int:
        count = await self.db.scalar(
            select(func.count(User.id)).where(User.role == role, User.status == status)
        )
        return count or 0

    async def count_by_status(self, status: UserStatus) -> int:
        count = await self.db.scalar(
            select(func.count(User.id)).where(User.status == status)
        )
        return count or 0

    # ==================== Writes ====================

    async def save(self, user: User) -> User:
        """
        Insert a new user or flush changes to an existing one.

        Timestamps are always assigned here. Flushing makes the database
        assign the id and raise IntegrityError on a UNIQUE violation.
        """
        now = utcnow()
        if user.id is None:
            user.created_at = now
            self.db.add(user)
        user.updated_at = now
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        await self.db.delete(user)
        await self.db.flush()

    async def update_status_if(
        self,
        user_id: int,
        expected_status: UserStatus,
        new_status: UserStatus,
        exclude_role: Optional[UserRole] = None
    ) -> Optional[User]:
        """
        Set ``new_status`` only if the row still has ``expected_status``.

        Returns the refreshed user, or None when no row matched.
        """
        conditions = [User.id == user_id, User.status == expected_status]
        if exclude_role is not None:
            conditions.append(User.role != exclude_role)

        result = await self.db.execute(
            update(User)
            .where(*conditions)
            .values(status=new_status, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            return None
        return await self.reload(user_id)

    async def delete_if_not_role(self, user_id: int, role: UserRole) -> bool:
        """Delete the user unless it has ``role``. Returns whether a row was removed."""
        result = await self.db.execute(
            delete(User)
            .where(User.id == user_id, User.role != role)
            .returning(User.id)
            .execution_options(synchronize_session="fetch")
        )
        return result.scalar_one_or_none() is not None

    async def reload(self, user_id: int) -> Optional[User]:
        """Re-read a user from the database, overwriting any cached state"""
        result = await self.db.execute(
            select(User)
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
