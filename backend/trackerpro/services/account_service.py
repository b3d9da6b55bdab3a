"""
Account Service - Business logic for user accounts

Handles:
- Registration and authentication
- The approval workflow (PENDING -> ACTIVE / REJECTED)
- Status toggling (ACTIVE <-> INACTIVE), updates and deletion
- Dashboard counts and bootstrap admin seeding

Every mutating operation checks its precondition inside the same write it
performs (conditional UPDATE / DELETE or a row lock), then commits.
"""

from typing import Optional, List, Dict, Any, Union

from sqlalchemy.exc import IntegrityError

from trackerpro.core.exceptions import (
    PasswordMismatchError,
    RequiredFieldError,
    DuplicateEmailError,
    DuplicateMobileError,
    InvalidRoleError,
    InvalidStatusTransitionError,
    ProtectedAccountError,
    StaleUserStateError,
    UserNotFoundError,
    InvalidCredentialsError,
    AccountNotActiveError,
)
from trackerpro.core.logging_config import get_logger
from trackerpro.core.security import BcryptPasswordHasher
from trackerpro.models.user import User, UserRole, UserStatus
from trackerpro.repositories.user_repository import UserRepository
from trackerpro.schemas.user import UserView, to_user_view

logger = get_logger("services.account")

_NOT_ACTIVE_MESSAGES = {
    UserStatus.PENDING: "Your account is pending approval. Please contact administrator.",
    UserStatus.INACTIVE: "Your account has been deactivated. Please contact administrator.",
    UserStatus.REJECTED: "Your account registration was rejected. Please contact administrator.",
}

_TOGGLED = {
    UserStatus.ACTIVE: UserStatus.INACTIVE,
    UserStatus.INACTIVE: UserStatus.ACTIVE,
}


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _require_first_name(value: Optional[str]) -> str:
    value = _blank_to_none(value)
    if value is None:
        raise RequiredFieldError("first_name", "First name is required")
    return value


class AccountService:
    """Service for registering, authenticating and administering users"""

    def __init__(self, repository: UserRepository, hasher: BcryptPasswordHasher):
        self.repository = repository
        self.hasher = hasher

    @property
    def db(self):
        return self.repository.db

    # ==================== REGISTRATION ====================

    async def register(
        self,
        first_name: str,
        email: str,
        password: str,
        confirm_password: str,
        role_category: str,
        last_name: Optional[str] = None,
        mobile: Optional[str] = None,
    ) -> UserView:
        """
        Register a new, PENDING user.

        Args:
            first_name: Required first name
            email: Login email, stored lower-cased
            password: Plaintext password
            confirm_password: Must equal ``password``
            role_category: Role name or display name (ADMIN not allowed)
            last_name: Optional last name
            mobile: Optional mobile number, unique when given

        Returns:
            View of the created user

        Raises:
            RequiredFieldError, PasswordMismatchError, InvalidRoleError,
            DuplicateEmailError, DuplicateMobileError
        """
        first_name = _require_first_name(first_name)
        if password != confirm_password:
            raise PasswordMismatchError()

        role = UserRole.from_string(role_category)
        if role == UserRole.ADMIN:
            raise InvalidRoleError(role_category, "Admin accounts cannot be registered")

        email = normalize_email(email)
        mobile = _blank_to_none(mobile)

        if await self.repository.exists_by_email(email):
            raise DuplicateEmailError(email)
        if mobile and await self.repository.exists_by_mobile(mobile):
            raise DuplicateMobileError(mobile)

        user = User(
            first_name=first_name,
            last_name=_blank_to_none(last_name),
            email=email,
            hashed_password=self.hasher.hash(password),
            mobile=mobile,
            role=role,
            status=UserStatus.PENDING,
        )
        user = await self._save_and_commit(user)

        logger.info(f"Registered user {user.id} ({user.email}) as {role.value}, pending approval")
        return to_user_view(user)

    # ==================== AUTHENTICATION ====================

    async def authenticate(self, email: str, password: str) -> UserView:
        """
        Check credentials and the approval gate.

        Admins bypass the status check; everyone else must be ACTIVE.
        """
        email = normalize_email(email)
        user = await self.repository.get_by_email(email)

        if user is None or not self.hasher.verify(password, user.hashed_password):
            logger.log_auth_event("login", success=False, user_email=email,
                                  reason="invalid credentials")
            raise InvalidCredentialsError()

        if user.role != UserRole.ADMIN and user.status != UserStatus.ACTIVE:
            message = _NOT_ACTIVE_MESSAGES.get(user.status, "Account access denied.")
            logger.log_auth_event("login", success=False, user_email=email,
                                  reason=f"status {user.status.value}")
            raise AccountNotActiveError(message, status=user.status.value)

        logger.log_auth_event("login", success=True, user_email=email, user_id=user.id)
        return to_user_view(user)

    async def get_user(self, user_id: int) -> UserView:
        user = await self.repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return to_user_view(user)

    # ==================== APPROVAL WORKFLOW ====================

    async def list_pending(self) -> List[UserView]:
        """PENDING users, newest first"""
        users = await self.repository.list_pending()
        return [to_user_view(u) for u in users]

    async def approve(self, user_id: int) -> UserView:
        """PENDING -> ACTIVE"""
        return await self._transition_from_pending(user_id, UserStatus.ACTIVE, "approve")

    async def reject(self, user_id: int) -> UserView:
        """PENDING -> REJECTED"""
        return await self._transition_from_pending(user_id, UserStatus.REJECTED, "reject")

    async def _transition_from_pending(
        self,
        user_id: int,
        new_status: UserStatus,
        action: str
    ) -> UserView:
        user = await self.repository.update_status_if(user_id, UserStatus.PENDING, new_status)
        if user is None:
            await self.db.rollback()
            current = await self.repository.reload(user_id)
            if current is None:
                logger.log_admin_action(action, user_id, success=False, reason="not found")
                raise UserNotFoundError(user_id)
            logger.log_admin_action(action, user_id, success=False,
                                    reason=f"status {current.status.value}")
            if current.status == UserStatus.PENDING:
                raise StaleUserStateError(user_id)
            raise InvalidStatusTransitionError(
                f"Only pending users can be {action}d",
                current_status=current.status.value
            )

        await self.db.commit()
        logger.log_admin_action(action, user_id, new_status=new_status.value)
        return to_user_view(user)

    # ==================== USER MANAGEMENT ====================

    async def list_all(self) -> List[UserView]:
        """All non-admin users, newest first, any status"""
        users = await self.repository.list_excluding_role(UserRole.ADMIN)
        return [to_user_view(u) for u in users]

    async def list_by_role(self, role: Union[UserRole, str]) -> List[UserView]:
        """Users with exactly ``role``, any status"""
        if not isinstance(role, UserRole):
            role = UserRole.from_string(role)
        users = await self.repository.list_by_role(role)
        return [to_user_view(u) for u in users]

    async def update(self, user_id: int, fields: Dict[str, Any]) -> UserView:
        """
        Apply a partial update.

        Recognised keys: first_name, last_name, email, mobile (or mobile_no),
        password with confirm_password, role_category. Keys that are absent
        are left alone; an explicit None clears last_name / mobile.
        """
        fields = dict(fields)
        if "mobile_no" in fields:
            fields["mobile"] = fields.pop("mobile_no")

        first_name = fields.get("first_name")
        if first_name is not None:
            first_name = _require_first_name(first_name)

        password = fields.get("password")
        if password is not None and password != fields.get("confirm_password"):
            raise PasswordMismatchError()

        new_role: Optional[UserRole] = None
        if fields.get("role_category") is not None:
            new_role = UserRole.from_string(fields["role_category"])

        user = await self.repository.get_for_update(user_id)
        if user is None:
            raise UserNotFoundError(user_id)

        if new_role is not None and new_role != user.role:
            if user.role == UserRole.ADMIN:
                await self.db.rollback()
                raise ProtectedAccountError("Cannot change admin user role")
            if new_role == UserRole.ADMIN:
                await self.db.rollback()
                raise InvalidRoleError(fields["role_category"], "Admin role cannot be assigned")
            user.role = new_role

        if first_name is not None:
            user.first_name = first_name
        if "last_name" in fields:
            user.last_name = _blank_to_none(fields["last_name"])

        if fields.get("email") is not None:
            email = normalize_email(fields["email"])
            if email != user.email:
                if await self.repository.exists_by_email(email, exclude_id=user_id):
                    await self.db.rollback()
                    raise DuplicateEmailError(email)
                user.email = email

        if "mobile" in fields:
            mobile = _blank_to_none(fields["mobile"])
            if mobile != user.mobile:
                if mobile and await self.repository.exists_by_mobile(mobile, exclude_id=user_id):
                    await self.db.rollback()
                    raise DuplicateMobileError(mobile)
                user.mobile = mobile

        if password is not None:
            user.hashed_password = self.hasher.hash(password)

        user = await self._save_and_commit(user)
        logger.log_admin_action("update", user_id, fields=sorted(k for k in fields if "password" not in k))
        return to_user_view(user)

    async def delete(self, user_id: int) -> None:
        """Remove a non-admin user"""
        if not await self.repository.delete_if_not_role(user_id, UserRole.ADMIN):
            await self.db.rollback()
            current = await self.repository.reload(user_id)
            if current is None:
                logger.log_admin_action("delete", user_id, success=False, reason="not found")
                raise UserNotFoundError(user_id)
            logger.log_admin_action("delete", user_id, success=False, reason="admin account")
            raise ProtectedAccountError("Cannot delete admin user")

        await self.db.commit()
        logger.log_admin_action("delete", user_id)

    async def toggle_status(self, user_id: int) -> UserView:
        """ACTIVE <-> INACTIVE; admins and PENDING/REJECTED users are refused"""
        user = await self.repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        if user.role == UserRole.ADMIN:
            logger.log_admin_action("toggle_status", user_id, success=False, reason="admin account")
            raise ProtectedAccountError("Cannot modify admin user status")

        current_status = user.status
        if current_status not in _TOGGLED:
            logger.log_admin_action("toggle_status", user_id, success=False,
                                    reason=f"status {current_status.value}")
            raise InvalidStatusTransitionError(
                "Only active or inactive users can change status",
                current_status=current_status.value
            )

        updated = await self.repository.update_status_if(
            user_id, current_status, _TOGGLED[current_status], exclude_role=UserRole.ADMIN
        )
        if updated is None:
            await self.db.rollback()
            logger.log_admin_action("toggle_status", user_id, success=False,
                                    reason="changed concurrently")
            if await self.repository.reload(user_id) is None:
                raise UserNotFoundError(user_id)
            raise StaleUserStateError(user_id)

        await self.db.commit()
        logger.log_admin_action("toggle_status", user_id, new_status=updated.status.value)
        return to_user_view(updated)

    # ==================== COUNTS ====================

    async def count_pending(self) -> int:
        return await self.repository.count_by_status(UserStatus.PENDING)

    async def count_active_by_role(self, role: UserRole) -> int:
        return await self.repository.count_by_role_and_status(role, UserStatus.ACTIVE)

    # ==================== BOOTSTRAP ====================

    async def ensure_admin(
        self,
        email: str,
        password: str,
        first_name: str = "Admin",
        last_name: Optional[str] = "User",
        mobile: Optional[str] = None,
    ) -> Optional[UserView]:
        """
        Create the bootstrap ACTIVE admin unless the email already exists.

        Returns the created admin, or None when nothing was created.
        """
        email = normalize_email(email)
        if await self.repository.exists_by_email(email):
            logger.info(f"Admin user already exists: {email}")
            return None

        mobile = _blank_to_none(mobile)
        if mobile and await self.repository.exists_by_mobile(mobile):
            logger.warning(f"Admin mobile {mobile} already taken, seeding admin without mobile")
            mobile = None

        admin = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            hashed_password=self.hasher.hash(password),
            mobile=mobile,
            role=UserRole.ADMIN,
            status=UserStatus.ACTIVE,
        )
        try:
            admin = await self._save_and_commit(admin)
        except (DuplicateEmailError, DuplicateMobileError) as e:
            # Another process seeded first
            logger.info(f"Admin user not created: {e.message}")
            return None

        logger.info(f"Created admin user: {email}")
        return to_user_view(admin)

    # ==================== HELPERS ====================

    async def _save_and_commit(self, user: User) -> User:
        """Flush and commit, translating UNIQUE violations into duplicate errors"""
        user_id, email, mobile = user.id, user.email, user.mobile
        try:
            user = await self.repository.save(user)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            if await self.repository.exists_by_email(email, exclude_id=user_id):
                raise DuplicateEmailError(email)
            if mobile and await self.repository.exists_by_mobile(mobile, exclude_id=user_id):
                raise DuplicateMobileError(mobile)
            raise
        return user
