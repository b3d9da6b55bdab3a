"""
Database Seed Data Module

Creates the bootstrap admin and, optionally, sample accounts for manual testing.
Run with: python -m trackerpro.db.seed_data  (or the ``trackerpro-seed`` script).
Sample users are only created when SEED_SAMPLE_USERS is true.
"""
import asyncio
from typing import List, Optional

from trackerpro.core.config import settings
from trackerpro.core.database import AsyncSessionLocal, init_db, close_db
from trackerpro.core.exceptions import BusinessRuleError
from trackerpro.core.logging_config import logger
from trackerpro.core.security import password_hasher
from trackerpro.models.user import UserRole, UserStatus
from trackerpro.repositories.user_repository import UserRepository
from trackerpro.schemas.user import UserView
from trackerpro.services.account_service import AccountService


# ==================== Sample Data Constants ====================

SAMPLE_PASSWORD = "password123"

SAMPLE_USERS = [
    # Awaiting approval
    {"first_name": "John", "last_name": "Smith", "email": "john.s@example.com", "mobile": "9876543210", "role": UserRole.STUDENT, "status": UserStatus.PENDING},
    {"first_name": "Sarah", "last_name": "Johnson", "email": "sarah.j@example.com", "mobile": "9876543211", "role": UserRole.FACULTY, "status": UserStatus.PENDING},
    {"first_name": "Mike", "last_name": "Williams", "email": "mike.w@example.com", "mobile": "9876543212", "role": UserRole.HR, "status": UserStatus.PENDING},

    # Already approved
    {"first_name": "Alice", "last_name": "Brown", "email": "alice.b@example.com", "mobile": "9876543213", "role": UserRole.STUDENT, "status": UserStatus.ACTIVE},
    {"first_name": "Robert", "last_name": "Davis", "email": "robert.d@example.com", "mobile": "9876543214", "role": UserRole.FACULTY, "status": UserStatus.ACTIVE},
    {"first_name": "Emily", "last_name": "Wilson", "email": "emily.w@example.com", "mobile": "9876543215", "role": UserRole.HR, "status": UserStatus.ACTIVE},
]


def build_service(session) -> AccountService:
    return AccountService(UserRepository(session), password_hasher)


async def seed_admin_user(service: AccountService) -> Optional[UserView]:
    """Create the configured admin if its email is not registered yet"""
    logger.info("Checking for default admin user...")
    return await service.ensure_admin(
        email=settings.ADMIN_EMAIL,
        password=settings.ADMIN_PASSWORD,
        first_name=settings.ADMIN_FIRST_NAME,
        last_name=settings.ADMIN_LAST_NAME,
        mobile=settings.ADMIN_MOBILE,
    )


async def seed_sample_users(service: AccountService) -> List[UserView]:
    """Create the sample accounts that do not exist yet; returns the new ones"""
    logger.info("Creating sample users for testing...")
    created = []

    for data in SAMPLE_USERS:
        if await service.repository.exists_by_email(data["email"]):
            continue
        try:
            user = await service.register(
                first_name=data["first_name"],
                last_name=data["last_name"],
                email=data["email"],
                password=SAMPLE_PASSWORD,
                confirm_password=SAMPLE_PASSWORD,
                mobile=data["mobile"],
                role_category=data["role"].value,
            )
            if data["status"] == UserStatus.ACTIVE:
                user = await service.approve(user.id)
        except BusinessRuleError as e:
            logger.warning(f"Sample user {data['email']} skipped: {e.message}")
            continue

        logger.debug(f"Sample user created: {user.email} - {user.status.value}")
        created.append(user)

    logger.info(f"Sample users created: {len(created)}")
    return created


async def seed_accounts(service: AccountService, include_samples: Optional[bool] = None) -> None:
    """Seed the admin; sample users follow SEED_SAMPLE_USERS unless include_samples is given"""
    if include_samples is None:
        include_samples = settings.SEED_SAMPLE_USERS
    await seed_admin_user(service)
    if include_samples:
        await seed_sample_users(service)


async def seed_all(include_samples: Optional[bool] = None) -> None:
    await init_db()
    try:
        async with AsyncSessionLocal() as session:
            await seed_accounts(build_service(session), include_samples)
    finally:
        await close_db()


def main() -> None:
    """Console entry point"""
    asyncio.run(seed_all())


if __name__ == "__main__":
    main()
