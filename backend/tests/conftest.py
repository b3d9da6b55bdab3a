"""
TrackerPro - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['ADMIN_EMAIL'] = 'admin@trackerpro.com'
os.environ['ADMIN_PASSWORD'] = 'admin-password-123'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['SEED_SAMPLE_USERS'] = 'false'

from trackerpro.main import app
from trackerpro.core.database import Base, get_db
from trackerpro.core.security import password_hasher, create_access_token
from trackerpro.models.user import User, UserRole, UserStatus
from trackerpro.repositories.user_repository import UserRepository
from trackerpro.services.account_service import AccountService

fake = Faker()

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False
)

TEST_PASSWORD = 'testpassword123'
ADMIN_PASSWORD = 'adminpassword123'


@pytest.fixture(scope='function')
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a fresh database session for each test"""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with TestSessionLocal() as session:
        yield session
        await session.rollback()

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override"""
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def repository(db_session: AsyncSession) -> UserRepository:
    return UserRepository(db_session)


@pytest.fixture
def service(repository: UserRepository) -> AccountService:
    return AccountService(repository, password_hasher)


async def create_user(
    session: AsyncSession,
    role: UserRole = UserRole.STUDENT,
    status: UserStatus = UserStatus.ACTIVE,
    password: str = TEST_PASSWORD,
    **overrides
) -> User:
    """Insert a user directly, bypassing the service rules"""
    user = User(
        first_name=overrides.pop('first_name', fake.first_name()),
        last_name=overrides.pop('last_name', fake.last_name()),
        email=overrides.pop('email', fake.unique.email().lower()),
        mobile=overrides.pop('mobile', fake.unique.numerify('9#########')),
        hashed_password=password_hasher.hash(password),
        role=role,
        status=status,
        **overrides
    )
    return await UserRepository(session).save(user)


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create an ACTIVE student"""
    user = await create_user(db_session)
    await db_session.commit()
    return user


@pytest.fixture
async def pending_user(db_session: AsyncSession) -> User:
    """Create a PENDING faculty member"""
    user = await create_user(db_session, role=UserRole.FACULTY, status=UserStatus.PENDING)
    await db_session.commit()
    return user


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    """Create an admin test user"""
    user = await create_user(db_session, role=UserRole.ADMIN, password=ADMIN_PASSWORD)
    await db_session.commit()
    return user


def make_auth_headers(user: User) -> dict:
    token_data = {
        'sub': str(user.id),
        'email': user.email,
        'role': user.role.value
    }
    token = create_access_token(token_data)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return make_auth_headers(test_user)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    """Generate authentication headers for admin user"""
    return make_auth_headers(admin_user)


@pytest.fixture
def user_factory(db_session: AsyncSession):
    """Async factory: ``await user_factory(role=..., status=...)`` inserts and commits a user"""
    async def _create(**kwargs) -> User:
        user = await create_user(db_session, **kwargs)
        await db_session.commit()
        return user
    return _create
