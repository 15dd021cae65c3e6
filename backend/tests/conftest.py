"""
Bac-Hub - Test Configuration and Fixtures
"""
import os
from datetime import timedelta
from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool
from faker import Faker

# Set testing environment before the settings object is built
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['STORAGE_BACKEND'] = 'database'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['SEED_ON_STARTUP'] = 'false'
os.environ['RATE_LIMIT_ENABLED'] = 'false'
os.environ['BCRYPT_ROUNDS'] = '4'

from bachub.main import app
from bachub.core.database import Base, register_sqlite_functions
from bachub.core.rate_limiter import limiter
from bachub.core.security import get_password_hash, create_session_cookie
from bachub.models import User, Subject, Document, UserRole
from bachub.schemas import UserCreate, SubjectCreate, DocumentCreate
from bachub.storage import Storage, MemoryStorage, DatabaseStorage, get_storage

fake = Faker()

limiter.enabled = False

# Test database setup
TEST_DATABASE_URL = 'sqlite+aiosqlite:///./test.db'
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
register_sqlite_functions(test_engine)
TestSessionLocal = async_sessionmaker(
    bind=test_engine,
    class_=AsyncSession,
    expire_on_commit=False
)


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
def db_storage(db_session: AsyncSession) -> DatabaseStorage:
    return DatabaseStorage(db_session)


@pytest.fixture(params=['memory', 'database'])
def storage(request, db_session: AsyncSession) -> Storage:
    """Each storage test runs against both backends"""
    if request.param == 'memory':
        return MemoryStorage()
    return DatabaseStorage(db_session)


@pytest.fixture
async def client(db_storage: DatabaseStorage) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with storage override"""
    async def override_get_storage():
        yield db_storage

    app.dependency_overrides[get_storage] = override_get_storage

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


async def make_user(storage: Storage, role: str = UserRole.USER.value, password: str = 'testpassword123') -> User:
    return await storage.create_user(UserCreate(
        username=fake.unique.user_name(),
        password=get_password_hash(password),
        email=fake.unique.email(),
        full_name=fake.name(),
        role=role,
    ))


async def make_subject(storage: Storage, name: str = None, color: str = 'blue') -> Subject:
    return await storage.create_subject(SubjectCreate(
        name=name or fake.unique.word().capitalize(),
        color=color,
    ))


async def make_document(storage: Storage, subject: Subject, uploader: User, **overrides) -> Document:
    data = {
        'title': fake.sentence(nb_words=4),
        'description': fake.paragraph(),
        'year': 2023,
        'subject_id': subject.id,
        'file_name': f'{fake.word()}.pdf',
        'file_size': 1024,
        'uploaded_by': uploader.id,
    }
    data.update(overrides)
    return await storage.create_document(DocumentCreate(**data))


async def session_headers(storage: Storage, user: User) -> dict:
    """Authorization header carrying a live session for ``user``"""
    ttl = timedelta(hours=1)
    session = await storage.create_session(user.id, ttl)
    token = create_session_cookie(user.id, session.token, ttl)
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
async def test_user(db_storage: DatabaseStorage) -> User:
    """Create a test user"""
    return await make_user(db_storage)


@pytest.fixture
async def admin_user(db_storage: DatabaseStorage) -> User:
    """Create an admin test user"""
    return await make_user(db_storage, role=UserRole.ADMIN.value, password='adminpassword123')


@pytest.fixture
async def auth_headers(db_storage: DatabaseStorage, test_user: User) -> dict:
    """Generate authentication headers for test user"""
    return await session_headers(db_storage, test_user)


@pytest.fixture
async def admin_auth_headers(db_storage: DatabaseStorage, admin_user: User) -> dict:
    """Generate authentication headers for admin user"""
    return await session_headers(db_storage, admin_user)


@pytest.fixture
async def subject(db_storage: DatabaseStorage) -> Subject:
    return await make_subject(db_storage, name='Mathématiques', color='blue')


@pytest.fixture
async def document(db_storage: DatabaseStorage, subject: Subject, admin_user: User) -> Document:
    return await make_document(db_storage, subject, admin_user, title='Bac D', year=2023)
