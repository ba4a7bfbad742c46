"""
Pytest fixtures for testing.
"""
import os

# Cheap hashes for tests; must be set before jobboard.config is imported
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("EMAIL_MODE", "dev")

import pytest
import pytest_asyncio
from typing import AsyncGenerator, Callable

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

# Import database module BEFORE app to allow override
import jobboard.database
from jobboard.database import Base, enable_sqlite_foreign_keys
# Import ALL models so Base.metadata knows about all tables
from jobboard.models import User, UserRole, Job, JobStatus
from jobboard.services.passwords import hash_password
from jobboard.services.tokens import create_access_token
from jobboard.services.users import token_payload_for

# Now import app (after we can override database)
from jobboard.main import app as fastapi_app


# Test database URL (use in-memory SQLite for fast tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

TEST_PASSWORD = "correct-horse-battery"


@pytest_asyncio.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create a fresh database for each test.
    Ensures cleanup happens even if test fails.
    """
    # StaticPool keeps one connection alive so every session sees the
    # same in-memory database
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(test_engine)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Replace the app's engine and sessionmaker so get_db() uses the test DB
    original_engine = jobboard.database.engine
    original_sessionmaker = jobboard.database.AsyncSessionLocal

    jobboard.database.engine = test_engine
    jobboard.database.AsyncSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )

    session = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)()

    try:
        yield session
    finally:
        await session.close()
        async with test_engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await test_engine.dispose()

        jobboard.database.engine = original_engine
        jobboard.database.AsyncSessionLocal = original_sessionmaker


@pytest_asyncio.fixture
async def async_client(db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    Create an async HTTP client for testing endpoints.

    The db fixture already replaced jobboard.database.engine with the test
    engine, so all endpoints will automatically use the test database.
    """
    transport = ASGITransport(app=fastapi_app)

    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        follow_redirects=True  # Follow 307 redirects for trailing slashes
    ) as client:
        yield client


@pytest_asyncio.fixture
async def make_user(db: AsyncSession) -> Callable:
    """Factory for users with a known password."""
    async def _make_user(email: str, role: UserRole = UserRole.CANDIDATE, **fields) -> User:
        user = User(
            name=fields.pop("name", email.split("@")[0].title()),
            email=email,
            password_hash=hash_password(fields.pop("password", TEST_PASSWORD)),
            role=role,
            **fields
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make_user


@pytest_asyncio.fixture
async def employer(make_user) -> User:
    return await make_user("employer@acme.com", UserRole.EMPLOYER, name="Acme Hiring", company="Acme")


@pytest_asyncio.fixture
async def other_employer(make_user) -> User:
    return await make_user("hr@globex.com", UserRole.EMPLOYER, name="Globex HR", company="Globex")


@pytest_asyncio.fixture
async def candidate(make_user) -> User:
    return await make_user(
        "candidate@example.com",
        UserRole.CANDIDATE,
        name="Casey Candidate",
        phone="555-0100",
        location="Berlin",
        skills=["Python", "FastAPI"],
    )


@pytest_asyncio.fixture
async def admin(make_user) -> User:
    return await make_user("admin@jobboard.com", UserRole.ADMIN, name="Admin")


def _auth_headers(user: User) -> dict:
    """Bearer header with a freshly minted access token for `user`."""
    return {"Authorization": f"Bearer {create_access_token(token_payload_for(user))}"}


@pytest.fixture
def employer_headers(employer: User) -> dict:
    return _auth_headers(employer)


@pytest.fixture
def other_employer_headers(other_employer: User) -> dict:
    return _auth_headers(other_employer)


@pytest.fixture
def candidate_headers(candidate: User) -> dict:
    return _auth_headers(candidate)


@pytest.fixture
def admin_headers(admin: User) -> dict:
    return _auth_headers(admin)


def _job_payload(**overrides) -> dict:
    """A valid POST /api/jobs body."""
    payload = {
        "title": "Senior Python Engineer",
        "description": "Build APIs with FastAPI and PostgreSQL.",
        "requirements": ["5+ years Python"],
        "responsibilities": ["Own the backend"],
        "company": "Acme",
        "location": "Berlin, Germany",
        "type": "FULL_TIME",
        "experience": "SENIOR",
        "salaryMin": 70000,
        "salaryMax": 90000,
        "salaryCurrency": "EUR",
        "skills": ["Python", "FastAPI"],
        "benefits": ["Remote budget"],
        "remote": True,
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def active_job(db: AsyncSession, employer: User) -> Job:
    """An ACTIVE job owned by `employer`."""
    job = Job(
        employer_id=employer.id,
        title="Backend Developer",
        description="Python services",
        company="Acme",
        location="Berlin",
        type="FULL_TIME",
        experience="MID",
        salary_min=50000,
        salary_max=65000,
        salary_currency="EUR",
        skills=["Python", "SQL"],
        status=JobStatus.ACTIVE.value,
    )
    db.add(job)
    await db.commit()
    await db.refresh(job)
    return job


@pytest.fixture
def headers_for() -> Callable:
    """Build Authorization headers for any user."""
    return _auth_headers


@pytest.fixture
def job_payload() -> Callable:
    """Build a valid job body, with keyword overrides."""
    return _job_payload
