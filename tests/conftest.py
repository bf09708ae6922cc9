"""
Pytest configuration and fixtures.
"""

from typing import AsyncGenerator
import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from invoicedesk.core.database import Base, get_db
from invoicedesk.core.security import create_token_pair, get_password_hash
from invoicedesk.main import app
from invoicedesk.models.user import User


# One in-memory SQLite database per test
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def test_engine():
    """Create a fresh test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client sharing the test session, one transaction per request."""

    async def override_get_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db_session: AsyncSession, email: str, full_name: str) -> User:
    user = User(
        email=email,
        hashed_password=get_password_hash("testpassword123"),
        full_name=full_name,
        business_name=f"{full_name} Ltd",
        is_active=True,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create a test user."""
    return await _create_user(db_session, "test@example.com", "Test User")


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """A second user, for ownership checks."""
    return await _create_user(db_session, "other@example.com", "Other User")


def auth_headers(user: User) -> dict[str, str]:
    """Bearer header carrying a fresh access token for ``user``."""
    tokens = create_token_pair(user.id, user.email)
    return {"Authorization": f"Bearer {tokens.access_token}"}


@pytest.fixture
async def auth_client(
    client: AsyncClient,
    test_user: User,
) -> AsyncClient:
    """Create authenticated test client."""
    response = await client.post(
        "/api/v1/auth/login",
        json={
            "email": "test@example.com",
            "password": "testpassword123",
        },
    )
    tokens = response.json()

    client.headers["Authorization"] = f"Bearer {tokens['access_token']}"

    return client


def make_draft(**overrides) -> dict:
    """Valid invoice draft payload."""
    draft = {
        "company": "Acme Corp",
        "company_address": "1 Main St",
        "client": "Globex",
        "client_address": "2 Side St",
        "invoice_number": "INV-2026-0001",
        "due_date": "2026-11-18",
        "items": [
            {"description": "Consulting", "quantity": "2", "price": "10", "tax_rate": "10"},
            {"description": "Hosting", "quantity": "1", "price": "5.50", "tax_rate": ""},
        ],
    }
    draft.update(overrides)
    return draft
