"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from zapshift.app.main import app
from zapshift.app.db.session import get_db, Base
from zapshift.app.core.exceptions import ForbiddenError
from zapshift.app.core.identity import Principal, get_identity_verifier
from zapshift.app.models.account import Account
from zapshift.app.models.enums import AccountRole
from zapshift.app.services.payment_gateway import PaymentIntent, get_payment_gateway

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self.expiries = {}

    async def ping(self):
        return True

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        self.expiries[key] = ex
        return True

    async def delete(self, key):
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def flushdb(self):
        self.store = {}
        self.expiries = {}


class FakeIdentityVerifier:
    """
    Stands in for the identity provider.

    The bearer token is the caller's email; the literal token ``expired``
    (or anything without an ``@``) is rejected like a bad ID token.
    """

    def __init__(self):
        self.calls = 0

    async def verify(self, token: str) -> Principal:
        self.calls += 1
        if "@" not in token:
            raise ForbiddenError("Forbidden: invalid token")
        return Principal(subject=f"uid-{token}", email=token, email_verified=True)


class FakePaymentGateway:
    """Records requested amounts instead of calling the processor."""

    def __init__(self):
        self.requests = []

    async def create_payment_intent(self, amount, metadata=None):
        self.requests.append({"amount": amount, "metadata": metadata})
        return PaymentIntent(
            id=f"pi_test_{len(self.requests)}",
            client_secret=f"pi_test_{len(self.requests)}_secret",
            amount=amount,
            currency="usd",
        )


@pytest.fixture(scope="session")
def identity_verifier():
    return FakeIdentityVerifier()


@pytest.fixture
def payment_gateway():
    gateway = FakePaymentGateway()
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield gateway
    app.dependency_overrides.pop(get_payment_gateway, None)


@pytest.fixture(scope="session", autouse=True)
def apply_overrides(identity_verifier):
    """Apply overrides once for the session."""

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_verifier] = lambda: identity_verifier
    yield

    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def auth():
    """Build an Authorization header for the fake identity provider."""
    def _auth(email: str) -> dict:
        return {"Authorization": f"Bearer {email}"}
    return _auth


@pytest.fixture
def make_account(db_session):
    """Insert an account directly, bypassing the API."""
    async def _make_account(email: str, role: AccountRole = AccountRole.USER) -> Account:
        account = Account(email=email, role=role)
        db_session.add(account)
        await db_session.commit()
        await db_session.refresh(account)
        return account
    return _make_account


@pytest.fixture
async def admin_account(make_account):
    return await make_account("admin@zapshift.com", AccountRole.ADMIN)


@pytest.fixture
async def user_account(make_account):
    return await make_account("user@zapshift.com", AccountRole.USER)


@pytest.fixture
def mock_redis():
    return MockRedis()


@pytest.fixture
def session_factory():
    return TestingSessionLocal
