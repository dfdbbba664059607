"""Pytest fixtures for testing."""
import os
from collections.abc import AsyncGenerator, Generator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from testcontainers.postgres import PostgresContainer

from models import Base, User
from services.exceptions import MailDeliveryError

TEST_PASSWORD = "correct-horse-battery"


class FakeMailSender:
    """Mail sender double that records messages instead of talking SMTP."""

    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []
        self.fail = False

    async def send(self, to: str, subject: str, body: str) -> None:
        if self.fail:
            raise MailDeliveryError("Failed to send email")
        self.sent.append((to, subject, body))

    def last_code_for(self, email: str) -> str:
        """Extract the 6-digit code from the most recent message to ``email``."""
        for to, _subject, body in reversed(self.sent):
            if to == email:
                return next(word for word in body.replace(".", " ").split() if word.isdigit())
        raise AssertionError(f"No mail sent to {email}")


@pytest.fixture(scope="session")
def database_url() -> Generator[str]:
    """
    Provide a PostgreSQL URL for the test session.

    Uses TEST_DATABASE_URL when set, otherwise starts a PostgreSQL container.
    The URL is exported as DATABASE_URL before any app imports read settings.
    """
    url = os.environ.get("TEST_DATABASE_URL")
    if url:
        os.environ["DATABASE_URL"] = url
        yield url
        return

    with PostgresContainer("postgres:16", driver="asyncpg") as postgres:
        url = postgres.get_connection_url()
        os.environ["DATABASE_URL"] = url
        yield url


@pytest.fixture
async def async_engine(database_url: str) -> AsyncGenerator[AsyncEngine]:
    """Create an async engine for testing."""
    engine = create_async_engine(database_url, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_connection(async_engine: AsyncEngine) -> AsyncGenerator[AsyncConnection]:
    """
    Create a connection with a transaction that will be rolled back after the test.

    This provides test isolation - each test runs in its own transaction
    that is rolled back, so tests don't affect each other.
    """
    async with async_engine.connect() as connection:
        transaction = await connection.begin()
        try:
            yield connection
        finally:
            await transaction.rollback()


@pytest.fixture
async def db_session(db_connection: AsyncConnection) -> AsyncGenerator[AsyncSession]:
    """
    Create an async session bound to the test transaction.

    Uses savepoints, so rollbacks issued by services never end the outer test
    transaction, which is rolled back when the test finishes.
    """
    session_factory = async_sessionmaker(
        bind=db_connection,
        class_=AsyncSession,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )

    async with session_factory() as session:
        yield session


@pytest.fixture
def mail_sender() -> FakeMailSender:
    """Recording mail sender injected in place of the SMTP one."""
    return FakeMailSender()


async def create_user(
    db_session: AsyncSession,
    email: str,
    nickname: str = "tester",
    password: str = TEST_PASSWORD,
) -> User:
    """Insert a registered user directly, bypassing the email gate."""
    from core.passwords import hash_password

    user = User(
        email=email,
        password_hash=hash_password(password),
        nickname=nickname,
        email_verified=True,
    )
    db_session.add(user)
    await db_session.flush()
    await db_session.refresh(user)
    return user


def auth_headers(user: User) -> dict[str, str]:
    """Bearer header carrying a fresh access token for ``user``."""
    from core.auth import create_access_token
    from core.config import get_settings

    return {"Authorization": f"Bearer {create_access_token(user.id, get_settings())}"}


@pytest.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create the default test user."""
    return await create_user(db_session, "user@example.com", nickname="alice")


@pytest.fixture
async def other_user(db_session: AsyncSession) -> User:
    """Create a second user for isolation tests."""
    return await create_user(db_session, "other@example.com", nickname="bob")


@pytest.fixture
async def app(
    db_session: AsyncSession,
    mail_sender: FakeMailSender,
) -> AsyncGenerator[FastAPI]:
    """The FastAPI app with database session and mail sender overrides."""
    # Clear the settings cache so it picks up DATABASE_URL from environment
    from core.config import get_settings

    get_settings.cache_clear()

    from api.main import app as fastapi_app
    from core.mail import get_mail_sender
    from db.session import get_async_session

    async def override_get_async_session() -> AsyncGenerator[AsyncSession]:
        yield db_session

    fastapi_app.dependency_overrides[get_async_session] = override_get_async_session
    fastapi_app.dependency_overrides[get_mail_sender] = lambda: mail_sender

    yield fastapi_app

    fastapi_app.dependency_overrides.clear()


def make_client(app: FastAPI, user: User | None = None) -> AsyncClient:
    """Build a client for ``app``, authenticated as ``user`` when given."""
    return AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=auth_headers(user) if user is not None else None,
    )


@pytest.fixture
async def anon_client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    """Unauthenticated test client."""
    async with make_client(app) as test_client:
        yield test_client


@pytest.fixture
async def client(app: FastAPI, test_user: User) -> AsyncGenerator[AsyncClient]:
    """Test client authenticated as ``test_user``."""
    async with make_client(app, test_user) as test_client:
        yield test_client


@pytest.fixture
async def other_client(app: FastAPI, other_user: User) -> AsyncGenerator[AsyncClient]:
    """Test client authenticated as ``other_user``."""
    async with make_client(app, other_user) as test_client:
        yield test_client
