"""
Shared fixtures: an in-memory SQLite store behind the same ``Database``
handle the app uses, a seeded catalog, and an HTTP client.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-jwt-secret-0123456789abcdef0123456789")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from auth.password import hash_password
from database.models import Base, Book, User
from database.session import Database
from main import create_app

CATALOG = [
    ("The Great Gatsby", "F. Scott Fitzgerald", True),
    ("1984", "George Orwell", False),
    ("To Kill a Mockingbird", "Harper Lee", True),
    ("Pride and Prejudice", "Jane Austen", True),
    ("Moby-Dick", "Herman Melville", False),
    ("Animal Farm", "George Orwell", True),
    ("50% Off", "Ann Sale", True),
    ("5000 Off", "Ann Sale", False),
    ("Vol 1_3", "Index Writer", True),
    ("Vol 123", "Index Writer", True),
]


@pytest_asyncio.fixture
async def database():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    db = Database(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database):
    async with database.session_factory() as s:
        yield s


@pytest_asyncio.fixture
async def books(database):
    async with database.session() as s:
        s.add_all(
            Book(title=title, author=author, is_available=available)
            for title, author, available in CATALOG
        )
    return CATALOG


@pytest_asyncio.fixture
async def alice(database) -> User:
    async with database.session() as s:
        user = User(
            email="alice@example.com",
            password=hash_password("wonderland"),
            username="alice",
        )
        s.add(user)
        await s.flush()
    return user


@pytest_asyncio.fixture
async def app(database):
    application = create_app()
    application.state.db = database
    return application


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def remove_user(database):
    async def _remove(user_id: int) -> None:
        async with database.session() as s:
            await s.execute(delete(User).where(User.user_id == user_id))

    return _remove
