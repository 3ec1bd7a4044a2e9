"""
Database helper functions — book queries and user persistence.

Every statement is built with SQLAlchemy expressions so user input only
ever reaches the driver as bound parameters.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Book, User
from utils.schemas import BookFilters

logger = logging.getLogger(__name__)

_LIKE_ESCAPE = "\\"


def _escape_like(value: str) -> str:
    """Make ``%`` and ``_`` in user input match literally."""
    return (
        value.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", _LIKE_ESCAPE + "%")
        .replace("_", _LIKE_ESCAPE + "_")
    )


def _contains(value: str) -> str:
    return f"%{_escape_like(value)}%"


# ── Books ──────────────────────────────────────────────────────────────


def build_books_query(filters: Optional[BookFilters] = None) -> Select:
    """
    Build the SELECT for ``GET /api/books``.

    Conditions are AND-ed in the order book_id, title, author; absent
    fields are skipped.  Title and author are case-insensitive substring
    matches.
    """
    stmt = select(Book)
    if filters is None or filters.is_empty():
        return stmt.order_by(Book.book_id)

    conditions = []
    if filters.book_id is not None:
        conditions.append(Book.book_id == filters.book_id)
    if filters.title is not None:
        conditions.append(Book.title.ilike(_contains(filters.title), escape=_LIKE_ESCAPE))
    if filters.author is not None:
        conditions.append(Book.author.ilike(_contains(filters.author), escape=_LIKE_ESCAPE))

    return stmt.where(*conditions).order_by(Book.book_id)


async def search_books(
    session: AsyncSession,
    filters: Optional[BookFilters] = None,
) -> List[Book]:
    """Return every book matching ``filters``; an empty list is a normal result."""
    stmt = build_books_query(filters)
    logger.debug("Books query: %s", stmt)
    result = await session.execute(stmt)
    return list(result.scalars().all())


# ── Users ──────────────────────────────────────────────────────────────


async def insert_user(
    session: AsyncSession,
    email: str,
    password_hash: str,
    username: str,
) -> User:
    """INSERT a user row and return it with its generated ``user_id``."""
    user = User(email=email, password=password_hash, username=username)
    session.add(user)
    await session.flush()
    return user


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[User]:
    result = await session.execute(select(User).where(User.user_id == user_id))
    return result.scalar_one_or_none()
