"""
REST API routes — book catalog and protected endpoints.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse, PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session, get_current_user
from database.helpers import search_books
from database.models import User
from utils.schemas import BookFilters, BookItem, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["books"])
protected_router = APIRouter(prefix="/protected", tags=["protected"])


@router.get(
    "/books",
    response_model=List[BookItem],
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "No books found matching the criteria."},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Error retrieving database."},
    },
)
async def list_books(
    book_id: Optional[int] = Query(default=None, description="Filter books by their unique ID."),
    title: Optional[str] = Query(default=None, description="Filter books by title (partial match)."),
    author: Optional[str] = Query(default=None, description="Filter books by author (partial match)."),
    session: AsyncSession = Depends(db_session),
):
    """Return books, optionally filtered by id, title and author."""
    filters = BookFilters(book_id=book_id, title=title, author=author)
    try:
        books = await search_books(session, filters)
    except SQLAlchemyError:
        logger.exception("Book query failed for %s", filters.model_dump(exclude_none=True))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Error retrieving database"},
        )

    if not books:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={"error": "No book exists!"},
        )
    return [BookItem.model_validate(book) for book in books]


@protected_router.get("/hello", response_class=PlainTextResponse)
async def hello(user: User = Depends(get_current_user)) -> str:
    """Greet the authenticated user."""
    return f"Hello, {user.username or user.email}!"
