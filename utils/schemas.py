"""
Pydantic schemas for the Library API.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


# ═══════════════════════════════════════════════════════════════════════════════
# Books
# ═══════════════════════════════════════════════════════════════════════════════


class BookFilters(BaseModel):
    """Optional filters accepted by ``GET /api/books``."""

    book_id: Optional[int] = None
    title: Optional[str] = None
    author: Optional[str] = None

    def is_empty(self) -> bool:
        return self.book_id is None and self.title is None and self.author is None


class BookItem(BaseModel):
    """A book as returned to clients. ``book_id`` is not exposed."""

    title: str
    author: str
    is_available: bool

    model_config = {"from_attributes": True}


# ═══════════════════════════════════════════════════════════════════════════════
# Users / tokens
# ═══════════════════════════════════════════════════════════════════════════════


class SignupRequest(BaseModel):
    email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)
    username: str = Field(..., min_length=1, max_length=128)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class TokenPayload(BaseModel):
    """Claims carried by an access token."""

    user_id: int
    email: str
    username: Optional[str] = None
    iat: Optional[int] = None
    exp: int


class TokenResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str
