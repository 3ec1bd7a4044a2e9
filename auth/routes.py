"""
Auth API routes — signup, login.

Route prefix: /users
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import db_session
from auth.jwt import create_token
from auth.strategies import get_strategy
from utils.schemas import LoginRequest, MessageResponse, SignupRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])

_REJECTED = {status.HTTP_400_BAD_REQUEST: {"model": MessageResponse}}


def _rejected(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": message},
    )


@router.post(
    "/signup",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_REJECTED,
)
async def signup(
    req: SignupRequest,
    session: AsyncSession = Depends(db_session),
):
    """Create an account and return an access token."""
    result = await get_strategy("signup").authenticate(session, req)
    if not result.ok:
        return _rejected(result.message or "Signup failed")
    return TokenResponse(token=create_token(result.user))


@router.post(
    "/login",
    response_model=TokenResponse,
    status_code=status.HTTP_200_OK,
    responses=_REJECTED,
)
async def login(
    req: LoginRequest,
    session: AsyncSession = Depends(db_session),
):
    """Login with email + password."""
    result = await get_strategy("signin").authenticate(session, req)
    if not result.ok:
        logger.info("Login rejected for %s: %s", req.email, result.message)
        return _rejected(result.message or "Login failed")
    return TokenResponse(token=create_token(result.user))
