"""
Authentication strategies — signup, signin and jwt.

Each strategy is a stateless check from credentials to an ``AuthResult``
run against a borrowed session.  Routes look strategies up by name with
``get_strategy``.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.password import hash_password, verify_password
from database.helpers import get_user_by_email, get_user_by_id, insert_user
from database.models import User
from utils.schemas import LoginRequest, SignupRequest, TokenPayload

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found"
INCORRECT_PASSWORD = "Incorrect password"
SIGNUP_FAILED = "Signup failed"
UNAUTHORIZED = "Unauthorized"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a strategy: a user, or a rejection message."""

    user: Optional[User] = None
    message: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.user is not None

    @classmethod
    def accept(cls, user: User) -> "AuthResult":
        return cls(user=user)

    @classmethod
    def reject(cls, message: str) -> "AuthResult":
        return cls(message=message)


class AuthStrategy(ABC):
    name: str = ""

    @abstractmethod
    async def authenticate(self, session: AsyncSession, credentials) -> AuthResult:
        ...


class SignupStrategy(AuthStrategy):
    """Create the user. A duplicate email is a rejection, not an error."""

    name = "signup"

    async def authenticate(self, session: AsyncSession, credentials: SignupRequest) -> AuthResult:
        # bcrypt runs in a worker thread
        password_hash = await asyncio.to_thread(hash_password, credentials.password)
        try:
            user = await insert_user(
                session,
                email=credentials.email,
                password_hash=password_hash,
                username=credentials.username,
            )
            await session.commit()
        except IntegrityError as exc:
            await session.rollback()
            logger.info("Signup rejected for %s: %s", credentials.email, exc.orig)
            return AuthResult.reject(SIGNUP_FAILED)

        logger.info("Registered user %s (%s)", user.username, user.user_id)
        return AuthResult.accept(user)


class SigninStrategy(AuthStrategy):
    name = "signin"

    async def authenticate(self, session: AsyncSession, credentials: LoginRequest) -> AuthResult:
        user = await get_user_by_email(session, credentials.email)
        if user is None:
            return AuthResult.reject(USER_NOT_FOUND)
        if not await asyncio.to_thread(verify_password, credentials.password, user.password):
            return AuthResult.reject(INCORRECT_PASSWORD)
        logger.info("Login: %s (%s)", user.username, user.user_id)
        return AuthResult.accept(user)


class JwtStrategy(AuthStrategy):
    """Accept a decoded token only while its user still exists."""

    name = "jwt"

    async def authenticate(self, session: AsyncSession, credentials: TokenPayload) -> AuthResult:
        user = await get_user_by_id(session, credentials.user_id)
        if user is None:
            logger.info("Token for missing user %s rejected", credentials.user_id)
            return AuthResult.reject(UNAUTHORIZED)
        return AuthResult.accept(user)


STRATEGIES: Dict[str, AuthStrategy] = {
    strategy.name: strategy
    for strategy in (SignupStrategy(), SigninStrategy(), JwtStrategy())
}


def get_strategy(name: str) -> AuthStrategy:
    """Return the strategy registered under ``name``; ``KeyError`` if unknown."""
    return STRATEGIES[name]
