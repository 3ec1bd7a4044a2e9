"""
JWT creation and verification.

Uses PyJWT with HS256 signing.  Tokens carry ``user_id``, ``email`` and
``username`` plus ``iat``/``exp``; the secret is ``config.jwt_secret``
(env var: ``JWT_SECRET``).
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import HTTPException, status
from pydantic import ValidationError

from config.settings import config
from database.models import User
from utils.schemas import TokenPayload

logger = logging.getLogger(__name__)

_REQUIRED_CLAIMS = ["exp", "user_id", "email"]


def create_token(user: User, expires_in: Optional[timedelta] = None) -> str:
    """Sign ``{user_id, email, username}`` for ``user``; valid for one hour by default."""
    now = datetime.now(timezone.utc)
    if expires_in is None:
        expires_in = timedelta(seconds=config.jwt_expiry_seconds)
    payload = {
        "user_id": user.user_id,
        "email": user.email,
        "username": user.username,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, config.jwt_secret, algorithm=config.jwt_algorithm)


def decode_token(token: str) -> TokenPayload:
    """
    Verify signature and expiry and return the token's claims.

    Raises ``HTTPException(401)`` on invalid, expired or incomplete tokens.
    """
    try:
        claims = jwt.decode(
            token,
            config.jwt_secret,
            algorithms=[config.jwt_algorithm],
            options={"require": _REQUIRED_CLAIMS},
        )
        return TokenPayload.model_validate(claims)
    except (jwt.InvalidTokenError, ValidationError) as exc:
        logger.debug("Rejected token: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
