"""
Token utilities for identifying the acting user.

Tokens are HS256 JWTs carrying a ``user_id`` claim, delivered either in the
auth cookie or an ``Authorization: Bearer`` header.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from core.config import settings

logger = logging.getLogger(__name__)

JWTPayload = Dict[str, Any]


def create_access_token(
    user_id: int,
    secret_key: Optional[str] = None,
    algorithm: Optional[str] = None,
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Create a signed access token for a user.

    Args:
        user_id: ID of the user the token identifies
        secret_key: Signing key (defaults to settings)
        algorithm: Signing algorithm (defaults to settings)
        expires_delta: Token lifetime (defaults to settings)
        extra_claims: Additional claims merged into the payload

    Returns:
        Encoded JWT string
    """
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    payload: JWTPayload = {
        "user_id": user_id,
        "iat": now,
        "exp": now + expires_delta,
    }
    if extra_claims:
        payload.update(extra_claims)

    return jwt.encode(
        payload,
        secret_key or settings.jwt_secret_key,
        algorithm=algorithm or settings.jwt_algorithm,
    )


def verify_jwt_token(token: str, secret_key: str, algorithm: str = "HS256") -> JWTPayload:
    """
    Decode and verify a JWT.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the token is malformed or the signature is wrong
    """
    return jwt.decode(token, secret_key, algorithms=[algorithm])
