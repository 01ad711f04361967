"""
Authentication middleware for identifying the acting user.

This middleware:
1. Extracts a JWT from the auth cookie or the Authorization header
2. Verifies the signature and expiry
3. Places the token's user id into the request scope as the actor id

It never rejects a request on its own. Routes that need an actor depend on
``require_actor_id``, which raises ``AuthenticationRequiredError``.
"""

import logging
from typing import Callable, Optional

import jwt
from fastapi import Request

from core.exceptions import AuthenticationRequiredError
from core.security import verify_jwt_token

logger = logging.getLogger(__name__)

ACTOR_SCOPE_KEY = "actor_id"


class AuthenticationMiddleware:
    """
    Authentication middleware that resolves the actor for each request.

    Features:
    - Cookie or Bearer token extraction
    - JWT signature and expiry validation
    - Request context injection of the actor id
    """

    def __init__(
        self,
        app: Callable,
        jwt_secret: str,
        jwt_algorithm: str = "HS256",
        cookie_name: str = "token",
    ):
        """
        Initialize authentication middleware.

        Args:
            app: ASGI application
            jwt_secret: Secret key for JWT verification
            jwt_algorithm: JWT signing algorithm
            cookie_name: Name of the cookie carrying the token
        """
        self.app = app
        self.jwt_secret = jwt_secret
        self.jwt_algorithm = jwt_algorithm
        self.cookie_name = cookie_name

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        token = self._extract_token(request)
        if token:
            scope[ACTOR_SCOPE_KEY] = self._resolve_actor(token)

        await self.app(scope, receive, send)

    def _extract_token(self, request: Request) -> Optional[str]:
        """
        Extract JWT token from the auth cookie, falling back to the
        Authorization header.
        """
        cookie_token = request.cookies.get(self.cookie_name)
        if cookie_token:
            return cookie_token

        auth_header = request.headers.get("Authorization")
        if auth_header and auth_header.startswith("Bearer "):
            return auth_header[7:]

        return None

    def _resolve_actor(self, token: str) -> Optional[str]:
        """Return the token's user id, or None when the token is unusable."""
        try:
            payload = verify_jwt_token(token, self.jwt_secret, self.jwt_algorithm)
        except jwt.ExpiredSignatureError:
            logger.info("Expired authentication token")
            return None
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid token: {str(e)}")
            return None

        user_id = payload.get("user_id")
        if user_id is None:
            logger.warning("Token missing user_id")
            return None
        return str(user_id)


def get_actor_id(request: Request) -> Optional[str]:
    """Get the authenticated actor id from the request scope, if any."""
    return request.scope.get(ACTOR_SCOPE_KEY)


def require_actor_id(request: Request) -> str:
    """
    FastAPI dependency returning the authenticated actor id.

    Raises:
        AuthenticationRequiredError: If no valid token was presented
    """
    actor_id = get_actor_id(request)
    if not actor_id:
        raise AuthenticationRequiredError()
    return actor_id
