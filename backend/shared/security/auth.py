"""
Authentication utilities.

Owners sign in with the hosted auth provider, which issues HS256 JWTs whose
subject is the owner's user id. That id is also the restaurant id, so every
core operation receives it explicitly from the verified token.
"""

from __future__ import annotations

import time
import uuid
from typing import Any

import jwt
from fastapi import Header

from shared.config.settings import JWT_SECRET, JWT_ISSUER, JWT_AUDIENCE, settings
from shared.config.logging import get_logger, mask_user_id
from shared.utils.exceptions import AuthRequiredError

logger = get_logger(__name__)


def sign_jwt(payload: dict[str, Any], ttl_seconds: int | None = None) -> str:
    """
    Sign a JWT with the given claims.

    Args:
        payload: Claims to include (sub, email).
        ttl_seconds: Token lifetime. Defaults to the access token expiry.
    """
    if ttl_seconds is None:
        ttl_seconds = settings.jwt_access_token_expire_minutes * 60

    now = int(time.time())
    data = {
        **payload,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, JWT_SECRET, algorithm="HS256")


def issue_owner_token(user_id: str, email: str | None = None, ttl_seconds: int | None = None) -> str:
    """Access token for a restaurant owner."""
    claims: dict[str, Any] = {"sub": str(user_id)}
    if email:
        claims["email"] = email
    return sign_jwt(claims, ttl_seconds=ttl_seconds)


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT.

    Raises:
        AuthRequiredError: If the token is invalid, expired or has no subject.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=["HS256"],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise AuthRequiredError("Token has expired")
    except jwt.InvalidTokenError as e:
        # Generic message to the client, details only in the log
        logger.warning("JWT validation failed", error=str(e))
        raise AuthRequiredError("Invalid token")

    subject = payload.get("sub")
    if not subject or not isinstance(subject, str):
        raise AuthRequiredError("Invalid token: missing subject claim")

    return payload


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract the token from an Authorization header.

    Raises:
        AuthRequiredError: If the header is missing or malformed.
    """
    if not authorization:
        raise AuthRequiredError("Missing Authorization header")
    if not authorization.startswith("Bearer "):
        raise AuthRequiredError("Invalid Authorization header format. Expected: Bearer <token>")
    return authorization.split(" ", 1)[1].strip()


def current_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any]:
    """
    FastAPI dependency returning the verified token claims.

    Usage:
        @router.get("/menu")
        def list_menu(ctx: dict = Depends(current_user_context)):
            restaurant_id = ctx["sub"]
    """
    token = get_bearer_token(authorization)
    ctx = verify_jwt(token)
    logger.debug("Authenticated request", user_id=mask_user_id(ctx["sub"]))
    return ctx
