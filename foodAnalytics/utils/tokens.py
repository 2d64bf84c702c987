"""Bearer token issuing, verification and revocation.

Tokens are HS256 JWTs carrying the user id. Revoked tokens are remembered in
Django's cache until the moment they would have expired anyway, so the
blacklist never outgrows the set of still-valid tokens. With a shared cache
backend (Redis) a logout is honoured by every server process.
"""
from __future__ import annotations

import hashlib
import logging
import time
import uuid
from typing import Any, Dict, Optional

import jwt
from django.conf import settings
from django.core.cache import cache

from foodAnalytics.exceptions import AuthError

logger = logging.getLogger(__name__)

BLACKLIST_KEY_PREFIX = "auth:revoked"


def _blacklist_key(token: str) -> str:
    digest = hashlib.sha256(token.encode("utf-8")).hexdigest()
    return f"{BLACKLIST_KEY_PREFIX}:{digest}"


def issue_token(user_id: int) -> str:
    """Return a signed token for ``user_id`` valid for ``JWT_EXPIRES_SECONDS``."""
    now = int(time.time())
    payload = {
        "id": user_id,
        "iat": now,
        "exp": now + settings.JWT_EXPIRES_SECONDS,
        "jti": uuid.uuid4().hex,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def extract_bearer_token(header_value: Optional[str]) -> str:
    if not header_value or not header_value.startswith("Bearer "):
        raise AuthError("Not authorized, no token")
    token = header_value.split(" ", 1)[1].strip()
    if not token:
        raise AuthError("Not authorized, no token")
    return token


def is_revoked(token: str) -> bool:
    return cache.get(_blacklist_key(token)) is not None


def verify_token(token: str) -> Dict[str, Any]:
    """Decode ``token`` and return its claims.

    Raises AuthError when the token is blacklisted, expired, tampered with or
    missing the user id claim.
    """
    if is_revoked(token):
        raise AuthError("Not authorized, token revoked")
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "id"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise AuthError("Not authorized, token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthError("Not authorized, token failed") from exc
    return claims


def revoke_token(token: str) -> None:
    """Blacklist ``token`` for the rest of its natural lifetime."""
    try:
        claims = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            options={"verify_exp": False},
        )
    except jwt.InvalidTokenError as exc:
        raise AuthError("Not authorized, token failed") from exc

    remaining = int(claims.get("exp", 0)) - int(time.time())
    if remaining <= 0:
        return
    cache.set(_blacklist_key(token), True, remaining)
    logger.info("Revoked token for user %s (%ss remaining)", claims.get("id"), remaining)
