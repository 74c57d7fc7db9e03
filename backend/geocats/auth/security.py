"""
GeoCats Backend — Password Hashing & Tokens
=============================================

What:  bcrypt password hashing and HS256 JWT access tokens.
How:   Passwords: bcrypt with a per-hash random salt and a configurable cost
       (``settings.bcrypt_rounds``). Tokens: python-jose, signed with
       ``settings.jwt_secret``; claims carry the caller's public profile so
       the identity can be rebuilt without a database lookup.

Token claims:
    sub        user id (UUID string)
    user_name  display name
    email      e-mail address
    role       'user' | 'admin'
    exp        expiry (UTC)

Never log a password or a hash.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from geocats.config import settings
from geocats.exceptions import AuthenticationError
from geocats.models import User

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    """One-way salted hash; the result embeds its own salt and cost."""
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        logger.warning("Password check against a malformed hash")
        return False


def create_access_token(user: User, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed token for ``user``."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    claims = {
        "sub": str(user.id),
        "user_name": user.user_name,
        "email": user.email,
        "role": user.role,
        "exp": expire,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry and return the claims.

    Raises:
        AuthenticationError: bad signature, expired, or malformed token
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise AuthenticationError(
            message="Invalid or expired token",
            context={"reason": type(e).__name__},
        )
