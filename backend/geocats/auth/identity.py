"""
GeoCats Backend — Identity Context
====================================

What:  The authenticated caller as handlers see it.
How:   ``get_current_identity`` reads the ``Authorization: Bearer`` header,
       verifies the token and builds an ``Identity`` from its claims. No
       store access happens here, which keeps ``checkToken`` free of
       database calls.
Who:   Injected into every route that requires a caller.
"""

import uuid
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, ValidationError as PydanticValidationError

from geocats.auth.security import decode_access_token
from geocats.exceptions import AuthenticationError
from geocats.models import UserRole

bearer_scheme = HTTPBearer(auto_error=False)


class Identity(BaseModel):
    """Read-only projection of the caller."""

    model_config = {"frozen": True}

    id: uuid.UUID
    user_name: str
    email: str
    role: UserRole = UserRole.USER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


async def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Identity:
    """
    FastAPI dependency resolving the caller.

    Raises:
        AuthenticationError: no bearer token, or the token does not verify
    """
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError(message="Missing bearer token")

    claims = decode_access_token(credentials.credentials)
    try:
        return Identity(
            id=claims.get("sub"),
            user_name=claims.get("user_name"),
            email=claims.get("email"),
            role=claims.get("role", UserRole.USER.value),
        )
    except PydanticValidationError:
        raise AuthenticationError(message="Token is missing identity claims")
