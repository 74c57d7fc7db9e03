"""
GeoCats Backend — User Request/Response Schemas
=================================================

What:  Bodies for registration, self-update and login, and the user projections.
Who:   Used by routes/users.py, routes/auth.py and UserService.

Field exposure:
    UserOut   {_id, user_name, email}  get-by-id, list, check-token, embedded owner
    UserData  {user_name, email}       data of create / update / delete responses
    role and password are never part of a response. Request bodies have no
    role field, so a client-sent "role" is dropped during parsing.
"""

import uuid
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from geocats.models import User

# bcrypt only considers the first 72 bytes of a password
PASSWORD_MIN_LENGTH = 5
PASSWORD_MAX_BYTES = 72


def validate_password(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if len(v) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(v.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    return v


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class UserCreate(BaseModel):
    user_name: str = Field(min_length=3, max_length=50)
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        return validate_password(v)


class UserUpdate(BaseModel):
    """Self-service update of the caller's own record."""
    user_name: Optional[str] = Field(default=None, min_length=3, max_length=50)
    email: Optional[EmailStr] = None
    password: Optional[str] = None

    @field_validator("password")
    @classmethod
    def check_password(cls, v: Optional[str]) -> Optional[str]:
        return validate_password(v)


class LoginRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class UserOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID = Field(alias="_id", description="Unique user identifier")
    user_name: str
    email: str

    @classmethod
    def from_model(cls, user: User) -> "UserOut":
        return cls(id=user.id, user_name=user.user_name, email=user.email)

    @classmethod
    def from_models(cls, users: List[User]) -> List["UserOut"]:
        return [cls.from_model(user) for user in users]


class UserData(BaseModel):
    user_name: str
    email: str

    @classmethod
    def from_model(cls, user: User) -> "UserData":
        return cls(user_name=user.user_name, email=user.email)


class UserMessageResponse(BaseModel):
    """``{message, data: {user_name, email}}`` for create, update and delete."""
    message: str
    data: UserData


class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserOut
