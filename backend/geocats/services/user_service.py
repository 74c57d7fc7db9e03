"""
GeoCats Backend — User Service
================================

What:  Business logic for user accounts: register, get, list, update and
       delete the current user, echo the current identity, and log in.
How:   Passwords are hashed with bcrypt before they reach the session;
       responses are built from ``UserOut`` / ``UserData`` only.
Who:   Called by routes/users.py and routes/auth.py.

Rules:
    - role is always 'user' on registration; no body field can change it
    - the current user is identified by the token, never by a path id
    - check_token() never touches the store
"""

import logging
import uuid
from typing import List, Type

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from geocats.auth.identity import Identity
from geocats.auth.security import create_access_token, hash_password, verify_password
from geocats.exceptions import (
    AuthenticationError,
    CreationError,
    DeletionError,
    NotFoundError,
    ReadError,
    StoreError,
    UpdateError,
)
from geocats.models import User, UserRole
from geocats.schemas.user import (
    LoginResponse,
    UserCreate,
    UserData,
    UserMessageResponse,
    UserOut,
    UserUpdate,
)

logger = logging.getLogger(__name__)


class UserService:
    """Stateless service over the ``users`` collection."""

    async def get(self, db: AsyncSession, user_id: uuid.UUID) -> UserOut:
        user = await self._load(db, user_id, ReadError, "Error getting user")
        return UserOut.from_model(user)

    async def list_all(self, db: AsyncSession) -> List[UserOut]:
        try:
            result = await db.execute(select(User).order_by(User.id))
            return UserOut.from_models(list(result.scalars().all()))
        except SQLAlchemyError as e:
            logger.error("Error listing users: %s", str(e), exc_info=True)
            raise ReadError(
                message="Error getting user list",
                context={"error_type": type(e).__name__},
            )

    async def create(self, db: AsyncSession, payload: UserCreate) -> UserMessageResponse:
        """
        Register a new account with role 'user'.

        Raises:
            CreationError: insert failed, including duplicate user_name or email
        """
        user = User(
            user_name=payload.user_name,
            email=payload.email,
            role=UserRole.USER.value,
            password=hash_password(payload.password),
        )
        try:
            db.add(user)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.warning("Error creating user '%s': %s", payload.user_name, type(e).__name__)
            raise CreationError(
                message="Error creating user",
                context={"error_type": type(e).__name__},
            )

        logger.info("User %s created", user.id)
        return UserMessageResponse(message="User created", data=UserData.from_model(user))

    async def update_current(
        self, db: AsyncSession, identity: Identity, payload: UserUpdate
    ) -> UserMessageResponse:
        user = await self._load(db, identity.id, UpdateError, "Error updating user")

        changes = payload.model_dump(exclude_unset=True, exclude_none=True)
        if "password" in changes:
            changes["password"] = hash_password(changes["password"])
        for field, value in changes.items():
            setattr(user, field, value)

        try:
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.warning("Error updating user %s: %s", identity.id, type(e).__name__)
            raise UpdateError(
                message="Error updating user",
                context={"user_id": str(identity.id), "error_type": type(e).__name__},
            )

        logger.info("User %s updated (%s)", identity.id, ", ".join(sorted(changes)) or "no changes")
        return UserMessageResponse(message="User updated", data=UserData.from_model(user))

    async def delete_current(self, db: AsyncSession, identity: Identity) -> UserMessageResponse:
        user = await self._load(db, identity.id, DeletionError, "Error deleting user")
        data = UserData.from_model(user)
        try:
            await db.delete(user)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error deleting user %s: %s", identity.id, str(e))
            raise DeletionError(
                message="Error deleting user",
                context={"user_id": str(identity.id), "error_type": type(e).__name__},
            )

        logger.info("User %s deleted", identity.id)
        return UserMessageResponse(message="User deleted", data=data)

    def check_token(self, identity: Identity) -> UserOut:
        """Echo the caller's public profile; pure computation over the identity."""
        return UserOut(id=identity.id, user_name=identity.user_name, email=identity.email)

    async def authenticate(
        self, db: AsyncSession, username: str, password: str
    ) -> LoginResponse:
        """
        Verify credentials and issue a token.

        ``username`` may be either the user_name or the email address.

        Raises:
            AuthenticationError: unknown user or wrong password (same message for both)
        """
        try:
            result = await db.execute(
                select(User).where(or_(User.user_name == username, User.email == username))
            )
            user = result.scalars().first()
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e))
            raise ReadError(message="Error logging in", context={"error_type": type(e).__name__})

        if user is None or not verify_password(password, user.password):
            logger.info("Failed login attempt for '%s'", username)
            raise AuthenticationError(message="Incorrect username/password")

        logger.info("User %s logged in", user.id)
        return LoginResponse(
            message="Login successful",
            token=create_access_token(user),
            user=UserOut.from_model(user),
        )

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        error_cls: Type[StoreError],
        error_message: str,
    ) -> User:
        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise error_cls(message=error_message, context={"user_id": str(user_id)})
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return user


# ── Singleton Instance ────────────────────────────────────────────────────
user_service = UserService()
