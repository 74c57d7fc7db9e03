"""
GeoCats Backend — User SQLAlchemy Model
=========================================

What:  ORM model representing the `users` table.
Who:   Used by UserService for CRUD operations, by the login flow, and by Alembic.

Table Design:
    - UUID primary key, serialized as ``_id`` in API responses
    - user_name / email: unique constraints enforced by the database
    - role: 'user' | 'admin', defaults to 'user'; never set from request bodies
    - password: bcrypt hash only; no response schema exposes it
"""

import enum
import uuid

from sqlalchemy import CheckConstraint, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from geocats.database import Base


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """An account that can own cats."""

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    user_name: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    role: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=UserRole.USER.value,
        server_default=text("'user'"),
    )

    # bcrypt output is 60 characters
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, user_name='{self.user_name}', role='{self.role}')>"
