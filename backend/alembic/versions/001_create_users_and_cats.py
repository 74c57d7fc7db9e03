"""Create users and cats tables

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates `users` and `cats` with the ownership FK and location index.

Rollback: downgrade() drops both tables (destructive; all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("user_name", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column(
            "role",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'user'"),
            comment="user or admin; set server-side only",
        ),
        sa.Column(
            "password",
            sa.String(255),
            nullable=False,
            comment="bcrypt hash",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_name"),
        sa.UniqueConstraint("email"),
        sa.CheckConstraint("role IN ('user', 'admin')", name="ck_users_role"),
    )

    op.create_table(
        "cats",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("cat_name", sa.String(100), nullable=False),
        sa.Column("weight", sa.Float(), nullable=False),
        sa.Column(
            "filename",
            sa.String(255),
            nullable=False,
            comment="Server-assigned name under the upload directory",
        ),
        sa.Column("birthdate", sa.Date(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.ForeignKeyConstraint(["owner_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("ix_cats_owner_id", "cats", ["owner_id"])
    # Bounding-box lookups filter on both columns
    op.create_index("idx_cats_location", "cats", ["longitude", "latitude"])


def downgrade() -> None:
    op.drop_index("idx_cats_location", table_name="cats")
    op.drop_index("ix_cats_owner_id", table_name="cats")
    op.drop_table("cats")
    op.drop_table("users")
