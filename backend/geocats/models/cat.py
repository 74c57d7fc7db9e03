"""
GeoCats Backend — Cat SQLAlchemy Model
========================================

What:  ORM model representing the `cats` table.
Who:   Used by CatService for CRUD and bounding-box queries, and by Alembic.

Table Design:
    - UUID primary key, serialized as ``_id`` in API responses
    - filename: server-assigned upload name; written once at creation
    - longitude / latitude: the location point, exposed as a GeoJSON Point
    - owner_id: FK to users, cascades on user deletion
    - owner relationship is joined-eager so every read returns the embedded owner

Index on (longitude, latitude):
    Serves the bounding-box query, an inclusive range filter on both axes.
"""

import uuid
from datetime import date
from typing import Optional, TYPE_CHECKING

from sqlalchemy import Date, Float, ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from geocats.database import Base

if TYPE_CHECKING:
    from geocats.models.user import User


class Cat(Base):
    """A geotagged cat record with an owning user and an uploaded image."""

    __tablename__ = "cats"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    cat_name: Mapped[str] = mapped_column(String(100), nullable=False)

    weight: Mapped[float] = mapped_column(Float, nullable=False)

    filename: Mapped[str] = mapped_column(String(255), nullable=False)

    birthdate: Mapped[date] = mapped_column(Date, nullable=False)

    longitude: Mapped[float] = mapped_column(Float, nullable=False)

    latitude: Mapped[float] = mapped_column(Float, nullable=False)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    owner: Mapped[Optional["User"]] = relationship(lazy="joined")

    __table_args__ = (
        Index("idx_cats_location", "longitude", "latitude"),
    )

    def __repr__(self) -> str:
        return f"<Cat(id={self.id}, cat_name='{self.cat_name}', owner_id={self.owner_id})>"
