"""
GeoCats Backend — Cat Service
===============================

What:  Business logic for every cat operation: create, list (all, by owner,
       by bounding box), get, update and delete (owner and admin variants).
How:   Each method issues one logical store operation on the session it is
       given and shapes the result through ``CatOut``.
Who:   Called by routes/cats.py.

Order of a gated mutation:
    load cat (404 if absent) → authorize (403 on failure) → write → respond
    Nothing is written before ``authorize`` returns.

Error Handling Strategy:
    SQLAlchemy errors are wrapped in the store error matching the operation
    (CreationError, ReadError, UpdateError, DeletionError, BoundingBoxError).
    Application exceptions (NotFoundError, AuthorizationError) propagate as-is.
"""

import logging
import uuid
from datetime import date
from typing import Any, Dict, List, Type

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from geocats.auth.identity import Identity
from geocats.auth.policy import Capability, authorize
from geocats.exceptions import (
    BoundingBoxError,
    CreationError,
    DeletionError,
    NotFoundError,
    ReadError,
    StoreError,
    UpdateError,
)
from geocats.models import Cat
from geocats.schemas.cat import CatAdminUpdate, CatMessageResponse, CatOut, CatUpdate
from geocats.schemas.common import MessageResponse
from geocats.schemas.geo import BoundingBox, GeoPoint
from geocats.services.file_service import file_service

logger = logging.getLogger(__name__)


class CatService:
    """
    Stateless service over the ``cats`` collection.

    Responsibilities:
        - create(): persist a new cat owned by the caller
        - list_all() / list_by_owner() / list_in_box(): projected listings
        - get(): single cat with not-found handling
        - update_as_owner() / update_as_admin(): gated partial updates
        - delete_as_owner() / delete_as_admin(): gated deletes
    """

    async def create(
        self,
        db: AsyncSession,
        identity: Identity,
        cat_name: str,
        weight: float,
        birthdate: date,
        location: GeoPoint,
        filename: str,
    ) -> CatMessageResponse:
        """
        Persist a new cat owned by the caller.

        Args:
            filename: server-assigned name returned by the upload service

        Raises:
            CreationError: insert failed; the stored upload is removed
        """
        cat = Cat(
            cat_name=cat_name,
            weight=weight,
            filename=filename,
            birthdate=birthdate,
            longitude=location.lon,
            latitude=location.lat,
            owner_id=identity.id,
        )
        try:
            db.add(cat)
            await db.commit()
            await db.refresh(cat, attribute_names=["owner"])
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error creating cat for user %s: %s", identity.id, str(e))
            await file_service.cleanup_file(filename)
            raise CreationError(
                message="Error creating cat",
                context={"error_type": type(e).__name__},
            )

        logger.info("Cat %s created by user %s", cat.id, identity.id)
        return CatMessageResponse(message="Cat created", data=CatOut.from_model(cat))

    async def list_all(self, db: AsyncSession) -> List[CatOut]:
        try:
            result = await db.execute(select(Cat).order_by(Cat.id))
            return CatOut.from_models(list(result.scalars().all()))
        except SQLAlchemyError as e:
            logger.error("Error listing cats: %s", str(e), exc_info=True)
            raise ReadError(
                message="Error getting cats",
                context={"error_type": type(e).__name__},
            )

    async def list_by_owner(self, db: AsyncSession, identity: Identity) -> List[CatOut]:
        try:
            result = await db.execute(
                select(Cat).where(Cat.owner_id == identity.id).order_by(Cat.id)
            )
            return CatOut.from_models(list(result.scalars().all()))
        except SQLAlchemyError as e:
            logger.error("Error listing cats of user %s: %s", identity.id, str(e))
            raise ReadError(
                message="Error getting cats",
                context={"error_type": type(e).__name__},
            )

    async def list_in_box(self, db: AsyncSession, box: BoundingBox) -> List[CatOut]:
        """
        Cats whose location lies inside ``box``; points on an edge are included.

        Query:
            SELECT * FROM cats
            WHERE longitude BETWEEN :min_lon AND :max_lon
              AND latitude  BETWEEN :min_lat AND :max_lat
            → served by idx_cats_location
        """
        try:
            result = await db.execute(
                select(Cat).where(
                    Cat.longitude.between(box.min_lon, box.max_lon),
                    Cat.latitude.between(box.min_lat, box.max_lat),
                ).order_by(Cat.id)
            )
            return CatOut.from_models(list(result.scalars().all()))
        except SQLAlchemyError as e:
            logger.error("Error querying cats in box %s: %s", box.as_list(), str(e))
            raise BoundingBoxError(
                message="Error cat get bounding box",
                context={"box": box.as_list(), "error_type": type(e).__name__},
            )

    async def get(self, db: AsyncSession, cat_id: uuid.UUID) -> CatOut:
        cat = await self._load(db, cat_id, ReadError, "Error getting cat")
        return CatOut.from_model(cat)

    async def update_as_owner(
        self,
        db: AsyncSession,
        identity: Identity,
        cat_id: uuid.UUID,
        update: CatUpdate,
    ) -> CatMessageResponse:
        """
        Apply ``update`` if the caller owns the cat.

        Raises:
            NotFoundError:      cat does not exist
            AuthorizationError: caller is not the owner (no write happens)
            UpdateError:        store failure
        """
        cat = await self._load(db, cat_id, UpdateError, "Error updating cat")
        authorize(identity, Capability.OWNER, cat.owner_id)
        return await self._apply(db, cat, update.changes())

    async def update_as_admin(
        self,
        db: AsyncSession,
        identity: Identity,
        cat_id: uuid.UUID,
        update: CatAdminUpdate,
    ) -> CatMessageResponse:
        """Apply ``update`` (which may reassign ``owner``) if the caller is an admin."""
        authorize(identity, Capability.ADMIN)
        cat = await self._load(db, cat_id, UpdateError, "Error updating cat")
        return await self._apply(db, cat, update.changes())

    async def delete_as_owner(
        self,
        db: AsyncSession,
        identity: Identity,
        cat_id: uuid.UUID,
    ) -> MessageResponse:
        cat = await self._load(db, cat_id, DeletionError, "Error deleting cat")
        authorize(identity, Capability.OWNER, cat.owner_id)
        return await self._delete(db, cat)

    async def delete_as_admin(
        self,
        db: AsyncSession,
        identity: Identity,
        cat_id: uuid.UUID,
    ) -> MessageResponse:
        authorize(identity, Capability.ADMIN)
        cat = await self._load(db, cat_id, DeletionError, "Error deleting cat")
        return await self._delete(db, cat)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(
        self,
        db: AsyncSession,
        cat_id: uuid.UUID,
        error_cls: Type[StoreError],
        error_message: str,
    ) -> Cat:
        try:
            cat = await db.get(Cat, cat_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching cat %s: %s", cat_id, str(e))
            raise error_cls(message=error_message, context={"cat_id": str(cat_id)})
        if cat is None:
            raise NotFoundError(resource="cat", resource_id=str(cat_id))
        return cat

    async def _apply(
        self, db: AsyncSession, cat: Cat, changes: Dict[str, Any]
    ) -> CatMessageResponse:
        # rollback expires the instance; reading cat.id afterwards would lazy-load
        cat_id = cat.id
        for field, value in changes.items():
            setattr(cat, field, value)
        try:
            await db.commit()
            if "owner_id" in changes:
                await db.refresh(cat, attribute_names=["owner"])
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error updating cat %s: %s", cat_id, str(e))
            raise UpdateError(
                message="Error updating cat",
                context={"cat_id": str(cat_id), "error_type": type(e).__name__},
            )

        logger.info("Cat %s updated (%s)", cat_id, ", ".join(sorted(changes)) or "no changes")
        return CatMessageResponse(message="Cat updated", data=CatOut.from_model(cat))

    async def _delete(self, db: AsyncSession, cat: Cat) -> MessageResponse:
        cat_id = cat.id
        try:
            await db.delete(cat)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error deleting cat %s: %s", cat_id, str(e))
            raise DeletionError(
                message="Error deleting cat",
                context={"cat_id": str(cat_id), "error_type": type(e).__name__},
            )

        logger.info("Cat %s deleted", cat_id)
        return MessageResponse(message="Cat deleted")


# ── Singleton Instance ────────────────────────────────────────────────────
cat_service = CatService()
