"""
GeoCats Backend — Cat Request/Response Schemas
================================================

What:  Update bodies for owner and admin edits, and the cat projection.
Who:   Used by routes/cats.py and CatService.

Projection:
    Every cat response carries exactly seven fields:
    _id, cat_name, weight, filename, birthdate, location, owner.
    The owner is embedded as {_id, user_name, email}; role and password
    never appear.

Writable fields:
    - create: cat_name, weight, birthdate (+ upload, + lat/lng form fields)
    - owner update: cat_name, weight, birthdate, location
    - admin update: the above plus owner
    filename is never writable; unknown body keys are ignored.
"""

import uuid
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from geocats.models import Cat
from geocats.schemas.geo import GeoPoint
from geocats.schemas.user import UserOut


def validate_birthdate(v: Optional[date]) -> Optional[date]:
    if v is not None and v > date.today():
        raise ValueError("Birthdate cannot be in the future")
    return v


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CatUpdate(BaseModel):
    """Partial update applied by the cat's owner."""

    cat_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    weight: Optional[float] = Field(default=None, gt=0, allow_inf_nan=False)
    birthdate: Optional[date] = None
    location: Optional[GeoPoint] = None

    @field_validator("birthdate")
    @classmethod
    def check_birthdate(cls, v: Optional[date]) -> Optional[date]:
        return validate_birthdate(v)

    def changes(self) -> dict:
        """Fields the client actually sent, flattened to column names."""
        data = self.model_dump(exclude_unset=True, exclude_none=True)
        location = data.pop("location", None)
        if location is not None:
            data["longitude"], data["latitude"] = location["coordinates"]
        return data


class CatAdminUpdate(CatUpdate):
    """Admin edit: may also hand the cat to another user."""

    owner: Optional[uuid.UUID] = None

    def changes(self) -> dict:
        data = super().changes()
        owner = data.pop("owner", None)
        if owner is not None:
            data["owner_id"] = owner
        return data


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class CatOut(BaseModel):
    """The seven projected cat fields."""

    model_config = ConfigDict(populate_by_name=True)

    id: uuid.UUID = Field(alias="_id", description="Unique cat identifier")
    cat_name: str
    weight: float
    filename: str = Field(description="Server-assigned name of the uploaded image")
    birthdate: date
    location: GeoPoint
    owner: Optional[UserOut] = None

    @classmethod
    def from_model(cls, cat: Cat) -> "CatOut":
        return cls(
            id=cat.id,
            cat_name=cat.cat_name,
            weight=cat.weight,
            filename=cat.filename,
            birthdate=cat.birthdate,
            location=GeoPoint.from_lon_lat(cat.longitude, cat.latitude),
            owner=UserOut.from_model(cat.owner) if cat.owner is not None else None,
        )

    @classmethod
    def from_models(cls, cats: List[Cat]) -> List["CatOut"]:
        return [cls.from_model(cat) for cat in cats]


class CatMessageResponse(BaseModel):
    """``{message, data: Cat}`` returned by create and update."""
    message: str
    data: CatOut
