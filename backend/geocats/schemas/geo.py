"""
GeoCats Backend — Coordinate Schemas
======================================

What:  The coordinate context handlers receive: a GeoJSON point for cat
       locations and a bounding box for area queries.
How:   ``GeoPoint`` is a pydantic model (validated like any body field).
       ``BoundingBox.from_corners`` parses the ``topRight`` / ``bottomLeft``
       query strings; any malformed input raises ``BoundingBoxError``.

Coordinate order:
    Stored and serialized as [longitude, latitude] (GeoJSON order).
    Corner query strings use "lat,lng" order.
"""

from dataclasses import dataclass
from typing import Annotated, List, Literal, Tuple

from pydantic import BaseModel, Field, field_validator

from geocats.exceptions import BoundingBoxError

MIN_LON, MAX_LON = -180.0, 180.0
MIN_LAT, MAX_LAT = -90.0, 90.0

FiniteFloat = Annotated[float, Field(allow_inf_nan=False)]


class GeoPoint(BaseModel):
    """
    GeoJSON point, ``{"type": "Point", "coordinates": [lon, lat]}``.
    """
    type: Literal["Point"] = "Point"
    coordinates: List[FiniteFloat] = Field(min_length=2, max_length=2)

    @field_validator("coordinates")
    @classmethod
    def validate_range(cls, v: List[float]) -> List[float]:
        lon, lat = v
        if not MIN_LON <= lon <= MAX_LON:
            raise ValueError("Longitude must be between -180 and 180")
        if not MIN_LAT <= lat <= MAX_LAT:
            raise ValueError("Latitude must be between -90 and 90")
        return v

    @classmethod
    def from_lon_lat(cls, lon: float, lat: float) -> "GeoPoint":
        return cls(coordinates=[lon, lat])

    @property
    def lon(self) -> float:
        return self.coordinates[0]

    @property
    def lat(self) -> float:
        return self.coordinates[1]


def _parse_corner(raw: str, name: str) -> Tuple[float, float]:
    """Parse a "lat,lng" string into a (lon, lat) pair."""
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != 2:
        raise BoundingBoxError(
            message=f"Invalid {name}: expected 'lat,lng'",
            context={name: raw},
        )
    try:
        lat, lon = float(parts[0]), float(parts[1])
    except ValueError:
        raise BoundingBoxError(
            message=f"Invalid {name}: coordinates must be numbers",
            context={name: raw},
        )
    if not (MIN_LON <= lon <= MAX_LON and MIN_LAT <= lat <= MAX_LAT):
        raise BoundingBoxError(
            message=f"Invalid {name}: coordinates out of range",
            context={name: raw},
        )
    return lon, lat


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box ``[min_lon, min_lat, max_lon, max_lat]``, edges inclusive."""

    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @classmethod
    def from_corners(cls, top_right: str, bottom_left: str) -> "BoundingBox":
        """
        Build a box from ``topRight`` and ``bottomLeft`` query values.

        Raises:
            BoundingBoxError: wrong arity, non-numeric, out-of-range, or
                              a bottom-left corner above/right of top-right.
        """
        max_lon, max_lat = _parse_corner(top_right, "topRight")
        min_lon, min_lat = _parse_corner(bottom_left, "bottomLeft")
        if min_lon > max_lon or min_lat > max_lat:
            raise BoundingBoxError(
                message="Invalid bounding box: bottomLeft must be below and left of topRight",
                context={"topRight": top_right, "bottomLeft": bottom_left},
            )
        return cls(min_lon=min_lon, min_lat=min_lat, max_lon=max_lon, max_lat=max_lat)

    def as_list(self) -> List[float]:
        return [self.min_lon, self.min_lat, self.max_lon, self.max_lat]
