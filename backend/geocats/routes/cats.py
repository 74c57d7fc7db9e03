"""
GeoCats Backend — Cat Route Handlers
======================================

What:  HTTP surface of the cat collection.
How:   FastAPI validates every declared field before the handler body runs
       (the validation gate); the handler resolves the coordinate context
       and upload, then delegates to CatService.

Route Inventory:
    POST   /api/cats                 catPost              (auth)
    GET    /api/cats                 catListGet
    GET    /api/cats/user            catGetByUser         (auth)
    GET    /api/cats/area            catGetByBoundingBox
    GET    /api/cats/{cat_id}        catGet
    PUT    /api/cats/{cat_id}        catPut               (owner)
    DELETE /api/cats/{cat_id}        catDelete            (owner)
    PUT    /api/cats/admin/{cat_id}  catPutAdmin          (admin)
    DELETE /api/cats/admin/{cat_id}  catDeleteAdmin       (admin)

/user and /area are declared before /{cat_id}.
"""

import uuid
from datetime import date
from typing import List

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from geocats.auth.identity import Identity, get_current_identity
from geocats.auth.policy import require_admin
from geocats.database import get_db_session
from geocats.exceptions import ValidationError
from geocats.schemas.cat import CatAdminUpdate, CatMessageResponse, CatOut, CatUpdate, validate_birthdate
from geocats.schemas.common import ErrorResponse, MessageResponse
from geocats.schemas.geo import BoundingBox, GeoPoint
from geocats.services.cat_service import cat_service
from geocats.services.file_service import file_service

router = APIRouter(prefix="/api/cats", tags=["Cats"])

AUTH_RESPONSES = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
}
GATED_RESPONSES = {
    **AUTH_RESPONSES,
    403: {"description": "Caller may not modify this cat", "model": ErrorResponse},
    404: {"description": "Cat not found", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=CatMessageResponse,
    responses={
        400: {"description": "Invalid field or upload", "model": ErrorResponse},
        **AUTH_RESPONSES,
        500: {"description": "Cat could not be created", "model": ErrorResponse},
    },
    summary="Create a cat owned by the caller",
)
async def cat_post(
    cat_name: str = Form(..., min_length=1, max_length=100),
    weight: float = Form(..., gt=0, allow_inf_nan=False),
    birthdate: date = Form(..., description="ISO date, YYYY-MM-DD"),
    lat: float = Form(..., ge=-90, le=90, allow_inf_nan=False),
    lng: float = Form(..., ge=-180, le=180, allow_inf_nan=False),
    file: UploadFile = File(..., description="Cat image (PNG, JPG, or JPEG)"),
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> CatMessageResponse:
    """
    Create a cat.

    The stored image name is assigned by the upload service; a ``filename``
    form field sent by the client is not read. Owner is the caller.
    """
    try:
        validate_birthdate(birthdate)
    except ValueError as e:
        raise ValidationError(message=f"{e}: birthdate", field="birthdate")

    try:
        content = await file.read()
        stored_name = await file_service.validate_and_store(
            filename=file.filename or "upload",
            content=content,
            content_length=file.size,
        )
    finally:
        await file.close()

    return await cat_service.create(
        db=db,
        identity=identity,
        cat_name=cat_name,
        weight=weight,
        birthdate=birthdate,
        location=GeoPoint.from_lon_lat(lng, lat),
        filename=stored_name,
    )


@router.get("", response_model=List[CatOut], summary="List all cats")
async def cat_list_get(db: AsyncSession = Depends(get_db_session)) -> List[CatOut]:
    return await cat_service.list_all(db)


@router.get(
    "/user",
    response_model=List[CatOut],
    responses=AUTH_RESPONSES,
    summary="List the caller's cats",
)
async def cat_get_by_user(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> List[CatOut]:
    return await cat_service.list_by_owner(db, identity)


@router.get(
    "/area",
    response_model=List[CatOut],
    responses={500: {"description": "Malformed box or query failure", "model": ErrorResponse}},
    summary="List cats inside a bounding box",
)
async def cat_get_by_bounding_box(
    top_right: str = Query(..., alias="topRight", description="Top-right corner as 'lat,lng'"),
    bottom_left: str = Query(..., alias="bottomLeft", description="Bottom-left corner as 'lat,lng'"),
    db: AsyncSession = Depends(get_db_session),
) -> List[CatOut]:
    """Cats whose location lies within the box, edges included."""
    box = BoundingBox.from_corners(top_right, bottom_left)
    return await cat_service.list_in_box(db, box)


@router.get(
    "/{cat_id}",
    response_model=CatOut,
    responses={404: {"description": "Cat not found", "model": ErrorResponse}},
    summary="Get a cat by id",
)
async def cat_get(cat_id: uuid.UUID, db: AsyncSession = Depends(get_db_session)) -> CatOut:
    return await cat_service.get(db, cat_id)


@router.put(
    "/{cat_id}",
    response_model=CatMessageResponse,
    responses=GATED_RESPONSES,
    summary="Update a cat (owner only)",
)
async def cat_put(
    cat_id: uuid.UUID,
    update: CatUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> CatMessageResponse:
    return await cat_service.update_as_owner(db, identity, cat_id, update)


@router.delete(
    "/{cat_id}",
    response_model=MessageResponse,
    responses=GATED_RESPONSES,
    summary="Delete a cat (owner only)",
)
async def cat_delete(
    cat_id: uuid.UUID,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await cat_service.delete_as_owner(db, identity, cat_id)


@router.put(
    "/admin/{cat_id}",
    response_model=CatMessageResponse,
    responses=GATED_RESPONSES,
    summary="Update any cat, including its owner (admin only)",
)
async def cat_put_admin(
    cat_id: uuid.UUID,
    update: CatAdminUpdate,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> CatMessageResponse:
    return await cat_service.update_as_admin(db, identity, cat_id, update)


@router.delete(
    "/admin/{cat_id}",
    response_model=MessageResponse,
    responses=GATED_RESPONSES,
    summary="Delete any cat (admin only)",
)
async def cat_delete_admin(
    cat_id: uuid.UUID,
    identity: Identity = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await cat_service.delete_as_admin(db, identity, cat_id)
