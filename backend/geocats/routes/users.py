"""
GeoCats Backend — User Route Handlers
=======================================

Route Inventory:
    POST   /api/users            userPost            201
    GET    /api/users            userListGet
    GET    /api/users/token      checkToken          (auth, no store access)
    PUT    /api/users            userPutCurrent      (auth)
    DELETE /api/users            userDeleteCurrent   (auth)
    GET    /api/users/{user_id}  userGet
"""

import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from geocats.auth.identity import Identity, get_current_identity
from geocats.database import get_db_session
from geocats.schemas.common import ErrorResponse
from geocats.schemas.user import UserCreate, UserMessageResponse, UserOut, UserUpdate
from geocats.services.user_service import user_service

router = APIRouter(prefix="/api/users", tags=["Users"])

AUTH_RESPONSES = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=201,
    response_model=UserMessageResponse,
    responses={500: {"description": "User could not be created", "model": ErrorResponse}},
    summary="Register a new user",
)
async def user_post(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> UserMessageResponse:
    return await user_service.create(db, payload)


@router.get("", response_model=List[UserOut], summary="List users")
async def user_list_get(db: AsyncSession = Depends(get_db_session)) -> List[UserOut]:
    return await user_service.list_all(db)


@router.get(
    "/token",
    response_model=UserOut,
    responses=AUTH_RESPONSES,
    summary="Confirm the caller's token is valid",
)
async def check_token(identity: Identity = Depends(get_current_identity)) -> UserOut:
    return user_service.check_token(identity)


@router.put(
    "",
    response_model=UserMessageResponse,
    responses=AUTH_RESPONSES,
    summary="Update the current user",
)
async def user_put_current(
    payload: UserUpdate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> UserMessageResponse:
    return await user_service.update_current(db, identity, payload)


@router.delete(
    "",
    response_model=UserMessageResponse,
    responses=AUTH_RESPONSES,
    summary="Delete the current user",
)
async def user_delete_current(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> UserMessageResponse:
    return await user_service.delete_current(db, identity)


@router.get(
    "/{user_id}",
    response_model=UserOut,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Get a user by id",
)
async def user_get(user_id: uuid.UUID, db: AsyncSession = Depends(get_db_session)) -> UserOut:
    return await user_service.get(db, user_id)
