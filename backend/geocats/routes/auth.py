"""
GeoCats Backend — Login Route
===============================

What:  Exchanges a username (or e-mail) and password for a bearer token.
Who:   Clients call this once; the token then feeds ``get_current_identity``.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from geocats.database import get_db_session
from geocats.schemas.common import ErrorResponse
from geocats.schemas.user import LoginRequest, LoginResponse
from geocats.services.user_service import user_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"description": "Incorrect username/password", "model": ErrorResponse}},
    summary="Log in and receive a bearer token",
)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db_session)) -> LoginResponse:
    return await user_service.authenticate(db, payload.username, payload.password)
