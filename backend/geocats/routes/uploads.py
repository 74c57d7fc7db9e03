"""
GeoCats Backend — Uploaded Image Route
========================================

What:  Serves stored cat images by their server-assigned filename.
How:   FileService.resolve() confines lookups to the storage root; the
       content type is inferred from the extension.
"""

from fastapi import APIRouter
from fastapi.responses import FileResponse

from geocats.schemas.common import ErrorResponse
from geocats.services.file_service import file_service

router = APIRouter(tags=["Uploads"])


@router.get(
    "/uploads/{filename}",
    responses={
        200: {"description": "Image file"},
        404: {"description": "File not found", "model": ErrorResponse},
    },
    summary="Serve an uploaded cat image",
)
async def serve_upload(filename: str) -> FileResponse:
    path = file_service.resolve(filename)
    return FileResponse(
        path=str(path),
        headers={"Cache-Control": "public, max-age=86400"},
    )
