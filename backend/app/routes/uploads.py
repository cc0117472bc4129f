"""
Journal Board Backend — Upload Route Handlers
===============================================

What:  POST /api/v1/boards/{board_id}/upload stores an image for a board;
       GET /uploads/boards/{board_id}/{filename} serves it back.
Why:   Image elements reference their picture by URL.

Upload Processing:
    1. Read the multipart `file` field into memory
       (bounded by max_upload_size; the declared file size is checked first)
    2. FileService checks the edit token, extension, size and image format
    3. The file is written to uploads/boards/{board_id}/{uuid}{ext}

Caching:
    Stored files are immutable (UUID names), so they are served with a long
    public cache lifetime.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes.dependencies import edit_token_param
from app.schemas.common import DataResponse, ErrorResponse
from app.schemas.upload import UploadResponse
from app.services.file_service import file_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Uploads"])


@router.post(
    "/api/v1/boards/{board_id}/upload",
    status_code=status.HTTP_201_CREATED,
    response_model=DataResponse[UploadResponse],
    responses={
        401: {"description": "Missing or wrong edit token", "model": ErrorResponse},
        404: {"description": "Board not found", "model": ErrorResponse},
        422: {"description": "Not an accepted image", "model": ErrorResponse},
    },
    summary="Upload an image for a board",
    description="Accepts JPEG, PNG or GIF up to the configured size limit (10MB by default).",
)
async def upload_image(
    board_id: UUID,
    file: UploadFile = File(..., description="Image file (.jpg, .jpeg, .png, .gif)"),
    token: Optional[str] = Depends(edit_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[UploadResponse]:
    content = await file.read()

    result = await file_service.upload_board_image(
        db,
        board_id,
        token,
        filename=file.filename,
        content=content,
        content_length=file.size,
    )
    return DataResponse(data=result)


@router.get(
    "/uploads/boards/{board_id}/{filename}",
    summary="Serve an uploaded image",
    responses={
        200: {"description": "Image file"},
        404: {"description": "File not found", "model": ErrorResponse},
    },
)
async def serve_upload(board_id: UUID, filename: str) -> FileResponse:
    full_path = file_service.resolve_stored_file(board_id, filename)
    return FileResponse(
        path=str(full_path),
        media_type=file_service.get_mime_type(full_path.name),
        headers={"Cache-Control": "public, max-age=86400"},
    )
