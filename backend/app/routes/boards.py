"""
Journal Board Backend — Board Route Handlers
==============================================

What:  POST/GET/PUT/DELETE for boards, plus lookup by edit or public token.
Why:   Entry point for creating a board and for opening one from a share link.
How:   Extracts path/query/body values, delegates to BoardService, wraps the
       result in {"data": ...}.

Share links:
    {frontend}/board/{id}/edit?edit_token=…     → GET /api/v1/boards/edit/{edit_token}
    {frontend}/board/{id}/public?public_token=… → GET /api/v1/boards/public/{public_token}
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes.dependencies import edit_token_param, read_token_param
from app.schemas.board import (
    BoardCreate,
    BoardCreateResponse,
    BoardResponse,
    BoardUpdate,
    BoardWithTokensResponse,
)
from app.schemas.common import DataResponse, ErrorResponse
from app.services.board_service import board_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/boards", tags=["Boards"])

_ERRORS = {
    401: {"description": "Missing or wrong token", "model": ErrorResponse},
    404: {"description": "Board not found", "model": ErrorResponse},
}


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=DataResponse[BoardCreateResponse],
    responses={422: {"description": "Invalid board data", "model": ErrorResponse}},
    summary="Create a board",
    description="Creates a board with fresh edit and public tokens and returns both share URLs.",
)
async def create_board(
    body: BoardCreate,
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[BoardCreateResponse]:
    result = await board_service.create_board(
        db, title=body.title, description=body.description, skin=body.skin,
    )
    return DataResponse(data=result)


@router.get(
    "/edit/{edit_token}",
    response_model=DataResponse[BoardWithTokensResponse],
    responses={404: _ERRORS[404]},
    summary="Open a board with its edit token",
)
async def get_board_by_edit_token(
    edit_token: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[BoardWithTokensResponse]:
    return DataResponse(data=await board_service.get_board_by_edit_token(db, edit_token))


@router.get(
    "/public/{public_token}",
    response_model=DataResponse[BoardResponse],
    responses={404: _ERRORS[404]},
    summary="Open a board read-only with its public token",
)
async def get_board_by_public_token(
    public_token: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[BoardResponse]:
    return DataResponse(data=await board_service.get_board_by_public_token(db, public_token))


@router.get(
    "/{board_id}",
    response_model=DataResponse[BoardResponse],
    responses=_ERRORS,
    summary="Get a board by id",
    description="Requires either the edit token or the public token.",
)
async def get_board(
    board_id: UUID,
    token: Optional[str] = Depends(read_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[BoardResponse]:
    return DataResponse(data=await board_service.get_board(db, board_id, token))


@router.put(
    "/{board_id}",
    response_model=DataResponse[BoardWithTokensResponse],
    responses=_ERRORS,
    summary="Update a board",
)
async def update_board(
    board_id: UUID,
    body: BoardUpdate,
    token: Optional[str] = Depends(edit_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[BoardWithTokensResponse]:
    result = await board_service.update_board(
        db,
        board_id,
        token,
        title=body.title,
        description=body.description,
        skin=body.skin,
    )
    return DataResponse(data=result)


@router.delete(
    "/{board_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_ERRORS,
    summary="Delete a board with all its pages and elements",
)
async def delete_board(
    board_id: UUID,
    token: Optional[str] = Depends(edit_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await board_service.delete_board(db, board_id, token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
