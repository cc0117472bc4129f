"""
Journal Board Backend — Page Route Handlers
=============================================

What:  Page listing, creation, detail, update (including reposition) and deletion.
How:   Reads are open to anonymous callers when the board exists; changes
       require ?edit_token=….
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes.dependencies import edit_token_param, read_token_param
from app.schemas.common import DataResponse, ErrorResponse
from app.schemas.page import (
    PageCreate,
    PageListResponse,
    PageResponse,
    PageUpdate,
    PageWithElementsResponse,
)
from app.services.page_service import page_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/boards/{board_id}/pages", tags=["Pages"])

_ERRORS = {
    401: {"description": "Missing or wrong token", "model": ErrorResponse},
    404: {"description": "Board or page not found", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=DataResponse[PageListResponse],
    responses=_ERRORS,
    summary="List the pages of a board",
    description="Pages ordered by order_idx, each with its elements ordered by z.",
)
async def list_pages(
    board_id: UUID,
    token: Optional[str] = Depends(read_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[PageListResponse]:
    return DataResponse(data=await page_service.list_pages(db, board_id, token))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=DataResponse[PageResponse],
    responses=_ERRORS,
    summary="Create a page",
    description="Appends the page; when order_idx is given the page is moved there.",
)
async def create_page(
    board_id: UUID,
    body: PageCreate,
    token: Optional[str] = Depends(edit_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[PageResponse]:
    result = await page_service.create_page(
        db,
        board_id,
        token,
        title=body.title,
        date=body.date,
        order_idx=body.order_idx,
    )
    return DataResponse(data=result)


@router.get(
    "/{page_id}",
    response_model=DataResponse[PageWithElementsResponse],
    responses=_ERRORS,
    summary="Get a page with its elements",
)
async def get_page(
    board_id: UUID,
    page_id: UUID,
    token: Optional[str] = Depends(read_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[PageWithElementsResponse]:
    return DataResponse(data=await page_service.get_page(db, board_id, page_id, token))


@router.put(
    "/{page_id}",
    response_model=DataResponse[PageResponse],
    responses=_ERRORS,
    summary="Update or move a page",
)
async def update_page(
    board_id: UUID,
    page_id: UUID,
    body: PageUpdate,
    token: Optional[str] = Depends(edit_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[PageResponse]:
    result = await page_service.update_page(
        db,
        board_id,
        page_id,
        token,
        title=body.title,
        date=body.date,
        order_idx=body.order_idx,
    )
    return DataResponse(data=result)


@router.delete(
    "/{page_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_ERRORS,
    summary="Delete a page and its elements",
)
async def delete_page(
    board_id: UUID,
    page_id: UUID,
    token: Optional[str] = Depends(edit_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await page_service.delete_page(db, board_id, page_id, token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
