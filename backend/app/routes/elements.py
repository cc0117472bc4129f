"""
Journal Board Backend — Element Route Handlers
================================================

What:  Element listing, creation, update, deletion and batch restack.

Route order matters:
    PUT …/elements/reorder is registered before PUT …/elements/{element_id};
    otherwise "reorder" would be parsed as an element id and fail UUID validation.
"""

import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes.dependencies import edit_token_param, read_token_param
from app.schemas.common import DataResponse, ErrorResponse
from app.schemas.element import (
    ElementCreate,
    ElementListResponse,
    ElementReorderRequest,
    ElementResponse,
    ElementUpdate,
)
from app.services.element_service import element_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/boards/{board_id}/pages/{page_id}/elements",
    tags=["Elements"],
)

_ERRORS = {
    401: {"description": "Missing or wrong token", "model": ErrorResponse},
    404: {"description": "Board, page or element not found", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=DataResponse[ElementListResponse],
    responses=_ERRORS,
    summary="List the elements of a page (ascending z)",
)
async def list_elements(
    board_id: UUID,
    page_id: UUID,
    token: Optional[str] = Depends(read_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[ElementListResponse]:
    return DataResponse(data=await element_service.list_elements(db, board_id, page_id, token))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=DataResponse[ElementResponse],
    responses=_ERRORS,
    summary="Add an element on top of the page",
)
async def create_element(
    board_id: UUID,
    page_id: UUID,
    body: ElementCreate,
    token: Optional[str] = Depends(edit_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[ElementResponse]:
    result = await element_service.create_element(db, board_id, page_id, token, body)
    return DataResponse(data=result)


@router.put(
    "/reorder",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        **_ERRORS,
        409: {"description": "An element is not on this page", "model": ErrorResponse},
    },
    summary="Restack elements",
    description="Assigns explicit z values to several elements of the page in one transaction.",
)
async def reorder_elements(
    board_id: UUID,
    page_id: UUID,
    body: ElementReorderRequest,
    token: Optional[str] = Depends(edit_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await element_service.reorder_elements(db, board_id, page_id, token, body.elements)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/{element_id}",
    response_model=DataResponse[ElementResponse],
    responses=_ERRORS,
    summary="Update an element",
)
async def update_element(
    board_id: UUID,
    page_id: UUID,
    element_id: UUID,
    body: ElementUpdate,
    token: Optional[str] = Depends(edit_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[ElementResponse]:
    result = await element_service.update_element(
        db, board_id, page_id, element_id, token, body,
    )
    return DataResponse(data=result)


@router.delete(
    "/{element_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_ERRORS,
    summary="Delete an element",
)
async def delete_element(
    board_id: UUID,
    page_id: UUID,
    element_id: UUID,
    token: Optional[str] = Depends(edit_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await element_service.delete_element(db, board_id, page_id, element_id, token)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
