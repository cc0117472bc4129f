"""
Journal Board Backend — Recap Route Handler
=============================================

What:  GET /api/v1/boards/{board_id}/recap?filter=day|week|month&date=YYYY-MM-DD
Why:   Summary view of the pages written in a period.
How:   `date` is validated by FastAPI as an ISO date (422 otherwise); an unknown
       filter falls back to "day" in RecapService.
"""

import datetime as dt
import logging
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db_session
from app.routes.dependencies import read_token_param
from app.schemas.common import DataResponse, ErrorResponse
from app.schemas.recap import RecapResponse
from app.services.recap_service import recap_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/boards/{board_id}", tags=["Recap"])


@router.get(
    "/recap",
    response_model=DataResponse[RecapResponse],
    responses={
        401: {"description": "Wrong token", "model": ErrorResponse},
        404: {"description": "Board not found", "model": ErrorResponse},
    },
    summary="Recap of the pages dated within a day, week or month",
)
async def get_recap(
    board_id: UUID,
    filter: str = Query(default="day", description="day, week or month"),
    date: Optional[dt.date] = Query(
        default=None,
        description="Reference date (YYYY-MM-DD); defaults to today",
    ),
    token: Optional[str] = Depends(read_token_param),
    db: AsyncSession = Depends(get_db_session),
) -> DataResponse[RecapResponse]:
    result = await recap_service.get_recap(
        db, board_id, token, filter_name=filter, reference=date,
    )
    return DataResponse(data=result)
