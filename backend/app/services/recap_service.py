"""
Journal Board Backend — Recap Service
=======================================

What:  Summarizes the pages of a board dated within a day, week or month.
Why:   Powers the "look back" view: which pages were written in a period and
       how much is on each of them.
How:   Computes a closed date range from the filter and a reference date,
       selects the pages in range, and counts their elements in one grouped query.
Who:   Called by GET /api/v1/boards/{board_id}/recap.

Date ranges (reference 2024-01-15, a Monday):
    day   → 2024-01-15 00:00:00 … 2024-01-15 23:59:59.999999
    week  → 2024-01-15 00:00:00 … 2024-01-21 23:59:59.999999  (Monday to Sunday)
    month → 2024-01-01 00:00:00 … 2024-01-31 23:59:59.999999
    anything else is treated as "day"

All ranges are in UTC.
"""

import logging
import uuid
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Optional, Tuple, Union

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError
from app.models.element import Element
from app.models.page import Page
from app.schemas.recap import RecapDateRange, RecapPage, RecapResponse
from app.services.access import TokenLike, access_gate

logger = logging.getLogger(__name__)

RECAP_FILTERS = ("day", "week", "month")

_ONE_TICK = timedelta(microseconds=1)


def normalize_filter(value: Optional[str]) -> str:
    value = (value or "").strip().lower()
    return value if value in RECAP_FILTERS else "day"


def calculate_date_range(
    filter_name: Optional[str],
    reference: Union[date, datetime, None] = None,
) -> Tuple[datetime, datetime]:
    """
    Inclusive [start, end] range for a recap filter around a reference date.

    Args:
        filter_name: "day", "week" or "month"; anything else means "day"
        reference:   Date inside the wanted period; defaults to today (UTC)

    Returns:
        (start, end) as timezone-aware UTC datetimes, end being the last
        microsecond of the period.
    """
    if reference is None:
        reference = datetime.now(timezone.utc)
    if isinstance(reference, datetime):
        if reference.tzinfo is not None:
            reference = reference.astimezone(timezone.utc)
        reference = reference.date()

    day_start = datetime.combine(reference, time.min, tzinfo=timezone.utc)
    filter_name = normalize_filter(filter_name)

    if filter_name == "week":
        start = day_start - timedelta(days=day_start.weekday())  # Monday
        end = start + timedelta(days=7) - _ONE_TICK
    elif filter_name == "month":
        start = day_start.replace(day=1)
        if start.month == 12:
            next_month = start.replace(year=start.year + 1, month=1)
        else:
            next_month = start.replace(month=start.month + 1)
        end = next_month - _ONE_TICK
    else:
        start = day_start
        end = day_start + timedelta(days=1) - _ONE_TICK

    return start, end


class RecapService:
    """Read-only summaries over a board's pages."""

    async def get_recap(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        token: TokenLike,
        filter_name: Optional[str] = "day",
        reference: Optional[date] = None,
    ) -> RecapResponse:
        """
        Pages of the board dated inside the range, newest date first, then by
        order_idx, each with its element count.
        """
        await access_gate.require_read(db, board_id, token, allow_anonymous=True)

        filter_name = normalize_filter(filter_name)
        start, end = calculate_date_range(filter_name, reference)

        try:
            result = await db.execute(
                select(Page)
                .where(
                    Page.board_id == board_id,
                    Page.date >= start,
                    Page.date <= end,
                )
                .order_by(Page.date.desc(), Page.order_idx.asc())
            )
            pages = list(result.scalars().all())

            counts: Dict[uuid.UUID, int] = {}
            if pages:
                count_result = await db.execute(
                    select(Element.page_id, func.count(Element.id))
                    .where(Element.page_id.in_([page.id for page in pages]))
                    .group_by(Element.page_id)
                )
                counts = {page_id: count for page_id, count in count_result.all()}
        except SQLAlchemyError as e:
            logger.error("Database error building recap for board %s: %s", board_id, str(e))
            raise DatabaseError(message="Could not build the recap. Please try again.")

        recap_pages = [
            RecapPage(
                id=page.id,
                title=page.title,
                date=page.date,
                order_idx=page.order_idx,
                element_count=counts.get(page.id, 0),
                created_at=page.created_at,
                updated_at=page.updated_at,
            )
            for page in pages
        ]

        logger.debug(
            "Recap for board %s (%s %s..%s): %d pages",
            board_id, filter_name, start.date(), end.date(), len(recap_pages),
        )
        return RecapResponse(
            filter=filter_name,
            date_range=RecapDateRange(start_date=start, end_date=end),
            page_count=len(recap_pages),
            element_count=sum(page.element_count for page in recap_pages),
            pages=recap_pages,
        )


# ── Singleton Instance ────────────────────────────────────────────────────
recap_service = RecapService()
