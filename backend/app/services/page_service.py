"""
Journal Board Backend — Page Service
======================================

What:  Create, list, read, update (including reposition) and delete pages.
Why:   Pages are the ordered children of a board; every change to their
       order goes through the ordering engine so order_idx stays dense.
How:   access gate → membership check (page belongs to board) → ordering
       engine / storage, all inside the request transaction.
Who:   Called by app/routes/pages.py; ElementService reuses the membership lookup.

Positioning Flow (create with order_idx=1 on pages [A=0, B=1, C=2]):
    1. Append new page D at max + 1 = 3
    2. Clamp the requested index into [0, 3] → 1
    3. Move D from 3 to 1: B, C shift up → [A=0, D=1, B=2, C=3]

Deletion:
    delete_page removes the page's elements and the page. Siblings keep their
    order_idx; the gap closes on the next move within the board.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import DatabaseError, NotFoundError
from app.models.element import Element
from app.models.page import Page
from app.schemas.page import (
    PageListResponse,
    PageResponse,
    PageWithElementsResponse,
)
from app.services.access import TokenLike, access_gate
from app.services.ordering import PAGES, clamp_position, ordering_engine

logger = logging.getLogger(__name__)


class PageService:
    """Business logic for pages. Stateless."""

    async def get_page_in_board(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        page_id: uuid.UUID,
        with_elements: bool = False,
    ) -> Page:
        """
        Membership lookup: the page must exist AND belong to `board_id`.

        A page of another board is reported as not found, the same as a
        page that does not exist.
        """
        query = select(Page).where(Page.id == page_id, Page.board_id == board_id)
        if with_elements:
            query = query.options(selectinload(Page.elements))
        result = await db.execute(query.execution_options(populate_existing=True))
        page = result.scalar_one_or_none()
        if page is None:
            raise NotFoundError(resource="page", resource_id=str(page_id))
        return page

    async def _count(self, db: AsyncSession, board_id: uuid.UUID) -> int:
        result = await db.execute(
            select(func.count(Page.id)).where(Page.board_id == board_id)
        )
        return int(result.scalar_one())

    async def create_page(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        token: TokenLike,
        title: str,
        date: datetime,
        order_idx: Optional[int] = None,
    ) -> PageResponse:
        """
        Append a page to the board, optionally moving it to `order_idx`.

        Raises:
            NotFoundError:     board does not exist
            UnauthorizedError: edit token missing or wrong
            DatabaseError:     storage failure (transaction rolls back)
        """
        await access_gate.require_edit(db, board_id, token)

        try:
            position = await ordering_engine.append_position(db, PAGES, board_id)
            page = Page(board_id=board_id, title=title, date=date, order_idx=position)
            db.add(page)
            await db.flush()

            if order_idx is not None:
                target = clamp_position(order_idx, await self._count(db, board_id))
                await ordering_engine.move(db, PAGES, board_id, page.id, target)
                await db.refresh(page)
        except SQLAlchemyError as e:
            logger.error("Database error creating page on board %s: %s", board_id, str(e))
            raise DatabaseError(
                message="Could not create the page. Please try again.",
                context={"board_id": str(board_id)},
            )

        logger.info("Page created: %s on board %s at %d", page.id, board_id, page.order_idx)
        return PageResponse.model_validate(page)

    async def list_pages(
        self, db: AsyncSession, board_id: uuid.UUID, token: TokenLike,
    ) -> PageListResponse:
        """All pages of a board by order_idx, each with its elements by z."""
        await access_gate.require_read(db, board_id, token, allow_anonymous=True)

        try:
            result = await db.execute(
                select(Page)
                .options(selectinload(Page.elements))
                .where(Page.board_id == board_id)
                .order_by(Page.order_idx, Page.created_at)
                .execution_options(populate_existing=True)
            )
            pages = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing pages of board %s: %s", board_id, str(e))
            raise DatabaseError(message="Could not retrieve pages. Please try again.")

        return PageListResponse(
            pages=[PageWithElementsResponse.model_validate(page) for page in pages],
            total=len(pages),
        )

    async def get_page(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        page_id: uuid.UUID,
        token: TokenLike,
    ) -> PageWithElementsResponse:
        await access_gate.require_read(db, board_id, token, allow_anonymous=True)
        page = await self.get_page_in_board(db, board_id, page_id, with_elements=True)
        return PageWithElementsResponse.model_validate(page)

    async def update_page(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        page_id: uuid.UUID,
        token: TokenLike,
        title: Optional[str] = None,
        date: Optional[datetime] = None,
        order_idx: Optional[int] = None,
    ) -> PageResponse:
        """
        Partial update. A given order_idx is clamped into [0, count - 1] and
        applied as a move, shifting the pages in between.
        """
        await access_gate.require_edit(db, board_id, token)
        page = await self.get_page_in_board(db, board_id, page_id)

        try:
            if title is not None:
                page.title = title
            if date is not None:
                page.date = date
            page.updated_at = datetime.now(timezone.utc)
            await db.flush()

            if order_idx is not None:
                target = clamp_position(order_idx, await self._count(db, board_id))
                await ordering_engine.move(db, PAGES, board_id, page_id, target)

            await db.refresh(page)
        except SQLAlchemyError as e:
            logger.error("Database error updating page %s: %s", page_id, str(e))
            raise DatabaseError(
                message="Could not update the page. Please try again.",
                context={"page_id": str(page_id)},
            )

        logger.info("Page updated: %s (order_idx=%d)", page_id, page.order_idx)
        return PageResponse.model_validate(page)

    async def delete_page(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        page_id: uuid.UUID,
        token: TokenLike,
    ) -> None:
        """Delete a page and its elements. Sibling pages keep their order_idx."""
        await access_gate.require_edit(db, board_id, token)
        await self.get_page_in_board(db, board_id, page_id)

        try:
            await db.execute(
                delete(Element)
                .where(Element.page_id == page_id)
                .execution_options(synchronize_session=False)
            )
            await db.execute(
                delete(Page)
                .where(Page.id == page_id)
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            logger.error("Database error deleting page %s: %s", page_id, str(e))
            raise DatabaseError(
                message="Could not delete the page. Please try again.",
                context={"page_id": str(page_id)},
            )

        logger.info("Page deleted: %s from board %s", page_id, board_id)


# ── Singleton Instance ────────────────────────────────────────────────────
page_service = PageService()
