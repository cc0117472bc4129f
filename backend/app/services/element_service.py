"""
Journal Board Backend — Element Service
=========================================

What:  Create, list, update, delete and restack the elements of a page.
Why:   Elements carry the visual content; their z values define the stack
       the client paints bottom to top.
How:   access gate → page ∈ board → element ∈ page → storage / ordering.
Who:   Called by app/routes/elements.py.

Stacking:
    - New elements go on top (z = max + 1).
    - update_element never touches z.
    - reorder_elements applies a batch of explicit z values after checking
      every id belongs to the page; one foreign id fails the whole batch and
      nothing is written.
    - delete_element leaves sibling z values as they are.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DatabaseError, NotFoundError
from app.models.element import Element
from app.schemas.element import (
    ElementCreate,
    ElementListResponse,
    ElementResponse,
    ElementUpdate,
    ElementZUpdate,
)
from app.services.access import TokenLike, access_gate
from app.services.ordering import ELEMENTS, ordering_engine
from app.services.page_service import page_service

logger = logging.getLogger(__name__)

# Columns a client may change through update_element
_MUTABLE_FIELDS = ("x", "y", "w", "h", "rotation", "visible", "locked", "payload")


class ElementService:
    """Business logic for elements. Stateless."""

    async def get_element_in_page(
        self, db: AsyncSession, page_id: uuid.UUID, element_id: uuid.UUID,
    ) -> Element:
        result = await db.execute(
            select(Element)
            .where(Element.id == element_id, Element.page_id == page_id)
            .execution_options(populate_existing=True)
        )
        element = result.scalar_one_or_none()
        if element is None:
            raise NotFoundError(resource="element", resource_id=str(element_id))
        return element

    async def create_element(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        page_id: uuid.UUID,
        token: TokenLike,
        data: ElementCreate,
    ) -> ElementResponse:
        """Place a new element on top of the page's stack."""
        await access_gate.require_edit(db, board_id, token)
        await page_service.get_page_in_board(db, board_id, page_id)

        try:
            z = await ordering_engine.append_position(db, ELEMENTS, page_id)
            element = Element(
                page_id=page_id,
                kind=data.kind.value,
                x=data.x,
                y=data.y,
                w=data.w,
                h=data.h,
                rotation=data.rotation,
                z=z,
                visible=data.visible,
                locked=data.locked,
                payload=data.payload,
            )
            db.add(element)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error creating element on page %s: %s", page_id, str(e))
            raise DatabaseError(
                message="Could not create the element. Please try again.",
                context={"page_id": str(page_id)},
            )

        logger.info("Element created: %s (%s) on page %s at z=%d", element.id, element.kind, page_id, z)
        return ElementResponse.model_validate(element)

    async def list_elements(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        page_id: uuid.UUID,
        token: TokenLike,
    ) -> ElementListResponse:
        await access_gate.require_read(db, board_id, token, allow_anonymous=True)
        await page_service.get_page_in_board(db, board_id, page_id)

        try:
            result = await db.execute(
                select(Element)
                .where(Element.page_id == page_id)
                .order_by(Element.z, Element.created_at)
                .execution_options(populate_existing=True)
            )
            elements = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Database error listing elements of page %s: %s", page_id, str(e))
            raise DatabaseError(message="Could not retrieve elements. Please try again.")

        return ElementListResponse(
            elements=[ElementResponse.model_validate(element) for element in elements],
            total=len(elements),
        )

    async def update_element(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        page_id: uuid.UUID,
        element_id: uuid.UUID,
        token: TokenLike,
        changes: ElementUpdate,
    ) -> ElementResponse:
        """
        Apply the fields present in `changes`.

        Geometry, rotation, visibility, lock and payload only; an explicit
        null clears the payload but is ignored for the other fields.
        """
        await access_gate.require_edit(db, board_id, token)
        await page_service.get_page_in_board(db, board_id, page_id)
        element = await self.get_element_in_page(db, page_id, element_id)

        try:
            for field, value in changes.model_dump(exclude_unset=True).items():
                if field not in _MUTABLE_FIELDS:
                    continue
                if value is None and field != "payload":
                    continue
                setattr(element, field, value)
            element.updated_at = datetime.now(timezone.utc)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating element %s: %s", element_id, str(e))
            raise DatabaseError(
                message="Could not update the element. Please try again.",
                context={"element_id": str(element_id)},
            )

        return ElementResponse.model_validate(element)

    async def delete_element(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        page_id: uuid.UUID,
        element_id: uuid.UUID,
        token: TokenLike,
    ) -> None:
        await access_gate.require_edit(db, board_id, token)
        await page_service.get_page_in_board(db, board_id, page_id)
        await self.get_element_in_page(db, page_id, element_id)

        try:
            await db.execute(
                delete(Element)
                .where(Element.id == element_id)
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            logger.error("Database error deleting element %s: %s", element_id, str(e))
            raise DatabaseError(
                message="Could not delete the element. Please try again.",
                context={"element_id": str(element_id)},
            )

        logger.info("Element deleted: %s from page %s", element_id, page_id)

    async def reorder_elements(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        page_id: uuid.UUID,
        token: TokenLike,
        updates: Sequence[ElementZUpdate],
    ) -> None:
        """
        Restack several elements at once.

        Raises:
            ConsistencyViolationError: an id is not on this page, or an id or
                                       target z appears twice (nothing written)
        """
        await access_gate.require_edit(db, board_id, token)
        await page_service.get_page_in_board(db, board_id, page_id)

        try:
            await ordering_engine.batch_assign(
                db, ELEMENTS, page_id, [(item.id, item.z) for item in updates],
            )
        except SQLAlchemyError as e:
            logger.error("Database error restacking page %s: %s", page_id, str(e))
            raise DatabaseError(
                message="Could not reorder the elements. Please try again.",
                context={"page_id": str(page_id)},
            )


# ── Singleton Instance ────────────────────────────────────────────────────
element_service = ElementService()
