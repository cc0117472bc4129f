"""
Journal Board Backend — Board Service
=======================================

What:  Create, look up, update and delete boards.
Why:   Boards are the root of the hierarchy and the holder of both capability
       tokens; this is the only service that hands tokens back to clients.
How:   Each operation first passes the access gate, then touches storage
       inside the request transaction.
Who:   Called by app/routes/boards.py.

Lookups:
    ┌──────────────────────────────┬───────────────────────────────────────┐
    │ get_board_by_edit_token      │ board + both tokens + ordered pages   │
    │ get_board_by_public_token    │ board + public token + ordered pages  │
    │ get_board(board_id, token)   │ gated read; a token is required       │
    └──────────────────────────────┴───────────────────────────────────────┘

Deletion:
    delete_board removes elements, then pages, then the board in the same
    transaction, so a failure part-way leaves the board untouched.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.config import settings
from app.exceptions import DatabaseError, NotFoundError
from app.models.board import Board
from app.models.element import Element
from app.models.page import Page
from app.schemas.board import (
    BoardCreateResponse,
    BoardResponse,
    BoardWithTokensResponse,
)
from app.schemas.page import PageResponse
from app.services.access import TokenLike, access_gate

logger = logging.getLogger(__name__)


def build_edit_url(board: Board) -> str:
    return f"{settings.frontend_url}/board/{board.id}/edit?edit_token={board.edit_token}"


def build_public_url(board: Board) -> str:
    return f"{settings.frontend_url}/board/{board.id}/public?public_token={board.public_token}"


def _board_fields(board: Board) -> dict:
    pages = [PageResponse.model_validate(page) for page in board.pages]
    return {
        "id": board.id,
        "title": board.title,
        "description": board.description,
        "skin": board.skin,
        "public_token": board.public_token,
        "created_at": board.created_at,
        "updated_at": board.updated_at,
        "page_count": len(pages),
        "pages": pages,
    }


def to_board_response(board: Board) -> BoardResponse:
    return BoardResponse(**_board_fields(board))


def to_board_with_tokens(board: Board) -> BoardWithTokensResponse:
    return BoardWithTokensResponse(edit_token=board.edit_token, **_board_fields(board))


class BoardService:
    """
    Business logic for boards.

    Stateless; storage errors are logged with context and re-raised as
    DatabaseError so clients never see SQL or driver messages.
    """

    async def _load(self, db: AsyncSession, *criteria) -> Optional[Board]:
        result = await db.execute(
            select(Board)
            .options(selectinload(Board.pages))
            .where(*criteria)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def create_board(
        self,
        db: AsyncSession,
        title: str,
        description: str = "",
        skin: str = "default",
    ) -> BoardCreateResponse:
        """
        Create a board with freshly generated edit and public tokens.

        Returns the board (both tokens included) and the two share URLs.
        """
        try:
            board = Board(
                title=title,
                description=description or "",
                skin=skin or "default",
                edit_token=uuid.uuid4(),
                public_token=uuid.uuid4(),
            )
            db.add(board)
            await db.flush()

            board = await self._load(db, Board.id == board.id)
        except SQLAlchemyError as e:
            logger.error("Database error creating board: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the board. Please try again.",
                context={"error_type": type(e).__name__},
            )

        logger.info("Board created: %s (skin=%s)", board.id, board.skin)
        return BoardCreateResponse(
            board=to_board_with_tokens(board),
            edit_url=build_edit_url(board),
            public_url=build_public_url(board),
        )

    async def get_board_by_edit_token(
        self, db: AsyncSession, edit_token: uuid.UUID,
    ) -> BoardWithTokensResponse:
        try:
            board = await self._load(db, Board.edit_token == edit_token)
        except SQLAlchemyError as e:
            logger.error("Database error looking up board by edit token: %s", str(e))
            raise DatabaseError(message="Could not retrieve the board. Please try again.")

        if board is None:
            raise NotFoundError(resource="board")
        return to_board_with_tokens(board)

    async def get_board_by_public_token(
        self, db: AsyncSession, public_token: uuid.UUID,
    ) -> BoardResponse:
        try:
            board = await self._load(db, Board.public_token == public_token)
        except SQLAlchemyError as e:
            logger.error("Database error looking up board by public token: %s", str(e))
            raise DatabaseError(message="Could not retrieve the board. Please try again.")

        if board is None:
            raise NotFoundError(resource="board")
        return to_board_response(board)

    async def get_board(
        self, db: AsyncSession, board_id: uuid.UUID, token: TokenLike,
    ) -> BoardResponse:
        """Board detail by id; either token works, but one must be presented."""
        await access_gate.require_read(db, board_id, token, allow_anonymous=False)

        board = await self._load(db, Board.id == board_id)
        if board is None:
            raise NotFoundError(resource="board", resource_id=str(board_id))
        return to_board_response(board)

    async def update_board(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        token: TokenLike,
        title: Optional[str] = None,
        description: Optional[str] = None,
        skin: Optional[str] = None,
    ) -> BoardWithTokensResponse:
        """Partial update; only the fields that are not None change."""
        await access_gate.require_edit(db, board_id, token)

        try:
            board = await self._load(db, Board.id == board_id)
            if board is None:
                raise NotFoundError(resource="board", resource_id=str(board_id))

            if title is not None:
                board.title = title
            if description is not None:
                board.description = description
            if skin is not None:
                board.skin = skin
            board.updated_at = datetime.now(timezone.utc)
            await db.flush()
        except SQLAlchemyError as e:
            logger.error("Database error updating board %s: %s", board_id, str(e))
            raise DatabaseError(
                message="Could not update the board. Please try again.",
                context={"board_id": str(board_id)},
            )

        logger.info("Board updated: %s", board_id)
        return to_board_with_tokens(board)

    async def delete_board(
        self, db: AsyncSession, board_id: uuid.UUID, token: TokenLike,
    ) -> None:
        """Delete a board and everything below it."""
        await access_gate.require_edit(db, board_id, token)

        try:
            page_ids = select(Page.id).where(Page.board_id == board_id)
            await db.execute(
                delete(Element)
                .where(Element.page_id.in_(page_ids))
                .execution_options(synchronize_session=False)
            )
            await db.execute(
                delete(Page)
                .where(Page.board_id == board_id)
                .execution_options(synchronize_session=False)
            )
            await db.execute(
                delete(Board)
                .where(Board.id == board_id)
                .execution_options(synchronize_session=False)
            )
        except SQLAlchemyError as e:
            logger.error("Database error deleting board %s: %s", board_id, str(e))
            raise DatabaseError(
                message="Could not delete the board. Please try again.",
                context={"board_id": str(board_id)},
            )

        logger.info("Board deleted: %s", board_id)


# ── Singleton Instance ────────────────────────────────────────────────────
board_service = BoardService()
