"""
Journal Board Backend — Board Service Tests
=============================================

What we test:
    ✅ Created boards get two distinct tokens and matching share URLs
    ✅ Lookup by edit token exposes the edit token; by public token it does not
    ✅ get_board requires a token
    ✅ Partial updates
    ✅ delete_board removes pages and elements too
"""

import uuid

import pytest
from sqlalchemy import func, select

from app.exceptions import NotFoundError, UnauthorizedError
from app.models import Board, Element, Page
from app.services.board_service import BoardService


class TestBoardService:

    def setup_method(self):
        self.service = BoardService()

    @pytest.mark.asyncio
    async def test_create_board_generates_distinct_tokens(self, db_session):
        result = await self.service.create_board(db_session, title="Summer", skin="cork")

        board = result.board
        assert board.title == "Summer"
        assert board.skin == "cork"
        assert board.edit_token != board.public_token
        assert board.page_count == 0
        assert result.edit_url == (
            f"http://frontend.test/board/{board.id}/edit?edit_token={board.edit_token}"
        )
        assert result.public_url == (
            f"http://frontend.test/board/{board.id}/public?public_token={board.public_token}"
        )

    @pytest.mark.asyncio
    async def test_lookup_by_edit_token_includes_ordered_pages(
        self, db_session, make_board, make_page,
    ):
        board = await make_board()
        second = await make_page(board, 1, title="Second")
        first = await make_page(board, 0, title="First")

        result = await self.service.get_board_by_edit_token(db_session, board.edit_token)

        assert result.edit_token == board.edit_token
        assert [page.id for page in result.pages] == [first.id, second.id]
        assert result.page_count == 2

    @pytest.mark.asyncio
    async def test_lookup_by_public_token_hides_edit_token(self, db_session, make_board):
        board = await make_board()
        result = await self.service.get_board_by_public_token(db_session, board.public_token)

        assert result.id == board.id
        assert "edit_token" not in result.model_dump()

    @pytest.mark.asyncio
    async def test_public_token_does_not_open_edit_lookup(self, db_session, make_board):
        board = await make_board()
        with pytest.raises(NotFoundError):
            await self.service.get_board_by_edit_token(db_session, board.public_token)

    @pytest.mark.asyncio
    async def test_get_board_requires_token(self, db_session, make_board):
        board = await make_board()
        with pytest.raises(UnauthorizedError):
            await self.service.get_board(db_session, board.id, None)

        result = await self.service.get_board(db_session, board.id, str(board.public_token))
        assert result.id == board.id

    @pytest.mark.asyncio
    async def test_update_board_partial(self, db_session, make_board):
        board = await make_board(title="Before", skin="wood")

        result = await self.service.update_board(
            db_session, board.id, str(board.edit_token), title="After",
        )

        assert result.title == "After"
        assert result.skin == "wood"

    @pytest.mark.asyncio
    async def test_update_board_with_public_token_rejected(self, db_session, make_board):
        board = await make_board()
        with pytest.raises(UnauthorizedError):
            await self.service.update_board(
                db_session, board.id, str(board.public_token), title="Hijacked",
            )

    @pytest.mark.asyncio
    async def test_update_missing_board_is_not_found(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.update_board(db_session, uuid.uuid4(), str(uuid.uuid4()), title="x")

    @pytest.mark.asyncio
    async def test_delete_board_cascades(self, db_session, make_board, make_page, make_element):
        board = await make_board()
        keep = await make_board(title="Keep")
        page = await make_page(board, 0)
        await make_element(page, 0)
        await make_element(page, 1)
        kept_page = await make_page(keep, 0)
        await make_element(kept_page, 0)

        await self.service.delete_board(db_session, board.id, str(board.edit_token))

        boards = (await db_session.execute(select(func.count(Board.id)))).scalar_one()
        pages = (await db_session.execute(select(func.count(Page.id)))).scalar_one()
        elements = (await db_session.execute(select(func.count(Element.id)))).scalar_one()
        assert (boards, pages, elements) == (1, 1, 1)
