"""
Journal Board Backend — Recap Service Tests
=============================================

What we test:
    ✅ Day / week / month ranges, including Sunday and leap-February edges
    ✅ December rolls over into the next year
    ✅ Unknown filters fall back to "day"
    ✅ get_recap selects pages in range with their element counts
"""

import uuid
from datetime import date, datetime, timedelta, timezone

import pytest

from app.exceptions import NotFoundError
from app.services.recap_service import RecapService, calculate_date_range, normalize_filter


def _utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


END_OF_DAY = (23, 59, 59, 999999)


class TestCalculateDateRange:

    def test_day(self):
        start, end = calculate_date_range("day", date(2024, 1, 15))
        assert start == _utc(2024, 1, 15)
        assert end == _utc(2024, 1, 15, *END_OF_DAY)

    def test_week_starts_monday(self):
        start, end = calculate_date_range("week", date(2024, 1, 17))
        assert start == _utc(2024, 1, 15)
        assert end == _utc(2024, 1, 21, *END_OF_DAY)

    def test_week_of_a_sunday(self):
        start, end = calculate_date_range("week", date(2024, 1, 14))
        assert start == _utc(2024, 1, 8)
        assert end == _utc(2024, 1, 14, *END_OF_DAY)

    def test_month(self):
        start, end = calculate_date_range("month", date(2024, 1, 15))
        assert start == _utc(2024, 1, 1)
        assert end == _utc(2024, 1, 31, *END_OF_DAY)

    def test_leap_february(self):
        start, end = calculate_date_range("month", date(2024, 2, 10))
        assert end == _utc(2024, 2, 29, *END_OF_DAY)
        assert (end - start) + timedelta(microseconds=1) == timedelta(days=29)

    def test_december_rolls_over(self):
        start, end = calculate_date_range("month", date(2023, 12, 31))
        assert start == _utc(2023, 12, 1)
        assert end == _utc(2023, 12, 31, *END_OF_DAY)

    def test_unknown_filter_is_day(self):
        assert calculate_date_range("year", date(2024, 1, 15)) == calculate_date_range("day", date(2024, 1, 15))

    def test_aware_datetime_reference_is_converted_to_utc(self):
        reference = datetime(2024, 1, 16, 1, 0, tzinfo=timezone(timedelta(hours=5)))
        start, _ = calculate_date_range("day", reference)
        assert start == _utc(2024, 1, 15)

    def test_normalize_filter(self):
        assert normalize_filter(" Week ") == "week"
        assert normalize_filter(None) == "day"
        assert normalize_filter("fortnight") == "day"


class TestRecapService:

    def setup_method(self):
        self.service = RecapService()

    @pytest.mark.asyncio
    async def test_week_recap_counts_elements(self, db_session, make_board, make_page, make_element):
        board = await make_board()
        monday = await make_page(board, 0, title="Monday", date=_utc(2024, 1, 15, 8))
        friday = await make_page(board, 1, title="Friday", date=_utc(2024, 1, 19, 20))
        await make_page(board, 2, title="Next week", date=_utc(2024, 1, 22, 9))
        await make_element(monday, 0)
        await make_element(friday, 0)
        await make_element(friday, 1)

        recap = await self.service.get_recap(db_session, board.id, None, "week", date(2024, 1, 17))

        assert recap.filter == "week"
        assert [page.title for page in recap.pages] == ["Friday", "Monday"]
        assert [page.element_count for page in recap.pages] == [2, 1]
        assert recap.page_count == 2
        assert recap.element_count == 3

    @pytest.mark.asyncio
    async def test_same_date_pages_follow_order_idx(self, db_session, make_board, make_page):
        board = await make_board()
        when = _utc(2024, 1, 15, 12)
        await make_page(board, 1, title="Second", date=when)
        await make_page(board, 0, title="First", date=when)

        recap = await self.service.get_recap(db_session, board.id, None, "day", date(2024, 1, 15))

        assert [page.title for page in recap.pages] == ["First", "Second"]

    @pytest.mark.asyncio
    async def test_empty_range(self, db_session, make_board, make_page):
        board = await make_board()
        await make_page(board, 0, date=_utc(2024, 3, 1))

        recap = await self.service.get_recap(db_session, board.id, None, "day", date(2024, 1, 15))

        assert recap.pages == []
        assert recap.element_count == 0

    @pytest.mark.asyncio
    async def test_missing_board(self, db_session):
        with pytest.raises(NotFoundError):
            await self.service.get_recap(db_session, uuid.uuid4(), None, "day", date(2024, 1, 15))
