"""Tests for paginated conversation collection."""

from unittest.mock import AsyncMock, patch

import pytest

from charsync.api import PAGE_SIZE
from charsync.collector import ConversationCollector, extract_next_cursor, is_short_page
from charsync.errors import ApiError


def full_page(prefix: str, cursor: str | None) -> list[dict]:
    """A PAGE_SIZE page whose terminal record (if any) points at cursor."""
    page = [{"character_id": f"{prefix}{i}", "is_last_id": False} for i in range(PAGE_SIZE - 1)]
    if cursor is None:
        page.append({"character_id": f"{prefix}-end", "is_last_id": False})
    else:
        page.append({"character_id": cursor, "is_last_id": True})
    return page


class TestExtractNextCursor:
    def test_flagged_record(self):
        page = [
            {"character_id": "a", "is_last_id": False},
            {"character_id": "b", "is_last_id": True},
        ]
        assert extract_next_cursor(page) == "b"

    def test_no_flag(self):
        assert extract_next_cursor([{"character_id": "a"}]) is None

    def test_flag_must_be_true(self):
        page = [{"character_id": "a", "is_last_id": "true"}, {"character_id": "b", "is_last_id": 1}]
        assert extract_next_cursor(page) is None

    def test_first_flagged_record_wins(self):
        page = [
            {"character_id": "a", "is_last_id": True},
            {"character_id": "b", "is_last_id": True},
        ]
        assert extract_next_cursor(page) == "a"

    def test_empty_page(self):
        assert extract_next_cursor([]) is None


class TestIsShortPage:
    def test_short(self):
        assert is_short_page([{}] * 10) is True

    def test_full(self):
        assert is_short_page([{}] * PAGE_SIZE) is False


@pytest.mark.asyncio
class TestCollect:
    async def test_walks_pages_with_cursor(self, make_api):
        api = make_api(pages=[
            full_page("p1-", "cur1"),
            full_page("p2-", "cur2"),
            [{"character_id": "last", "is_last_id": True}],
        ])

        records = await ConversationCollector(api, delay=0).collect()

        assert api.calls_for("page") == [None, "cur1", "cur2"]
        assert len(records) == 2 * PAGE_SIZE + 1
        assert records[-1]["character_id"] == "last"

    async def test_empty_first_page(self, make_api):
        api = make_api(pages=[[]])

        records = await ConversationCollector(api, delay=0).collect()

        assert records == []
        assert api.calls_for("page") == [None]

    async def test_empty_page_stops(self, make_api):
        api = make_api(pages=[full_page("p1-", "cur1"), []])

        records = await ConversationCollector(api, delay=0).collect()

        assert len(records) == PAGE_SIZE
        assert api.calls_for("page") == [None, "cur1"]

    async def test_short_page_stops_even_with_terminal_marker(self, make_api):
        page = [{"character_id": f"c{i}", "is_last_id": False} for i in range(9)]
        page.append({"character_id": "c9", "is_last_id": True})
        api = make_api(pages=[page, full_page("never-", "x")])

        records = await ConversationCollector(api, delay=0).collect()

        assert len(records) == 10
        assert api.calls_for("page") == [None]

    async def test_full_page_without_terminal_marker_stops(self, make_api):
        api = make_api(pages=[full_page("p1-", None), full_page("never-", "x")])

        records = await ConversationCollector(api, delay=0).collect()

        assert len(records) == PAGE_SIZE
        assert api.calls_for("page") == [None]

    async def test_delay_only_between_pages(self, make_api):
        api = make_api(pages=[
            full_page("p1-", "cur1"),
            full_page("p2-", "cur2"),
            [{"character_id": "last"}],
        ])

        with patch("charsync.collector.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await ConversationCollector(api, delay=0.2).collect()

        assert sleep.await_count == 2
        sleep.assert_awaited_with(0.2)

    async def test_single_page_has_no_delay(self, make_api):
        api = make_api(pages=[[{"character_id": "a"}]])

        with patch("charsync.collector.asyncio.sleep", new_callable=AsyncMock) as sleep:
            await ConversationCollector(api, delay=0.2).collect()

        sleep.assert_not_awaited()

    async def test_fetch_error_propagates(self):
        fetcher = AsyncMock()
        fetcher.fetch_conversation_page.side_effect = ApiError("HTTP 503 for /conversations")

        with pytest.raises(ApiError):
            await ConversationCollector(fetcher, delay=0).collect()
