"""Collect the full conversation list by walking the paginated endpoint.

The API has no dedicated "next cursor" field. Instead, one record per page
carries ``is_last_id: true`` and its ``character_id`` is the cursor for
the next request.
"""

import asyncio
import logging
from typing import Any

from .api import PAGE_SIZE, PageFetcher

logger = logging.getLogger(__name__)


def extract_next_cursor(page: list[dict[str, Any]]) -> str | None:
    """Return the cursor embedded in the page's terminal-flagged record, if any."""
    for record in page:
        if record.get("is_last_id") is True:
            return record.get("character_id")
    return None


def is_short_page(page: list[dict[str, Any]]) -> bool:
    """A page smaller than PAGE_SIZE is the last one."""
    return len(page) < PAGE_SIZE


class ConversationCollector:
    """Drives a PageFetcher across every page of the conversation list."""

    def __init__(self, fetcher: PageFetcher, delay: float = 0.2) -> None:
        self._fetcher = fetcher
        self._delay = delay

    async def collect(self) -> list[dict[str, Any]]:
        """Fetch all pages and return the flattened raw records."""
        records: list[dict[str, Any]] = []
        cursor: str | None = None
        page_number = 1

        while True:
            print(f"  Fetching conversations page {page_number}...")
            page = await self._fetcher.fetch_conversation_page(cursor)

            if not page:
                break

            records.extend(page)

            cursor = extract_next_cursor(page)
            if cursor is None:
                logger.debug("Page %d has no terminal record, stopping", page_number)
                break

            if is_short_page(page):
                logger.debug("Page %d is short (%d records), stopping", page_number, len(page))
                break

            page_number += 1
            await asyncio.sleep(self._delay)

        print(f"  Total conversations fetched: {len(records)}")
        return records
