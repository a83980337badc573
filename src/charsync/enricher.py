"""Per-character fetches: conversation summaries and the detail record."""

import asyncio
import logging
from typing import Any

from .api import ApiClient
from .models import Character, CharacterRef, Conversation

logger = logging.getLogger(__name__)


def tags_from_details(details: dict[str, Any]) -> list[str]:
    """Extract tags from a character detail record, defaulting to empty.

    Anything other than a list is ignored with a warning.
    """
    tags = details.get("tags")
    if tags is None:
        return []
    if not isinstance(tags, list):
        logger.warning("Ignoring tags of type %s, expected a list", type(tags).__name__)
        return []
    return list(tags)


class CharacterEnricher:
    """Fetches everything known about one character.

    Each successful call is followed by the pacing delay so that a
    sequence of calls stays under the upstream rate limit.
    """

    def __init__(self, client: ApiClient, delay: float = 0.2) -> None:
        self._client = client
        self._delay = delay

    async def _pause(self) -> None:
        await asyncio.sleep(self._delay)

    async def fetch_conversations(self, character_id: Any) -> list[Conversation]:
        raw = await self._client.fetch_character_conversations(character_id)
        await self._pause()
        return [Conversation.from_api(item) for item in raw]

    async def fetch_details(self, character_id: Any) -> dict[str, Any]:
        details = await self._client.fetch_character(character_id)
        await self._pause()
        return details

    async def crawl_character(self, ref: CharacterRef) -> Character:
        """Fully crawl a character: conversations first, then details."""
        conversations = await self.fetch_conversations(ref.character_id)
        details = await self.fetch_details(ref.character_id)
        return Character.from_ref(
            ref,
            tags=tags_from_details(details),
            conversations=conversations,
        )
