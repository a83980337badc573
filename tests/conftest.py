"""Shared fixtures: an in-memory stand-in for the upstream API."""

import tempfile
from pathlib import Path
from typing import Any

import pytest

from charsync.errors import ApiError


def listing(character_id: Any, name: str | None = "Char", is_last: bool = False, **extra: Any) -> dict[str, Any]:
    """A raw record as returned by the global /conversations endpoint."""
    record: dict[str, Any] = {"character_id": character_id, "is_last_id": is_last}
    if name is not None:
        record["character"] = {
            "name": name,
            "title": f"{name} title",
            "avatar_url": f"https://cdn.example.com/{character_id}.png",
        }
    record.update(extra)
    return record


def summary(conversation_id: Any, messages: int = 1) -> dict[str, Any]:
    """A raw record as returned by /characters/{id}/conversations."""
    return {
        "id": conversation_id,
        "createdAt": "2024-01-01T00:00:00Z",
        "message_count": messages,
    }


class FakeApi:
    """Serves canned pages, conversation lists and detail records."""

    def __init__(
        self,
        pages: list[list[dict[str, Any]]] | None = None,
        conversations: dict[Any, list[dict[str, Any]]] | None = None,
        details: dict[Any, dict[str, Any]] | None = None,
        failing: set[Any] | None = None,
        failing_details: set[Any] | None = None,
    ) -> None:
        self.pages = pages or []
        self.conversations = conversations or {}
        self.details = details or {}
        self.failing = failing or set()
        self.failing_details = failing_details or set()
        self.calls: list[tuple[str, Any]] = []

    def calls_for(self, kind: str) -> list[Any]:
        return [arg for name, arg in self.calls if name == kind]

    async def fetch_conversation_page(self, cursor: str | None = None) -> list[dict[str, Any]]:
        index = len(self.calls_for("page"))
        self.calls.append(("page", cursor))
        if index < len(self.pages):
            return self.pages[index]
        return []

    async def fetch_character_conversations(self, character_id: Any) -> list[dict[str, Any]]:
        self.calls.append(("conversations", character_id))
        if character_id in self.failing:
            raise ApiError(
                f"HTTP 500 for /characters/{character_id}/conversations",
                status_code=500,
            )
        return self.conversations.get(character_id, [])

    async def fetch_character(self, character_id: Any) -> dict[str, Any]:
        self.calls.append(("details", character_id))
        if character_id in self.failing or character_id in self.failing_details:
            raise ApiError(f"HTTP 500 for /characters/{character_id}", status_code=500)
        return self.details.get(character_id, {})


@pytest.fixture
def temp_dir():
    """Create a temporary working directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_api():
    """Factory for FakeApi instances."""
    return FakeApi


@pytest.fixture
def listing_record():
    return listing


@pytest.fixture
def summary_record():
    return summary
