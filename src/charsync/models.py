"""Data models for conversations and characters."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Conversation:
    """A single conversation summary belonging to one character.

    Attributes:
        id: Upstream conversation id.
        created_at: Creation timestamp as returned by the API (persisted as createdAt).
        message_count: Number of messages in the conversation.
    """

    id: Any
    created_at: str | None = None
    message_count: int = 0

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> "Conversation":
        """Map a raw API record, falling back to num_messages then 0."""
        return cls(
            id=raw.get("id"),
            created_at=raw.get("createdAt"),
            message_count=raw.get("message_count") or raw.get("num_messages") or 0,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "createdAt": self.created_at,
            "message_count": self.message_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Conversation":
        return cls(
            id=data["id"],
            created_at=data.get("createdAt"),
            message_count=data.get("message_count") or 0,
        )


@dataclass(frozen=True)
class CharacterRef:
    """A character as discovered from the global conversation list."""

    character_id: Any
    name: str = "Unknown"
    title: str = ""
    avatar_url: str = ""

    @classmethod
    def from_conversation(cls, raw: dict[str, Any]) -> "CharacterRef":
        """Build from a raw conversation record and its embedded character object."""
        character = raw.get("character") or {}
        return cls(
            character_id=raw.get("character_id"),
            name=character.get("name") or "Unknown",
            title=character.get("title") or "",
            avatar_url=character.get("avatar_url") or "",
        )


@dataclass
class Character:
    """An aggregated character record as stored in the snapshot.

    message_counts and total_conversations are derived from conversations,
    so they can never disagree with it.
    """

    character_id: Any
    name: str = "Unknown"
    title: str = ""
    avatar_url: str = ""
    tags: list[str] = field(default_factory=list)
    conversations: list[Conversation] = field(default_factory=list)
    error: str | None = None

    @property
    def message_counts(self) -> list[int]:
        return [c.message_count for c in self.conversations]

    @property
    def total_conversations(self) -> int:
        return len(self.conversations)

    @property
    def total_messages(self) -> int:
        return sum(self.message_counts)

    def conversation_ids(self) -> set[Any]:
        """Set of conversation ids, used for change detection."""
        return {c.id for c in self.conversations}

    @classmethod
    def from_ref(
        cls,
        ref: CharacterRef,
        *,
        tags: list[str] | None = None,
        conversations: list[Conversation] | None = None,
        error: str | None = None,
    ) -> "Character":
        return cls(
            character_id=ref.character_id,
            name=ref.name,
            title=ref.title,
            avatar_url=ref.avatar_url,
            tags=list(tags or []),
            conversations=list(conversations or []),
            error=error,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to the persisted JSON shape."""
        data: dict[str, Any] = {
            "character_id": self.character_id,
            "name": self.name,
            "title": self.title,
            "avatar_url": self.avatar_url,
            "tags": list(self.tags),
            "conversations": [c.to_dict() for c in self.conversations],
            "message_counts": self.message_counts,
            "total_conversations": self.total_conversations,
        }
        if self.error is not None:
            data["error"] = self.error
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Character":
        """Create from a persisted record. Derived fields are recomputed."""
        return cls(
            character_id=data["character_id"],
            name=data.get("name") or "Unknown",
            title=data.get("title") or "",
            avatar_url=data.get("avatar_url") or "",
            tags=list(data.get("tags") or []),
            conversations=[
                Conversation.from_dict(c) for c in data.get("conversations") or []
            ],
            error=data.get("error"),
        )
