"""Incremental snapshot sync for character conversation metadata."""

from .api import ApiClient, PageFetcher
from .collector import ConversationCollector, extract_next_cursor, is_short_page
from .config import SyncConfig, config_from_env
from .enricher import CharacterEnricher
from .errors import ApiError, CharsyncError
from .models import Character, CharacterRef, Conversation
from .orchestrator import Orchestrator, RunSummary, unique_characters
from .store import SnapshotStore

__all__ = [
    "ApiClient",
    "ApiError",
    "Character",
    "CharacterEnricher",
    "CharacterRef",
    "CharsyncError",
    "Conversation",
    "ConversationCollector",
    "Orchestrator",
    "PageFetcher",
    "RunSummary",
    "SnapshotStore",
    "SyncConfig",
    "config_from_env",
    "extract_next_cursor",
    "is_short_page",
    "unique_characters",
]
