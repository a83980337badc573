"""Reconcile stored characters against freshly fetched data."""

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..enricher import CharacterEnricher, tags_from_details
from ..errors import ApiError
from ..models import Character, CharacterRef, Conversation

logger = logging.getLogger(__name__)


class SyncAction(Enum):
    """What the engine decided to do with one character."""

    FULL_CRAWL = "full_crawl"
    SKIP = "skip"
    UPDATE = "update"


@dataclass
class SyncStats:
    """Running counters for a reconciliation pass.

    A new character whose crawl fails is counted in failed, not added.
    added only counts on incremental runs.
    """

    added: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    retained: int = 0


@dataclass
class SyncOutcome:
    """Result of reconciling a single character.

    action is None when the character failed before it could be classified.
    """

    character: Character
    action: SyncAction | None
    error: str | None = None
    duration_ms: float = 0.0

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class SyncResult:
    """The next snapshot plus everything that happened while building it."""

    characters: list[Character]
    stats: SyncStats
    incremental: bool
    outcomes: list[SyncOutcome] = field(default_factory=list)


def ids_match(stored_ids: Iterable[Any], fresh_ids: Iterable[Any]) -> bool:
    """True if both id collections hold the same set of ids, in any order."""
    stored = set(stored_ids)
    fresh = set(fresh_ids)
    return len(fresh) == len(stored) and all(i in stored for i in fresh)


def classify(
    stored: Character | None,
    fresh_conversations: list[Conversation] | None = None,
) -> SyncAction:
    """Decide the action for one character.

    A character with no stored record is always fully crawled. Otherwise it
    is skipped when its conversation id set is unchanged and updated when not.
    """
    if stored is None:
        return SyncAction.FULL_CRAWL

    fresh_ids = [c.id for c in fresh_conversations or []]
    if ids_match(stored.conversation_ids(), fresh_ids):
        return SyncAction.SKIP
    return SyncAction.UPDATE


class ReconciliationEngine:
    """Builds the next snapshot from discovered characters and stored records.

    Characters are processed strictly one after another. A failed fetch
    only affects the character it belongs to: the stored record is kept if
    there is one, otherwise a placeholder carrying the error is emitted.
    """

    def __init__(
        self,
        enricher: CharacterEnricher,
        stored: dict[Any, Character] | None = None,
    ) -> None:
        self._enricher = enricher
        self._stored = dict(stored or {})
        # Fixed before any character is processed.
        self.incremental = bool(self._stored)

    async def reconcile(self, ref: CharacterRef, label: str = "") -> SyncOutcome:
        """Reconcile one discovered character against its stored record."""
        existing = self._stored.get(ref.character_id)
        action: SyncAction | None = None
        start = time.monotonic()

        try:
            if existing is None:
                action = SyncAction.FULL_CRAWL
                if self.incremental:
                    print(f"  {label} ✨ New character \"{ref.name}\" - crawling...")
                else:
                    print(f"  {label} Processing \"{ref.name}\"...")
                character = await self._enricher.crawl_character(ref)
            else:
                fresh = await self._enricher.fetch_conversations(ref.character_id)
                action = classify(existing, fresh)
                stored_count = len(existing.conversation_ids())

                if action is SyncAction.SKIP:
                    print(
                        f"  {label} ⏭  Skipping \"{ref.name}\" "
                        f"({stored_count} convos, unchanged)"
                    )
                    character = existing
                else:
                    fresh_count = len({c.id for c in fresh})
                    print(
                        f"  {label} 🔄 Updating \"{ref.name}\" "
                        f"({stored_count} → {fresh_count} convos)"
                    )
                    details = await self._enricher.fetch_details(ref.character_id)
                    character = Character.from_ref(
                        ref,
                        tags=tags_from_details(details),
                        conversations=fresh,
                    )
        except ApiError as e:
            print(f"  {label} ❌ Error with \"{ref.name}\": {e}")
            logger.warning("Failed to sync character %s: %s", ref.character_id, e)
            fallback = existing or Character.from_ref(ref, error=str(e))
            return SyncOutcome(
                character=fallback,
                action=action,
                error=str(e),
                duration_ms=(time.monotonic() - start) * 1000,
            )

        return SyncOutcome(
            character=character,
            action=action,
            duration_ms=(time.monotonic() - start) * 1000,
        )

    def _count(self, outcome: SyncOutcome, stats: SyncStats) -> None:
        if outcome.failed:
            stats.failed += 1
        elif outcome.action is SyncAction.SKIP:
            stats.skipped += 1
        elif outcome.action is SyncAction.UPDATE:
            stats.updated += 1
        elif outcome.action is SyncAction.FULL_CRAWL and self.incremental:
            stats.added += 1

    async def run(self, refs: list[CharacterRef]) -> SyncResult:
        """Reconcile every character, in order, and assemble the next snapshot.

        Stored characters that were not discovered this run are appended
        unchanged after the discovered ones.
        """
        stats = SyncStats()
        outcomes: list[SyncOutcome] = []
        characters: list[Character] = []
        seen: set[Any] = set()

        for i, ref in enumerate(refs, 1):
            if ref.character_id in seen:
                continue
            seen.add(ref.character_id)

            outcome = await self.reconcile(ref, label=f"({i}/{len(refs)})")
            self._count(outcome, stats)
            outcomes.append(outcome)
            characters.append(outcome.character)

        for character_id, character in self._stored.items():
            if character_id not in seen:
                logger.debug("Retaining unseen character %s", character_id)
                characters.append(character)
                stats.retained += 1

        return SyncResult(
            characters=characters,
            stats=stats,
            incremental=self.incremental,
            outcomes=outcomes,
        )
