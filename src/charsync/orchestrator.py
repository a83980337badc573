"""Top-level sync run: collect, reconcile, persist, report."""

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .api import ApiClient
from .collector import ConversationCollector
from .config import SyncConfig
from .enricher import CharacterEnricher
from .logging import JSONLLogger
from .models import CharacterRef
from .store import SnapshotStore
from .sync import ReconciliationEngine, SyncResult, SyncStats

logger = logging.getLogger(__name__)


def unique_characters(conversations: list[dict[str, Any]]) -> list[CharacterRef]:
    """Deduplicate characters by id, keeping first-seen order."""
    characters: dict[Any, CharacterRef] = {}
    for conversation in conversations:
        character_id = conversation.get("character_id")
        if character_id not in characters:
            characters[character_id] = CharacterRef.from_conversation(conversation)
    return list(characters.values())


@dataclass
class RunSummary:
    """Totals reported at the end of a run."""

    total_characters: int
    total_conversations: int
    total_messages: int
    incremental: bool
    output_path: Path
    stats: SyncStats = field(default_factory=SyncStats)

    @classmethod
    def from_result(cls, result: SyncResult, output_path: Path) -> "RunSummary":
        return cls(
            total_characters=len(result.characters),
            total_conversations=sum(c.total_conversations for c in result.characters),
            total_messages=sum(c.total_messages for c in result.characters),
            incremental=result.incremental,
            output_path=output_path,
            stats=result.stats,
        )

    def lines(self) -> list[str]:
        """Human-readable summary.

        The breakdown only appears on incremental runs. New characters whose
        crawl failed are reported under Failed rather than New.
        """
        lines = [
            f"=== Done! Data saved to {self.output_path} ===",
            f"Total unique characters: {self.total_characters}",
            f"Total conversations: {self.total_conversations}",
            f"Total messages: {self.total_messages}",
        ]
        if self.incremental:
            lines += [
                "",
                "── Incremental summary ──",
                f"  ✨ New:       {self.stats.added}",
                f"  🔄 Updated:   {self.stats.updated}",
                f"  ⏭  Skipped:   {self.stats.skipped}",
            ]
            if self.stats.failed:
                lines.append(f"  ❌ Failed:    {self.stats.failed}")
            if self.stats.retained:
                lines.append(f"  📦 Retained:  {self.stats.retained}")
        return lines


class Orchestrator:
    """Runs one complete synchronization.

    Everything happens sequentially on a single task. The API client is
    created from the config unless one is injected.
    """

    def __init__(
        self,
        config: SyncConfig,
        client: ApiClient | None = None,
        event_log: JSONLLogger | None = None,
    ) -> None:
        self.config = config
        self.store = SnapshotStore(config.output_path)
        self._client = client
        if event_log is None and config.log_dir is not None:
            event_log = JSONLLogger(config.log_dir)
        self.event_log = event_log

    async def run(self) -> RunSummary:
        if self._client is not None:
            return await self._run(self._client)

        async with ApiClient(self.config) as client:
            return await self._run(client)

    async def _run(self, client: ApiClient) -> RunSummary:
        if self.event_log:
            self.event_log.set_run_id(f"run-{uuid.uuid4().hex[:8]}")

        print("=== Character Conversation Sync ===\n")

        print("[Step 1] Fetching all conversations...")
        collector = ConversationCollector(client, delay=self.config.delay)
        conversations = await collector.collect()

        characters = unique_characters(conversations)
        print(f"\n[Info] Found {len(characters)} unique characters from the API.\n")

        if self.config.full_refresh:
            logger.info("Full refresh requested, ignoring %s", self.store.path)
            stored = {}
        else:
            stored = self.store.load()

        engine = ReconciliationEngine(
            CharacterEnricher(client, delay=self.config.delay),
            stored,
        )
        if self.event_log:
            self.event_log.log_run_start(
                incremental=engine.incremental,
                stored=len(stored),
                discovered=len(characters),
            )

        print("[Step 2] Syncing characters...")
        result = await engine.run(characters)

        if self.event_log:
            for outcome in result.outcomes:
                self.event_log.log_character(
                    outcome.character.character_id,
                    outcome.action.value if outcome.action else None,
                    duration_ms=outcome.duration_ms,
                    error=outcome.error,
                    conversations=outcome.character.total_conversations,
                )

        self.store.save(result.characters)

        summary = RunSummary.from_result(result, self.store.path)
        print()
        for line in summary.lines():
            print(line)

        if self.event_log:
            self.event_log.log_run_end(
                total_characters=summary.total_characters,
                total_conversations=summary.total_conversations,
                total_messages=summary.total_messages,
                incremental=summary.incremental,
                added=summary.stats.added,
                updated=summary.stats.updated,
                skipped=summary.stats.skipped,
                failed=summary.stats.failed,
                retained=summary.stats.retained,
            )

        return summary
