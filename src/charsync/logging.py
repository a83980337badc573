"""JSONL run log for inspecting what a sync did."""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: str
    event: str
    run_id: str | None = None
    character_id: Any = None
    action: str | None = None
    duration_ms: float | None = None
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {k: v for k, v in data.items() if v is not None and v != {} and v != []}


class JSONLLogger:
    """Writes structured run events in JSONL format."""

    def __init__(
        self,
        log_dir: str | Path,
        filename: str = "sync.jsonl",
        max_size_mb: float = 10.0,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)
        self._run_id: str | None = None

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def set_run_id(self, run_id: str | None) -> None:
        """Set the run id attached to all subsequent entries."""
        self._run_id = run_id

    def _rotate_if_needed(self) -> None:
        """Rotate log file if it exceeds max size."""
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def _write(self, entry: LogEntry) -> None:
        self._rotate_if_needed()

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")

    def log(
        self,
        event: str,
        *,
        character_id: Any = None,
        action: str | None = None,
        duration_ms: float | None = None,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Log an event."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            run_id=self._run_id,
            character_id=character_id,
            action=action,
            duration_ms=duration_ms,
            error=error,
            extra=extra if extra else {},
        )
        self._write(entry)

    def log_run_start(self, *, incremental: bool, stored: int, discovered: int) -> None:
        self.log(
            "run_start",
            incremental=incremental,
            stored=stored,
            discovered=discovered,
        )

    def log_character(
        self,
        character_id: Any,
        action: str | None,
        *,
        duration_ms: float | None = None,
        error: str | None = None,
        conversations: int | None = None,
    ) -> None:
        """Log the outcome for one character."""
        self.log(
            "character",
            character_id=character_id,
            action=action,
            duration_ms=duration_ms,
            error=error,
            conversations=conversations,
        )

    def log_run_end(self, **counters: Any) -> None:
        self.log("run_end", **counters)
