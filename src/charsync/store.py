"""JSON persistence for the aggregated snapshot."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from .models import Character

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Loads and saves the snapshot file.

    The file is a single JSON array of character records. It is read once
    at the start of a run and fully replaced at the end.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def load(self) -> dict[Any, Character]:
        """Load stored characters keyed by character_id.

        Returns an empty mapping when the file is missing. An unreadable
        or malformed file is logged and also treated as empty, since it is
        about to be overwritten by this run.
        """
        if not self.path.exists():
            logger.debug("No snapshot at %s, starting a full run", self.path)
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            logger.warning("Invalid JSON in %s: %s. Ignoring stored data.", self.path, e)
            return {}
        except OSError as e:
            logger.warning("Cannot read %s: %s. Ignoring stored data.", self.path, e)
            return {}

        if not isinstance(data, list):
            logger.warning(
                "Expected a list in %s, got %s. Ignoring stored data.",
                self.path,
                type(data).__name__,
            )
            return {}

        try:
            characters = [Character.from_dict(entry) for entry in data]
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning("Malformed record in %s: %s. Ignoring stored data.", self.path, e)
            return {}

        stored = {c.character_id: c for c in characters}
        print(f"  Loaded {len(stored)} existing characters from {self.path}")
        return stored

    def save(self, snapshot: list[Character]) -> None:
        """Write the full snapshot, atomically replacing the previous file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = [c.to_dict() for c in snapshot]

        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        replaced = False
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, self.path)
            replaced = True
        except OSError as e:
            logger.error("Failed to save snapshot to %s: %s", self.path, e)
            raise
        finally:
            if not replaced and os.path.exists(tmp_name):
                os.unlink(tmp_name)
