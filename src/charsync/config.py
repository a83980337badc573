"""Run configuration.

A single immutable SyncConfig is built at startup (from the environment,
optionally seeded from a .env file) and passed into the Orchestrator.
"""

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_BASE_URL = "https://prod.nd-api.com/v2"
DEFAULT_DELAY_MS = 200
DEFAULT_OUTPUT_PATH = Path("aggregated.json")
DEFAULT_TIMEOUT = 30.0

BASE_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36",
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "Referer": "https://spicychat.ai/",
    "Origin": "https://spicychat.ai",
}

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class SyncConfig:
    """Configuration for a synchronization run.

    Attributes:
        base_url: Root URL of the upstream API (no trailing slash needed).
        auth_token: Bearer credential sent with every request.
        delay_ms: Pause after every network call, in milliseconds.
        output_path: Where the aggregated snapshot is read from and written to.
        timeout: HTTP timeout in seconds.
        log_dir: Directory for the JSONL run log, or None to disable it.
        full_refresh: Ignore the stored snapshot and crawl every character.
    """

    base_url: str = DEFAULT_BASE_URL
    auth_token: str = ""
    delay_ms: int = DEFAULT_DELAY_MS
    output_path: Path = DEFAULT_OUTPUT_PATH
    timeout: float = DEFAULT_TIMEOUT
    log_dir: Path | None = None
    full_refresh: bool = False

    def __post_init__(self) -> None:
        """Validate config."""
        if not self.base_url:
            raise ValueError("base_url must not be empty")

        if self.delay_ms < 0:
            raise ValueError("delay_ms must be >= 0")

        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    @property
    def delay(self) -> float:
        """Pacing delay in seconds."""
        return self.delay_ms / 1000

    def headers(self) -> dict[str, str]:
        """Fixed header set sent with every request."""
        headers = dict(BASE_HEADERS)
        headers["Authorization"] = f"Bearer {self.auth_token}"
        return headers


def config_from_env() -> SyncConfig:
    """Load configuration from environment variables.

    Unset variables fall back to the SyncConfig defaults.
    """
    log_dir = os.getenv("CHARSYNC_LOG_DIR")

    return SyncConfig(
        base_url=os.getenv("CHARSYNC_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        auth_token=os.getenv("CHARSYNC_TOKEN", ""),
        delay_ms=int(os.getenv("CHARSYNC_DELAY_MS", str(DEFAULT_DELAY_MS))),
        output_path=Path(os.getenv("CHARSYNC_OUTPUT", str(DEFAULT_OUTPUT_PATH))),
        timeout=float(os.getenv("CHARSYNC_TIMEOUT", str(DEFAULT_TIMEOUT))),
        log_dir=Path(log_dir).expanduser() if log_dir else None,
        full_refresh=os.getenv("CHARSYNC_FULL_REFRESH", "").strip().lower() in _TRUTHY,
    )
