"""Incremental synchronization of stored characters."""

from .engine import (
    ReconciliationEngine,
    SyncAction,
    SyncOutcome,
    SyncResult,
    SyncStats,
    classify,
    ids_match,
)

__all__ = [
    "ReconciliationEngine",
    "SyncAction",
    "SyncOutcome",
    "SyncResult",
    "SyncStats",
    "classify",
    "ids_match",
]
