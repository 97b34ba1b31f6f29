# orchestration/history.py
"""History collaborator interface and a process-local implementation."""

from __future__ import annotations

from typing import Protocol

import structlog

from config import settings
from models import HistoryEntry

logger = structlog.get_logger(__name__)


class HistoryRecorder(Protocol):
    def add(self, entry: HistoryEntry) -> None: ...


class InMemoryHistory:
    """Keeps entries for the lifetime of the process, newest first."""

    def __init__(self) -> None:
        self._entries: dict[str, HistoryEntry] = {}

    def add(self, entry: HistoryEntry) -> None:
        # Re-adding an id replaces the old entry.
        self._entries.pop(entry.id, None)
        self._entries[entry.id] = entry
        logger.debug("History entry stored.", entry_id=entry.id)

    def _newest_first(self) -> list[HistoryEntry]:
        return sorted(self._entries.values(), key=lambda e: e.created_at, reverse=True)

    def list(self, limit: int | None = None) -> list[HistoryEntry]:
        if limit is None:
            limit = settings.HISTORY_LIMIT
        return self._newest_first()[:limit]

    def search(self, query: str, limit: int | None = None) -> list[HistoryEntry]:
        """Case-insensitive substring search over input and both rewrites."""
        needle = query.strip().lower()
        if not needle:
            return self.list(limit)
        matches = [
            entry
            for entry in self._newest_first()
            if needle in entry.input.lower()
            or needle in entry.spoken.lower()
            or needle in entry.formal.lower()
        ]
        return matches[: settings.HISTORY_LIMIT if limit is None else limit]

    def delete(self, entry_id: str) -> bool:
        removed = self._entries.pop(entry_id, None) is not None
        if not removed:
            logger.debug("History entry not found for delete.", entry_id=entry_id)
        return removed
