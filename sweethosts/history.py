"""Append-only log of hosts documents installed on the system.

Every successful system apply appends two entries: the content that was
replaced, then the content that replaced it. The log is therefore the
sequence of states the system hosts file has passed through.

No retention limit is applied here; ``history_limit`` in the preferences
is left to the frontends.
"""

from __future__ import annotations

import logging
from pathlib import Path

from sweethosts.profiles.schema import HistoryEntry, validate_items
from sweethosts.profiles.trash import now_ms
from sweethosts.storage import JsonDocument, data_dir_lock

logger = logging.getLogger(__name__)

HISTORY_FILENAME = "history.json"


def next_entry_id(entries: list[HistoryEntry], timestamp_ms: int) -> str:
    """Return a timestamp-derived id greater than every existing numeric id.

    Two entries appended in the same millisecond get consecutive ids.
    """
    latest = 0
    for entry in entries:
        if entry.id.isdigit():
            latest = max(latest, int(entry.id))
    return str(max(timestamp_ms, latest + 1))


class HistoryLog:
    """Hosts history stored in history.json."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir
        self.document = JsonDocument(data_dir / HISTORY_FILENAME)

    def list(self) -> list[HistoryEntry]:
        """Return all readable entries in chronological order."""
        return validate_items(HistoryEntry, self.document.read(), HISTORY_FILENAME)[0]

    def _save(self, entries: list[HistoryEntry]) -> bool:
        # entries that do not validate stay in the log untouched
        _, unreadable = validate_items(
            HistoryEntry, self.document.read(), HISTORY_FILENAME
        )
        return self.document.write([*(e.model_dump() for e in entries), *unreadable])

    def get(self, entry_id: str) -> HistoryEntry | None:
        for entry in self.list():
            if entry.id == entry_id:
                return entry
        return None

    def append(self, content: str) -> HistoryEntry | None:
        """Append a document to the log.

        Args:
            content: Full hosts document.

        Returns:
            The new entry, or None if the log could not be written.
        """
        with data_dir_lock(self.data_dir):
            entries = self.list()
            timestamp = now_ms()
            entry = HistoryEntry(
                id=next_entry_id(entries, timestamp),
                content=content,
                add_time_ms=timestamp,
            )
            entries.append(entry)
            if not self._save(entries):
                logger.error("Failed to append hosts history entry")
                return None
        return entry

    def delete(self, entry_id: str) -> bool:
        """Delete an entry.

        Returns:
            True if an entry was removed.
        """
        with data_dir_lock(self.data_dir):
            entries = self.list()
            kept = [e for e in entries if e.id != entry_id]
            if len(kept) == len(entries):
                return False
            return self._save(kept)

    def clear(self) -> bool:
        with data_dir_lock(self.data_dir):
            return self.document.write([])


__all__ = ["HISTORY_FILENAME", "HistoryLog", "next_entry_id"]
