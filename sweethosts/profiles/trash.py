"""Trash bin for removed profiles.

Removed nodes are kept in trashcan.json with their removal time so they
can be restored or deleted permanently. Moving to and restoring from the
trash rewrites list.json and trashcan.json together through
``write_documents``.

Only top-level nodes of the tree are moved to the trash; a node nested
inside a folder is not found. Restore always appends to the tree root,
the stored ``parent_id`` is not used to re-nest the node.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from sweethosts.profiles.schema import ProfileNode, TrashEntry, validate_items
from sweethosts.profiles.store import ProfileTreeStore
from sweethosts.storage import JsonDocument, data_dir_lock, write_documents

logger = logging.getLogger(__name__)

TRASH_FILENAME = "trashcan.json"


def now_ms() -> int:
    """Return the current epoch time in milliseconds."""
    return time.time_ns() // 1_000_000


def parse_trash(data: list[object]) -> list[TrashEntry]:
    """Validate a raw trashcan document; entries that fail are skipped."""
    return validate_items(TrashEntry, data, TRASH_FILENAME)[0]


def dump_trash(entries: list[TrashEntry]) -> list[dict[str, object]]:
    return [entry.to_document() for entry in entries]


class TrashStore:
    """Removed-profile snapshots stored in trashcan.json."""

    def __init__(self, data_dir: Path, tree_store: ProfileTreeStore) -> None:
        self.data_dir = data_dir
        self.document = JsonDocument(data_dir / TRASH_FILENAME)
        self.tree_store = tree_store

    def list(self) -> list[TrashEntry]:
        return parse_trash(self.document.read())

    def dump(self, entries: list[TrashEntry]) -> list[object]:
        """Serialize entries for writing, keeping the unreadable stored ones."""
        _, unreadable = validate_items(
            TrashEntry, self.document.read(), TRASH_FILENAME
        )
        return [*dump_trash(entries), *unreadable]

    def save(self, entries: list[TrashEntry]) -> bool:
        return self.document.write(self.dump(entries))

    def append(self, entry: TrashEntry) -> bool:
        with data_dir_lock(self.data_dir):
            entries = self.list()
            entries.append(entry)
            return self.save(entries)

    def remove_where(
        self, predicate: Callable[[TrashEntry], bool]
    ) -> list[TrashEntry]:
        """Remove every entry matching predicate.

        Returns:
            The removed entries (empty if nothing matched or the write failed).
        """
        with data_dir_lock(self.data_dir):
            entries = self.list()
            removed = [e for e in entries if predicate(e)]
            if not removed:
                return []
            kept = [e for e in entries if not predicate(e)]
            if not self.save(kept):
                return []
            return removed

    def clear(self) -> bool:
        with data_dir_lock(self.data_dir):
            return self.document.write([])

    def move_to_trash(self, node_id: str) -> bool:
        """Move a top-level node from the tree into the trash.

        The trashed copy has ``on`` set to false and ``parent_id`` null.
        Nodes nested inside folders are not searched.

        Args:
            node_id: Id of the node to remove.

        Returns:
            True unless persisting the change failed; an id that matches
            nothing is a successful no-op.
        """
        with data_dir_lock(self.data_dir):
            tree = self.tree_store.load()
            index = next(
                (i for i, node in enumerate(tree) if node.id == node_id), None
            )
            if index is None:
                logger.debug("Nothing to trash for id %s", node_id)
                return True

            removed = tree.pop(index)
            snapshot = removed.model_copy(deep=True, update={"on": False})
            entries = self.list()
            entries.append(
                TrashEntry(data=snapshot, add_time_ms=now_ms(), parent_id=None)
            )
            ok = write_documents(
                [
                    (self.tree_store.document, self.tree_store.dump(tree)),
                    (self.document, self.dump(entries)),
                ]
            )
        if ok:
            logger.info("Moved profile %s to trash", node_id)
        return ok

    def move_many_to_trash(self, node_ids: list[str]) -> bool:
        """Move several top-level nodes to the trash, one at a time."""
        for node_id in node_ids:
            if not self.move_to_trash(node_id):
                logger.error("Failed to move profile %s to trash", node_id)
        return True

    def restore_from_trash(self, node_id: str) -> bool:
        """Restore a trashed node by appending it to the tree root.

        Args:
            node_id: Id of the trashed node.

        Returns:
            True if an entry was found and both stores were written.
        """
        with data_dir_lock(self.data_dir):
            entries = self.list()
            index = next(
                (i for i, e in enumerate(entries) if e.data.id == node_id), None
            )
            if index is None:
                return False

            restored: ProfileNode = entries.pop(index).data
            tree = self.tree_store.load()
            tree.append(restored)
            ok = write_documents(
                [
                    (self.tree_store.document, self.tree_store.dump(tree)),
                    (self.document, self.dump(entries)),
                ]
            )
        if ok:
            logger.info("Restored profile %s from trash", node_id)
        return ok

    def delete_from_trash(self, node_id: str) -> bool:
        """Permanently delete trashed entries for an id.

        Returns:
            True if anything was removed.
        """
        removed = self.remove_where(lambda e: e.data.id == node_id)
        return bool(removed)


__all__ = [
    "TRASH_FILENAME",
    "TrashStore",
    "dump_trash",
    "now_ms",
    "parse_trash",
]
