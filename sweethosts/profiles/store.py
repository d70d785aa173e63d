"""Profile tree and content stores.

The tree (list.json) and the per-profile content blobs
(hosts_content_<id>.txt) are stored independently, so tree edits never
touch content and content edits never touch the tree.
"""

import logging
from pathlib import Path

from sweethosts.profiles.schema import ProfileNode, find_by_id, validate_items
from sweethosts.storage import JsonDocument

logger = logging.getLogger(__name__)

LIST_FILENAME = "list.json"
CONTENT_FILENAME_TEMPLATE = "hosts_content_{id}.txt"


class ContentIdError(ValueError):
    """A profile id cannot be used to name a content file."""

    def __init__(self, node_id: str) -> None:
        super().__init__(f"Invalid profile id for content storage: {node_id!r}")
        self.node_id = node_id
        self.code = "INVALID_CONTENT_ID"


def parse_tree(data: list[object]) -> list[ProfileNode]:
    """Validate a raw list document into profile nodes.

    Args:
        data: Parsed list.json value.

    Returns:
        The top-level nodes that validate; the others are skipped.
    """
    return validate_items(ProfileNode, data, LIST_FILENAME)[0]


def dump_tree(tree: list[ProfileNode]) -> list[dict[str, object]]:
    """Serialize profile nodes to the stored JSON shape."""
    return [node.to_document() for node in tree]


class ProfileTreeStore:
    """Ordered, nested collection of profile nodes stored in list.json."""

    def __init__(self, data_dir: Path) -> None:
        self.document = JsonDocument(data_dir / LIST_FILENAME)

    def load(self) -> list[ProfileNode]:
        """Load the profile tree.

        Returns:
            The stored tree; empty if missing or corrupt.
        """
        return parse_tree(self.document.read())

    def unreadable(self) -> list[object]:
        """Return the stored items that do not validate as profile nodes."""
        return validate_items(ProfileNode, self.document.read(), LIST_FILENAME)[1]

    def dump(self, tree: list[ProfileNode]) -> list[object]:
        """Serialize a tree for writing, keeping the unreadable stored items.

        Items that failed validation on load are written back unchanged
        after the tree so a load/save cycle never loses them.
        """
        return [*dump_tree(tree), *self.unreadable()]

    def save(self, tree: list[ProfileNode], keep_unreadable: bool = True) -> bool:
        """Persist the whole profile tree.

        Args:
            tree: Profile nodes to store.
            keep_unreadable: Write back stored items that do not validate.

        Returns:
            True if written.
        """
        data = self.dump(tree) if keep_unreadable else dump_tree(tree)
        return self.document.write(data)

    def get_item(self, node_id: str) -> ProfileNode | None:
        """Look up a top-level node of the stored tree by id."""
        return find_by_id(self.load(), node_id)


class ContentStore:
    """Raw hosts text per profile id."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir

    def path_for(self, node_id: str) -> Path:
        """Return the content file path for an id.

        Raises:
            ContentIdError: If the id would escape the data directory.
        """
        if (
            not node_id
            or "/" in node_id
            or "\\" in node_id
            or node_id in (".", "..")
            or "\x00" in node_id
        ):
            raise ContentIdError(node_id)
        return self.data_dir / CONTENT_FILENAME_TEMPLATE.format(id=node_id)

    def get(self, node_id: str) -> str | None:
        """Read the content blob for an id.

        Returns:
            The content, or None if there is no readable blob.
        """
        try:
            path = self.path_for(node_id)
        except ContentIdError as e:
            logger.warning("%s", e)
            return None
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return f.read()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read content for %s: %s", node_id, e)
            return None

    def set(self, node_id: str, content: str) -> bool:
        """Create or overwrite the content blob for an id.

        Returns:
            True if written.
        """
        try:
            path = self.path_for(node_id)
        except ContentIdError as e:
            logger.warning("%s", e)
            return False
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            logger.error("Failed to write content for %s: %s", node_id, e)
            return False
        return True


__all__ = [
    "CONTENT_FILENAME_TEMPLATE",
    "LIST_FILENAME",
    "ContentIdError",
    "ContentStore",
    "ProfileTreeStore",
    "dump_tree",
    "parse_tree",
]
