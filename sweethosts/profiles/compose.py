"""Compose active profiles into one hosts document.

The tree is walked depth-first. Every node whose own ``on`` flag is set
contributes its content, whatever the state of its parent folders: a
folder being off does not hide its children. Each blob is preceded by a
``# file: <id>`` marker line and blobs are separated by a blank line.
"""

import logging

from sweethosts.profiles.schema import ProfileNode, iter_nodes
from sweethosts.profiles.store import ContentStore

logger = logging.getLogger(__name__)

SOURCE_MARKER_TEMPLATE = "# file: {id}"
BLOB_SEPARATOR = "\n\n"


def collect_active_ids(tree: list[ProfileNode]) -> list[str]:
    """Return ids of all active nodes, in traversal order.

    Args:
        tree: Profile tree.

    Returns:
        Ids of nodes (leaves and folders) with ``on`` set.
    """
    return [node.id for node in iter_nodes(tree) if node.on and node.id]


def compose(tree: list[ProfileNode], content_store: ContentStore) -> str:
    """Concatenate the content of every active profile.

    Ids without a stored content blob are skipped.

    Args:
        tree: Profile tree.
        content_store: Source of per-profile content.

    Returns:
        The composed document, or an empty string if nothing is active.
    """
    parts: list[str] = []
    for node_id in collect_active_ids(tree):
        content = content_store.get(node_id)
        if content is None:
            logger.debug("No content for active profile %s, skipping", node_id)
            continue
        parts.append(f"{SOURCE_MARKER_TEMPLATE.format(id=node_id)}\n{content}")
    return BLOB_SEPARATOR.join(parts)


__all__ = [
    "BLOB_SEPARATOR",
    "SOURCE_MARKER_TEMPLATE",
    "collect_active_ids",
    "compose",
]
