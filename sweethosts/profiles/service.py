"""Profile service for tree edits used by the frontends.

Adds, toggles and renames profile nodes. Lookups here walk the whole
tree, unlike the trash operations which only see top-level nodes.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Any

from sweethosts import __version__
from sweethosts.profiles.schema import ProfileNode, find_in_tree
from sweethosts.profiles.store import dump_tree
from sweethosts.profiles.trash import dump_trash
from sweethosts.storage import data_dir_lock
from sweethosts.types import NodeKind

if TYPE_CHECKING:
    from sweethosts.workspace import Workspace

logger = logging.getLogger(__name__)


class ProfileExistsError(Exception):
    """Raised when adding a profile whose id is already in the tree."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(f"Profile already exists: {node_id}")


def new_profile_id() -> str:
    return uuid.uuid4().hex


def create_profile(
    workspace: Workspace,
    title: str,
    *,
    node_id: str | None = None,
    folder: bool = False,
    on: bool = False,
    content: str | None = None,
) -> ProfileNode:
    """Append a new profile or folder to the tree root.

    Args:
        workspace: Data directory workspace.
        title: Display name.
        node_id: Id to use; a random one is generated if omitted.
        folder: Create a folder instead of a leaf profile.
        on: Initial activation flag.
        content: Initial hosts content (leaf profiles only).

    Returns:
        The created node.

    Raises:
        ProfileExistsError: If the id is already used anywhere in the tree.
    """
    node_id = node_id or new_profile_id()
    node = ProfileNode(
        id=node_id,
        title=title,
        on=on,
        kind=NodeKind.FOLDER.value if folder else NodeKind.LOCAL.value,
        children=[] if folder else None,
    )
    with data_dir_lock(workspace.data_dir):
        tree = workspace.tree_store.load()
        if find_in_tree(tree, node_id) is not None:
            raise ProfileExistsError(node_id)
        tree.append(node)
        if not workspace.tree_store.save(tree):
            logger.error("Failed to save profile list after adding %s", node_id)
    if content is not None and not folder:
        workspace.content_store.set(node_id, content)
    logger.info("Created %s %s", "folder" if folder else "profile", node_id)
    return node


def update_profile(
    workspace: Workspace, node_id: str, **changes: Any
) -> ProfileNode | None:
    """Apply field changes to a node anywhere in the tree.

    Returns:
        The updated node, or None if the id was not found or saving failed.
    """
    with data_dir_lock(workspace.data_dir):
        tree = workspace.tree_store.load()
        node = find_in_tree(tree, node_id)
        if node is None:
            return None
        for key, value in changes.items():
            setattr(node, key, value)
        if not workspace.tree_store.save(tree):
            return None
    return node


def set_profile_on(workspace: Workspace, node_id: str, on: bool) -> bool:
    return update_profile(workspace, node_id, on=on) is not None


def toggle_profile(workspace: Workspace, node_id: str) -> ProfileNode | None:
    """Flip the activation flag of a node.

    Returns:
        The updated node, or None if not found.
    """
    with data_dir_lock(workspace.data_dir):
        tree = workspace.tree_store.load()
        node = find_in_tree(tree, node_id)
        if node is None:
            return None
        node.on = not node.on
        if not workspace.tree_store.save(tree):
            return None
    return node


def rename_profile(workspace: Workspace, node_id: str, title: str) -> bool:
    return update_profile(workspace, node_id, title=title) is not None


def basic_data(workspace: Workspace) -> dict[str, Any]:
    """Return the profile list, trash and version in one document."""
    return {
        "list": dump_tree(workspace.tree_store.load()),
        "trashcan": dump_trash(workspace.trash_store.list()),
        "version": __version__,
    }


__all__ = [
    "ProfileExistsError",
    "basic_data",
    "create_profile",
    "new_profile_id",
    "rename_profile",
    "set_profile_on",
    "toggle_profile",
    "update_profile",
]
