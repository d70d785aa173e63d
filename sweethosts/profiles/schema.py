"""Pydantic models for the stored documents.

These models validate list.json, trashcan.json, history.json and
cmd_history.json, and describe the export bundle. Field names follow
the on-disk JSON shape so documents written by earlier releases load
unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from sweethosts.types import NodeKind

logger = logging.getLogger(__name__)

FOLDER_KINDS = frozenset({NodeKind.FOLDER.value, NodeKind.GROUP.value})

ModelT = TypeVar("ModelT", bound=BaseModel)


class ProfileNode(BaseModel):
    """A hosts profile or a folder of profiles.

    Attributes:
        id: Unique stable identifier, assigned by the creator.
        title: Display name.
        on: Activation flag.
        kind: Node kind, stored under the ``type`` key.
        children: Ordered child nodes (folders only).

    Unknown keys are kept so that saving a loaded tree never drops data.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str | None = Field(default=None, description="Unique node identifier")
    title: str | None = Field(default=None, description="Display name")
    on: bool = Field(default=False, description="Whether the node is active")
    kind: str = Field(
        default=NodeKind.LOCAL.value,
        alias="type",
        description="Node kind (local, remote, folder, group)",
    )
    children: list[ProfileNode] | None = Field(
        default=None, description="Child nodes (folders only)"
    )

    @field_validator("on", mode="before")
    @classmethod
    def _only_true_is_on(cls, value: Any) -> bool:
        # null, strings and numbers all read as inactive
        return value is True

    @property
    def is_folder(self) -> bool:
        return self.kind in FOLDER_KINDS

    def to_document(self) -> dict[str, object]:
        """Serialize to the stored JSON shape."""
        return self.model_dump(by_alias=True, exclude_none=True)


class TrashEntry(BaseModel):
    """A profile node removed from the tree.

    Attributes:
        data: Node snapshot at removal, with ``on`` forced to false.
        add_time_ms: Epoch milliseconds of the removal.
        parent_id: Former containing folder, informational only.
    """

    model_config = ConfigDict(extra="allow")

    data: ProfileNode
    add_time_ms: int = 0
    parent_id: str | None = None

    def to_document(self) -> dict[str, object]:
        doc = self.model_dump(by_alias=True, exclude_none=True)
        doc["data"] = self.data.to_document()
        doc["parent_id"] = self.parent_id
        return doc


class HistoryEntry(BaseModel):
    """A hosts document that was installed on the system."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    content: str = ""
    add_time_ms: int = 0


class CommandRecord(BaseModel):
    """One execution of the post-apply command."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(validation_alias=AliasChoices("id", "_id"))
    success: bool = False
    stdout: str = ""
    stderr: str = ""
    add_time_ms: int = 0


class DataBundle(BaseModel):
    """Export/import bundle of a data directory.

    Attributes:
        tree: Profile tree, stored under the ``list`` key.
        trashcan: Trash entries.
        history: Hosts history (export only, ignored on import).
        version: Exporting application version.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    tree: list[ProfileNode] | None = Field(default=None, alias="list")
    trashcan: list[TrashEntry] | None = None
    history: list[HistoryEntry] | None = None
    version: list[int] | None = None


def validate_items(
    model: type[ModelT], items: Iterable[Any], what: str
) -> tuple[list[ModelT], list[Any]]:
    """Validate a stored array one item at a time.

    Args:
        model: Model for each item.
        items: Raw items of the document.
        what: Document name for log messages.

    Returns:
        The valid items as models, and the items that failed validation
        exactly as they were read.
    """
    valid: list[ModelT] = []
    unreadable: list[Any] = []
    for item in items:
        try:
            valid.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning("Keeping unreadable %s entry as-is: %s", what, e)
            unreadable.append(item)
    return valid, unreadable


def iter_nodes(tree: list[ProfileNode]) -> Iterator[ProfileNode]:
    """Yield every node of a tree depth-first, parents before children."""
    for node in tree:
        yield node
        if node.children:
            yield from iter_nodes(node.children)


def find_by_id(tree: list[ProfileNode], node_id: str) -> ProfileNode | None:
    """Find a node among the top-level nodes of a tree.

    Nested children are not searched.
    """
    for node in tree:
        if node.id == node_id:
            return node
    return None


def find_in_tree(tree: list[ProfileNode], node_id: str) -> ProfileNode | None:
    """Find a node anywhere in a tree."""
    for node in iter_nodes(tree):
        if node.id == node_id:
            return node
    return None


__all__ = [
    "FOLDER_KINDS",
    "CommandRecord",
    "DataBundle",
    "HistoryEntry",
    "ProfileNode",
    "TrashEntry",
    "find_by_id",
    "find_in_tree",
    "iter_nodes",
    "validate_items",
]
