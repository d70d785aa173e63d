"""Profile management module.

This module handles:
- Validation models for the stored documents
- The profile tree and per-profile content stores
- The trash bin (move, restore, delete)
- Composition of active profiles into one hosts document
- Bundle import/export (YAML/JSON)
"""

from sweethosts.profiles.compose import collect_active_ids, compose
from sweethosts.profiles.io import (
    BundleImportError,
    build_bundle,
    export_data,
    import_data,
)
from sweethosts.profiles.schema import (
    CommandRecord,
    DataBundle,
    HistoryEntry,
    ProfileNode,
    TrashEntry,
    find_by_id,
    find_in_tree,
    iter_nodes,
)
from sweethosts.profiles.service import (
    ProfileExistsError,
    basic_data,
    create_profile,
    rename_profile,
    set_profile_on,
    toggle_profile,
    update_profile,
)
from sweethosts.profiles.store import ContentIdError, ContentStore, ProfileTreeStore
from sweethosts.profiles.trash import TrashStore

__all__ = [
    # Schema
    "CommandRecord",
    "DataBundle",
    "HistoryEntry",
    "ProfileNode",
    "TrashEntry",
    "find_by_id",
    "find_in_tree",
    "iter_nodes",
    # Stores
    "ContentIdError",
    "ContentStore",
    "ProfileTreeStore",
    "TrashStore",
    # Composition
    "collect_active_ids",
    "compose",
    # IO functions
    "BundleImportError",
    "build_bundle",
    "export_data",
    "import_data",
    # Service functions
    "ProfileExistsError",
    "basic_data",
    "create_profile",
    "rename_profile",
    "set_profile_on",
    "toggle_profile",
    "update_profile",
]
