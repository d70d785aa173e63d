"""Trash endpoints.

- GET /trash - List trashed profiles
- POST /trash/{id} - Move a top-level profile to the trash
- POST /trash/{id}/restore - Restore a profile to the top of the tree
- DELETE /trash/{id} - Permanently delete a trashed profile
- DELETE /trash - Empty the trash
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as http_status

from sweethosts.profiles.schema import find_by_id
from sweethosts.profiles.trash import dump_trash
from sweethosts.workspace import Workspace
from web.deps import get_workspace

router = APIRouter()


def _io_error(message: str) -> HTTPException:
    return HTTPException(
        status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"code": "io_error", "message": message},
    )


def _not_in_trash(node_id: str) -> HTTPException:
    return HTTPException(
        status_code=http_status.HTTP_404_NOT_FOUND,
        detail={"code": "trash_item_not_found", "message": f"Not in trash: {node_id}"},
    )


@router.get("")
def list_trash(workspace: Workspace = Depends(get_workspace)) -> list[dict[str, Any]]:
    """List trashed profiles, oldest first."""
    return dump_trash(workspace.trash_store.list())


@router.delete("")
def clear_trash(workspace: Workspace = Depends(get_workspace)) -> dict[str, bool]:
    """Empty the trash."""
    if not workspace.trash_store.clear():
        raise _io_error("Failed to clear trash")
    return {"success": True}


@router.post("/{node_id}")
def move_to_trash(
    node_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, bool]:
    """Move a top-level profile to the trash.

    Only top-level nodes can be trashed; nested ids are reported as not
    found.

    Raises:
        HTTPException: If no top-level node has this id or the write fails.
    """
    if find_by_id(workspace.tree_store.load(), node_id) is None:
        raise HTTPException(
            status_code=http_status.HTTP_404_NOT_FOUND,
            detail={
                "code": "profile_not_found",
                "message": f"Top-level profile not found: {node_id}",
            },
        )
    if not workspace.trash_store.move_to_trash(node_id):
        raise _io_error(f"Failed to move {node_id} to trash")
    return {"success": True}


@router.post("/{node_id}/restore")
def restore_from_trash(
    node_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, bool]:
    """Restore a trashed profile to the top of the tree."""
    if not workspace.trash_store.restore_from_trash(node_id):
        raise _not_in_trash(node_id)
    return {"success": True}


@router.delete("/{node_id}")
def delete_from_trash(
    node_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, bool]:
    """Permanently delete a trashed profile."""
    if not workspace.trash_store.delete_from_trash(node_id):
        raise _not_in_trash(node_id)
    return {"success": True}
