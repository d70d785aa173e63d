"""Hosts history endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as http_status

from sweethosts.workspace import Workspace
from web.deps import get_workspace

router = APIRouter()


@router.get("")
def list_history(
    workspace: Workspace = Depends(get_workspace),
) -> list[dict[str, Any]]:
    """List applied hosts documents, oldest first."""
    return [entry.model_dump() for entry in workspace.history.list()]


@router.delete("/{entry_id}")
def delete_history_entry(
    entry_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, bool]:
    """Delete a history entry.

    Raises:
        HTTPException: If no entry has this id.
    """
    if not workspace.history.delete(entry_id):
        raise HTTPException(
            status_code=http_status.HTTP_404_NOT_FOUND,
            detail={
                "code": "history_not_found",
                "message": f"History entry not found: {entry_id}",
            },
        )
    return {"success": True}
