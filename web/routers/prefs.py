"""Preference endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as http_status
from pydantic import BaseModel

from sweethosts.workspace import Workspace
from web.deps import get_workspace

router = APIRouter()


class PreferenceRequest(BaseModel):
    """Request body for setting a preference."""

    value: Any = None


@router.get("")
def get_preferences(workspace: Workspace = Depends(get_workspace)) -> dict[str, Any]:
    """Get effective preferences, defaults merged with stored values."""
    return workspace.preferences.all()


@router.put("/{key}")
def set_preference(
    key: str,
    request: PreferenceRequest,
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, Any]:
    """Set one preference value.

    Returns:
        The updated key and value.
    """
    if not workspace.preferences.set(key, request.value):
        raise HTTPException(
            status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": "io_error", "message": f"Failed to save preference: {key}"},
        )
    return {"key": key, "value": workspace.preferences.get(key)}
