"""Configuration endpoints."""

from typing import Any

from fastapi import APIRouter, Depends

from sweethosts.workspace import Workspace
from web.deps import get_workspace

router = APIRouter()


@router.get("")
def get_config(workspace: Workspace = Depends(get_workspace)) -> dict[str, Any]:
    """Get effective configuration.

    Returns:
        Current configuration as JSON.
    """
    settings = workspace.settings
    return {
        "data_dir": str(settings.data_dir),
        "hosts_path": workspace.pipeline.hosts_path,
        "tmp_dir": str(settings.tmp_dir) if settings.tmp_dir else None,
        "safe_mode": settings.safe_mode,
        "log_level": settings.log_level,
        "elevation_timeout": settings.elevation_timeout,
        "hook_timeout": settings.hook_timeout,
    }
