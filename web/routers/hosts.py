"""System hosts endpoints.

- POST /hosts/apply - Apply the active profiles to the system hosts file
- POST /hosts/refresh - Write the composed profiles as the whole hosts file
- GET /hosts/system - Read the current system hosts file

Apply outcomes map to status codes: permission_denied is 403 and
io_failure is 500. The elevation password is never echoed back.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as http_status
from pydantic import BaseModel

from sweethosts.hooks import run_post_apply_command
from sweethosts.system.apply import refresh, write_hosts_to_system
from sweethosts.system.hosts import read_hosts
from sweethosts.types import ApplyOutcome, ApplyStatus, WriteMode
from sweethosts.workspace import Workspace
from web.deps import get_workspace

router = APIRouter()


class ApplyRequest(BaseModel):
    """Request body for applying hosts."""

    password: str | None = None
    write_mode: WriteMode | None = None
    run_hook: bool = True


def _outcome_response(outcome: ApplyOutcome) -> dict[str, Any]:
    if outcome.status is ApplyStatus.PERMISSION_DENIED:
        raise HTTPException(
            status_code=http_status.HTTP_403_FORBIDDEN,
            detail={
                "code": outcome.code or "no_access",
                "message": outcome.message or "Permission denied",
            },
        )
    if outcome.status is ApplyStatus.IO_FAILURE:
        raise HTTPException(
            status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "code": outcome.code or "io_error",
                "message": outcome.message or "Failed to write hosts",
            },
        )
    return outcome.to_dict()


@router.post("/apply")
def apply_hosts(
    request: ApplyRequest | None = None,
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, Any]:
    """Apply the active profiles to the system hosts file.

    Args:
        request: Optional password, write mode and hook flag.
        workspace: Data directory workspace.

    Returns:
        Apply outcome, plus the post-apply command record if one ran.

    Raises:
        HTTPException: If permission is denied or the write fails.
    """
    request = request or ApplyRequest()
    outcome = write_hosts_to_system(
        workspace,
        elevation_secret=request.password,
        write_mode=request.write_mode,
    )
    result = _outcome_response(outcome)
    record = None
    if outcome.status is ApplyStatus.INSTALLED and request.run_hook:
        record = run_post_apply_command(
            workspace.preferences,
            workspace.cmd_history,
            timeout=workspace.settings.hook_timeout,
        )
    result["hook"] = record.model_dump() if record else None
    return result


@router.post("/refresh")
def refresh_hosts(workspace: Workspace = Depends(get_workspace)) -> dict[str, Any]:
    """Write the composed profiles as the whole hosts file, without elevation."""
    return _outcome_response(refresh(workspace))


@router.get("/system")
def get_system_hosts(
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, str]:
    """Read the current system hosts file."""
    path = workspace.pipeline.hosts_path
    return {"path": path, "content": read_hosts(path)}
