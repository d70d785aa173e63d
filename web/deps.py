"""Workspace dependency for FastAPI.

The workspace is opened once by the application lifespan and shared by
all requests; each store reads and writes its files per call, so there
is no per-request state to clean up.
"""

from __future__ import annotations

from typing import Any

from fastapi import Request

from sweethosts.workspace import Workspace


def get_workspace(request: Request) -> Workspace:
    """Get the workspace from app state.

    Args:
        request: FastAPI request object.

    Returns:
        Workspace bound to the configured data directory.
    """
    workspace: Any = request.app.state.workspace
    return workspace  # type: ignore[no-any-return]
