"""Profile tree and content endpoints.

- GET /basic - Profile list, trash and version in one document
- GET /list - Get the profile tree
- PUT /list - Replace the profile tree
- POST /list - Create a profile or folder at the top of the tree
- GET /list/{id} - Get a node anywhere in the tree
- POST /list/{id}/toggle - Flip a node's activation flag
- GET /content/{id} - Get a profile's hosts content
- PUT /content/{id} - Replace a profile's hosts content
- GET /compose - Build the document from the active profiles
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi import status as http_status
from pydantic import BaseModel

from sweethosts.profiles.compose import compose
from sweethosts.profiles.schema import ProfileNode, find_in_tree
from sweethosts.profiles.service import (
    ProfileExistsError,
    basic_data,
    create_profile,
    toggle_profile,
)
from sweethosts.profiles.store import ContentIdError, dump_tree
from sweethosts.workspace import Workspace
from web.deps import get_workspace

router = APIRouter()


class ProfileCreateRequest(BaseModel):
    """Request body for creating a profile."""

    title: str
    id: str | None = None
    folder: bool = False
    on: bool = False
    content: str | None = None


class ContentRequest(BaseModel):
    """Request body for replacing profile content."""

    content: str


def _not_found(node_id: str) -> HTTPException:
    return HTTPException(
        status_code=http_status.HTTP_404_NOT_FOUND,
        detail={
            "code": "profile_not_found",
            "message": f"Profile not found: {node_id}",
        },
    )


@router.get("/basic")
def get_basic_data(workspace: Workspace = Depends(get_workspace)) -> dict[str, Any]:
    """Get the profile list, trash and version."""
    return basic_data(workspace)


@router.get("/list")
def get_list(workspace: Workspace = Depends(get_workspace)) -> list[dict[str, Any]]:
    """Get the stored profile tree.

    Returns:
        Profile nodes in stored order.
    """
    return dump_tree(workspace.tree_store.load())


@router.put("/list")
def put_list(
    tree: list[ProfileNode],
    workspace: Workspace = Depends(get_workspace),
) -> list[dict[str, Any]]:
    """Replace the whole profile tree.

    Args:
        tree: New profile tree.
        workspace: Data directory workspace.

    Returns:
        The saved tree.

    Raises:
        HTTPException: If the tree cannot be written.
    """
    if not workspace.tree_store.save(tree):
        raise HTTPException(
            status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": "io_error", "message": "Failed to save profile list"},
        )
    return dump_tree(tree)


@router.post("/list", status_code=http_status.HTTP_201_CREATED)
def create_list_item(
    request: ProfileCreateRequest,
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, Any]:
    """Create a profile or folder at the top of the tree.

    Raises:
        HTTPException: If the id is already used.
    """
    try:
        node = create_profile(
            workspace,
            request.title,
            node_id=request.id,
            folder=request.folder,
            on=request.on,
            content=request.content,
        )
    except ProfileExistsError as e:
        raise HTTPException(
            status_code=http_status.HTTP_409_CONFLICT,
            detail={"code": "profile_exists", "message": str(e)},
        ) from None
    return node.to_document()


@router.get("/list/{node_id}")
def get_list_item(
    node_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, Any]:
    """Get a node by id, searching nested folders too.

    Raises:
        HTTPException: If no node has this id.
    """
    node = find_in_tree(workspace.tree_store.load(), node_id)
    if node is None:
        raise _not_found(node_id)
    return node.to_document()


@router.post("/list/{node_id}/toggle")
def toggle_list_item(
    node_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, Any]:
    """Flip the activation flag of a node."""
    node = toggle_profile(workspace, node_id)
    if node is None:
        raise _not_found(node_id)
    return node.to_document()


@router.get("/content/{node_id}")
def get_content(
    node_id: str,
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, str]:
    """Get the hosts content of a profile.

    Raises:
        HTTPException: If the profile has no stored content.
    """
    content = workspace.content_store.get(node_id)
    if content is None:
        raise _not_found(node_id)
    return {"id": node_id, "content": content}


@router.put("/content/{node_id}")
def put_content(
    node_id: str,
    request: ContentRequest,
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, str]:
    """Replace the hosts content of a profile.

    Raises:
        HTTPException: If the id is unusable or the write fails.
    """
    try:
        workspace.content_store.path_for(node_id)
    except ContentIdError as e:
        raise HTTPException(
            status_code=http_status.HTTP_400_BAD_REQUEST,
            detail={"code": e.code, "message": str(e)},
        ) from None
    if not workspace.content_store.set(node_id, request.content):
        raise HTTPException(
            status_code=http_status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"code": "io_error", "message": f"Failed to save content: {node_id}"},
        )
    return {"id": node_id, "content": request.content}


@router.get("/compose")
def get_composed(workspace: Workspace = Depends(get_workspace)) -> dict[str, str]:
    """Build the hosts document from the active profiles."""
    return {
        "content": compose(workspace.tree_store.load(), workspace.content_store)
    }
