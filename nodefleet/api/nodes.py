"""Node management endpoints."""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from typing import List, Optional
import logging
import uuid

from nodefleet.api.dependencies import (
    error_response,
    get_node_repository,
    not_found,
    verify_authentication,
)
from nodefleet.repositories.base import NodeRepository, RepositoryError
from nodefleet.schemas import Node, NodeFilter, NodePatch

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/nodes", tags=["Nodes"], dependencies=[Depends(verify_authentication)])


@router.get("", response_model=List[Node])
async def list_nodes(
    name: Optional[str] = Query(None, description="Substring of the node name or its cluster name"),
    repo: NodeRepository = Depends(get_node_repository),
):
    """List nodes, optionally filtered by name."""
    node_filter = NodeFilter(name=name) if name is not None else None
    try:
        return await repo.get_nodes(node_filter)
    except RepositoryError as e:
        logger.error(f"Failed to list nodes: {e!r}")
        return error_response(500, e)


@router.get("/{node_id}", response_model=Node)
async def get_node(node_id: uuid.UUID, repo: NodeRepository = Depends(get_node_repository)):
    """Get node by ID."""
    try:
        return await repo.get_node(node_id)
    except RepositoryError as e:
        logger.error(f"Node {node_id} not found: {e!r}")
        return not_found()


@router.post("", response_model=Node, status_code=201)
async def create_node(node: Node, repo: NodeRepository = Depends(get_node_repository)):
    """Create a node with a client-chosen id."""
    try:
        return await repo.create_node(node)
    except RepositoryError as e:
        logger.error(f"Failed to create node {node.id}: {e!r}")
        return error_response(500, e)


@router.patch("", response_model=Node)
async def patch_node_status(patch: NodePatch, repo: NodeRepository = Depends(get_node_repository)):
    """Set only the status of an existing node."""
    try:
        node = await repo.get_node(patch.id)
        node.status = patch.status
        return await repo.update_node(node)
    except RepositoryError as e:
        logger.error(f"Failed to patch node {patch.id}: {e!r}")
        return error_response(404, e)


@router.put("", response_model=Node)
async def update_node(node: Node, repo: NodeRepository = Depends(get_node_repository)):
    """Update the node identified by the id in the body."""
    try:
        return await repo.update_node(node)
    except RepositoryError as e:
        logger.error(f"Failed to update node {node.id}: {e!r}")
        return error_response(404, e)


@router.delete("/{node_id}", response_class=PlainTextResponse)
async def delete_node(node_id: uuid.UUID, repo: NodeRepository = Depends(get_node_repository)):
    """Delete node; responds with the deleted id."""
    try:
        deleted = await repo.delete_node(node_id)
    except RepositoryError as e:
        logger.error(f"Failed to delete node {node_id}: {e!r}")
        return error_response(500, e)
    return PlainTextResponse(str(deleted))
