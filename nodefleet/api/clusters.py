"""Cluster management endpoints."""
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from typing import List
import logging
import uuid

from nodefleet.api.dependencies import (
    error_response,
    get_cluster_repository,
    not_found,
    verify_authentication,
)
from nodefleet.repositories.base import ClusterRepository, RepositoryError
from nodefleet.schemas import Cluster

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/clusters", tags=["Clusters"], dependencies=[Depends(verify_authentication)])


@router.get("", response_model=List[Cluster])
async def list_clusters(repo: ClusterRepository = Depends(get_cluster_repository)):
    """List all clusters."""
    try:
        return await repo.get_clusters()
    except RepositoryError as e:
        logger.error(f"Failed to list clusters: {e!r}")
        return error_response(500, e)


@router.get("/{cluster_id}", response_model=Cluster)
async def get_cluster(cluster_id: uuid.UUID, repo: ClusterRepository = Depends(get_cluster_repository)):
    """Get cluster by ID."""
    try:
        return await repo.get_cluster(cluster_id)
    except RepositoryError as e:
        logger.error(f"Cluster {cluster_id} not found: {e!r}")
        return not_found()


@router.post("", response_model=Cluster, status_code=201)
async def create_cluster(cluster: Cluster, repo: ClusterRepository = Depends(get_cluster_repository)):
    """Create a cluster with a client-chosen id."""
    try:
        return await repo.create_cluster(cluster)
    except RepositoryError as e:
        logger.error(f"Failed to create cluster {cluster.id}: {e!r}")
        return error_response(500, e)


@router.put("", response_model=Cluster)
async def update_cluster(cluster: Cluster, repo: ClusterRepository = Depends(get_cluster_repository)):
    """Update the cluster identified by the id in the body."""
    try:
        return await repo.update_cluster(cluster)
    except RepositoryError as e:
        logger.error(f"Failed to update cluster {cluster.id}: {e!r}")
        return error_response(404, e)


@router.delete("/{cluster_id}", response_class=PlainTextResponse)
async def delete_cluster(cluster_id: uuid.UUID, repo: ClusterRepository = Depends(get_cluster_repository)):
    """Delete cluster; responds with the deleted id."""
    try:
        deleted = await repo.delete_cluster(cluster_id)
    except RepositoryError as e:
        logger.error(f"Failed to delete cluster {cluster_id}: {e!r}")
        return error_response(500, e)
    return PlainTextResponse(str(deleted))
