"""Request dependencies: bearer check and access to the wired components."""
from fastapi import Header, HTTPException, Request
from fastapi.responses import PlainTextResponse
from typing import Optional
import logging

from nodefleet.config import Settings
from nodefleet.repositories.base import ClusterRepository, NodeRepository
from nodefleet.services.operation_service import OperationService
from nodefleet.simulator import RebootSimulator

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_cluster_repository(request: Request) -> ClusterRepository:
    return request.app.state.cluster_repository


def get_node_repository(request: Request) -> NodeRepository:
    return request.app.state.node_repository


def get_operation_service(request: Request) -> OperationService:
    return request.app.state.operation_service


def get_reboot_simulator(request: Request) -> Optional[RebootSimulator]:
    return request.app.state.reboot_simulator


async def verify_authentication(
    request: Request,
    authorization: Optional[str] = Header(None),
):
    """Accept only `Authorization: Bearer <API_TOKEN>`.

    This is a fixed shared token, not a security design.
    """
    settings = get_settings(request)

    if not authorization or not authorization.startswith("Bearer "):
        logger.warning(f"Missing bearer token. Path: {request.url.path}")
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization[len("Bearer "):]
    if token != settings.API_TOKEN:
        logger.warning(
            f"Trying to access a resource with wrong authorization token. Path: {request.url.path}"
        )
        raise HTTPException(
            status_code=401,
            detail="Wrong Bearer token",
            headers={"WWW-Authenticate": 'Bearer error="invalid_token"'},
        )


def error_response(status_code: int, error: Exception) -> PlainTextResponse:
    return PlainTextResponse(f"Something went wrong: {error}", status_code=status_code)


def not_found() -> PlainTextResponse:
    return PlainTextResponse("Not found", status_code=404)
