"""Power operation endpoints.

Each endpoint takes the target node id as a bare JSON string body.
"""
from fastapi import APIRouter, Body, Depends
from typing import Optional
import logging
import uuid

from nodefleet.api.dependencies import (
    error_response,
    get_operation_service,
    get_reboot_simulator,
    verify_authentication,
)
from nodefleet.repositories.base import RepositoryError
from nodefleet.schemas import Operation
from nodefleet.services.operation_service import OperationService, OperationServiceError
from nodefleet.simulator import RebootSimulator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/operations", tags=["Operations"], dependencies=[Depends(verify_authentication)])


@router.post("/poweron", response_model=Operation, status_code=201)
async def power_on(
    node_id: uuid.UUID = Body(...),
    svc: OperationService = Depends(get_operation_service),
):
    """Power a node on."""
    try:
        return await svc.power_on(node_id)
    except (OperationServiceError, RepositoryError) as e:
        logger.error(f"Power on of node {node_id} failed: {e!r}")
        return error_response(500, e)


@router.post("/poweroff", response_model=Operation, status_code=201)
async def power_off(
    node_id: uuid.UUID = Body(...),
    svc: OperationService = Depends(get_operation_service),
):
    """Power a node off."""
    try:
        return await svc.power_off(node_id)
    except (OperationServiceError, RepositoryError) as e:
        logger.error(f"Power off of node {node_id} failed: {e!r}")
        return error_response(500, e)


@router.post("/reboot", response_model=Operation, status_code=201)
async def reboot(
    node_id: uuid.UUID = Body(...),
    svc: OperationService = Depends(get_operation_service),
    simulator: Optional[RebootSimulator] = Depends(get_reboot_simulator),
):
    """Reboot a node. With the simulator enabled it reports poweron again later."""
    try:
        operation = await svc.reboot(node_id)
    except (OperationServiceError, RepositoryError) as e:
        logger.error(f"Reboot of node {node_id} failed: {e!r}")
        return error_response(500, e)

    if simulator is not None:
        simulator.schedule(node_id)
    return operation
