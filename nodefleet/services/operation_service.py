"""Operation submission: record a power command and move the node's status.

The service only checks that the node exists and then hands the operation to
the operation repository, which writes the operation row and the node status
in one transaction. Splitting those writes across two repository calls here
would let a crash or a concurrent delete leave one without the other.
"""
import logging
import uuid

from nodefleet.repositories.base import NodeRepository, OperationRepository, RepositoryError
from nodefleet.schemas import Node, Operation, OperationType

logger = logging.getLogger(__name__)


class OperationServiceError(Exception):
    """Base class for errors raised by the operation service."""


class NodeNotFound(OperationServiceError):
    def __init__(self, node_id: uuid.UUID):
        self.node_id = node_id
        super().__init__(f"Node not found: `{node_id}`")


class OperationService:
    """Coordinates power operations against nodes.

    Repository errors raised while writing are propagated unchanged; only a
    failed node lookup is translated (into NodeNotFound).
    """

    def __init__(self, node_repository: NodeRepository, operation_repository: OperationRepository):
        self.node_repository = node_repository
        self.operation_repository = operation_repository

    async def power_on(self, node_id: uuid.UUID) -> Operation:
        return await self._create_operation(node_id, OperationType.POWER_ON)

    async def power_off(self, node_id: uuid.UUID) -> Operation:
        return await self._create_operation(node_id, OperationType.POWER_OFF)

    async def reboot(self, node_id: uuid.UUID) -> Operation:
        return await self._create_operation(node_id, OperationType.REBOOT)

    async def _create_operation(self, node_id: uuid.UUID, operation_type: OperationType) -> Operation:
        await self._node_check(node_id)

        operation = Operation.new(node_id, operation_type)
        created = await self.operation_repository.create_operation(operation)
        logger.info(
            f"Operation {created.id} ({operation_type.value}) accepted, "
            f"node {node_id} is now {operation_type.target_status.value}"
        )
        return created

    async def _node_check(self, node_id: uuid.UUID) -> Node:
        try:
            return await self.node_repository.get_node(node_id)
        except RepositoryError as e:
            logger.error(f"Node {node_id} not found in database: {e!r}")
            raise NodeNotFound(node_id) from e
