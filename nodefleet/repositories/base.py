"""Repository contracts and the storage error taxonomy.

Every implementation (relational or in-memory) raises only the exceptions
defined here, so callers never need to know which storage backs them.
"""
from abc import ABC, abstractmethod
from typing import List, Optional
import uuid

from nodefleet.schemas import Cluster, Node, NodeFilter, Operation


class RepositoryError(Exception):
    """Base class for all storage failures."""

    message = "Repository error"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class AlreadyExists(RepositoryError):
    message = "This entity already exists"


class DoesNotExist(RepositoryError):
    message = "This entity does not exist"


class InvalidId(RepositoryError):
    message = "The id format is not valid"


class LockError(RepositoryError):
    """The in-memory guard was poisoned by a mutation that failed halfway."""

    def __init__(self, description: str):
        self.description = description
        super().__init__(f"Lock error: {description}")


class GenericRepositoryError(RepositoryError):
    """Wraps any storage failure that has no more specific meaning."""

    def __init__(self, underlying: BaseException):
        self.underlying = underlying
        super().__init__(f"Repository error: {underlying}")


class ClusterRepository(ABC):
    @abstractmethod
    async def get_clusters(self) -> List[Cluster]:
        ...

    @abstractmethod
    async def get_cluster(self, cluster_id: uuid.UUID) -> Cluster:
        ...

    @abstractmethod
    async def create_cluster(self, cluster: Cluster) -> Cluster:
        ...

    @abstractmethod
    async def update_cluster(self, cluster: Cluster) -> Cluster:
        ...

    @abstractmethod
    async def delete_cluster(self, cluster_id: uuid.UUID) -> uuid.UUID:
        ...


class NodeRepository(ABC):
    @abstractmethod
    async def get_nodes(self, node_filter: Optional[NodeFilter] = None) -> List[Node]:
        """List nodes, optionally matching `node_filter.name` against the node or cluster name."""

    @abstractmethod
    async def get_node(self, node_id: uuid.UUID) -> Node:
        ...

    @abstractmethod
    async def create_node(self, node: Node) -> Node:
        ...

    @abstractmethod
    async def update_node(self, node: Node) -> Node:
        ...

    @abstractmethod
    async def delete_node(self, node_id: uuid.UUID) -> uuid.UUID:
        ...


class OperationRepository(ABC):
    @abstractmethod
    async def create_operation(self, operation: Operation) -> Operation:
        """Persist `operation` and move its node to the target status.

        Both writes happen in one transaction: either the operation is stored
        and the node status changed, or nothing is written at all.
        """
