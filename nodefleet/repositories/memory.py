"""In-memory repositories.

Useful for tests and local experiments. Each collection sits behind a guard;
a mutation that raises while holding the write side poisons the guard and
every later access fails with LockError instead of seeing half-applied state.
"""
from contextlib import contextmanager
from typing import Dict, List, Optional
import logging
import threading
import uuid

from nodefleet.models.types import utcnow
from nodefleet.repositories.base import (
    AlreadyExists,
    ClusterRepository,
    DoesNotExist,
    InvalidId,
    LockError,
    NodeRepository,
    OperationRepository,
    RepositoryError,
)
from nodefleet.schemas import Cluster, Node, NodeFilter, NodeStatus, Operation

logger = logging.getLogger(__name__)


class PoisonableLock:
    """Readers-writer lock that remembers a failed write.

    Readers share the lock; a writer holds it alone.
    """

    def __init__(self):
        self._cond = threading.Condition()
        self._readers = 0
        self._writing = False
        self.poisoned: Optional[str] = None

    @contextmanager
    def read(self):
        with self._cond:
            self._cond.wait_for(lambda: not self._writing)
            self._check()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self):
        with self._cond:
            self._cond.wait_for(lambda: not self._writing and not self._readers)
            self._check()
            self._writing = True
        try:
            yield
        except RepositoryError:
            # Rejected before anything was mutated.
            raise
        except BaseException as e:
            self.poisoned = f"{type(e).__name__}: {e}"
            logger.error(f"Lock poisoned by failed write: {self.poisoned}")
            raise
        finally:
            with self._cond:
                self._writing = False
                self._cond.notify_all()

    def _check(self):
        if self.poisoned is not None:
            raise LockError(self.poisoned)


class MemoryClusterRepository(ClusterRepository):
    def __init__(self):
        self.lock = PoisonableLock()
        self._clusters: Dict[uuid.UUID, Cluster] = {}

    async def get_clusters(self) -> List[Cluster]:
        with self.lock.read():
            return [c.model_copy() for c in self._clusters.values()]

    async def get_cluster(self, cluster_id: uuid.UUID) -> Cluster:
        with self.lock.read():
            cluster = self._clusters.get(cluster_id)
        if cluster is None:
            logger.error(f"Couldn't retrieve a cluster with id {cluster_id}")
            raise InvalidId()
        return cluster.model_copy()

    async def create_cluster(self, cluster: Cluster) -> Cluster:
        with self.lock.write():
            if cluster.id in self._clusters:
                logger.error(f"Cluster with id {cluster.id} already exists")
                raise AlreadyExists()
            created = cluster.model_copy(update={"created_at": utcnow(), "updated_at": None})
            self._clusters[cluster.id] = created
        logger.debug(f"Cluster with id {cluster.id} correctly created")
        return created.model_copy()

    async def update_cluster(self, cluster: Cluster) -> Cluster:
        with self.lock.write():
            old = self._clusters.get(cluster.id)
            if old is None:
                logger.error(f"Cluster {cluster.id} does not exist")
                raise DoesNotExist()
            updated = cluster.model_copy(update={"created_at": old.created_at, "updated_at": utcnow()})
            self._clusters[cluster.id] = updated
        logger.debug(f"Cluster with id {cluster.id} correctly updated")
        return updated.model_copy()

    async def delete_cluster(self, cluster_id: uuid.UUID) -> uuid.UUID:
        with self.lock.write():
            if self._clusters.pop(cluster_id, None) is None:
                logger.error(f"Cluster {cluster_id} does not exist")
                raise DoesNotExist()
        return cluster_id


class MemoryNodeRepository(NodeRepository):
    """Node storage; pass the cluster repository to enable name filtering on clusters."""

    def __init__(self, cluster_repository: Optional[MemoryClusterRepository] = None):
        self.lock = PoisonableLock()
        self._nodes: Dict[uuid.UUID, Node] = {}
        self._cluster_repository = cluster_repository

    async def get_nodes(self, node_filter: Optional[NodeFilter] = None) -> List[Node]:
        with self.lock.read():
            nodes = [n.model_copy() for n in self._nodes.values()]
        if node_filter is None:
            return nodes

        cluster_names = {}
        if self._cluster_repository is not None:
            cluster_names = {c.id: c.name for c in await self._cluster_repository.get_clusters()}
        # Same semantics as the SQL inner join: nodes without a known cluster drop out.
        return [
            n for n in nodes
            if n.cluster_id in cluster_names
            and (node_filter.name in n.name or node_filter.name in cluster_names[n.cluster_id])
        ]

    async def get_node(self, node_id: uuid.UUID) -> Node:
        with self.lock.read():
            node = self._nodes.get(node_id)
        if node is None:
            logger.error(f"Couldn't retrieve a node with id {node_id}")
            raise InvalidId()
        return node.model_copy()

    async def create_node(self, node: Node) -> Node:
        with self.lock.write():
            if node.id in self._nodes:
                logger.error(f"Node with id {node.id} already exists")
                raise AlreadyExists()
            created = node.model_copy(update={"created_at": utcnow(), "updated_at": None})
            self._nodes[node.id] = created
        logger.debug(f"Node with id {node.id} correctly created")
        return created.model_copy()

    async def update_node(self, node: Node) -> Node:
        with self.lock.write():
            updated = self._replace(node)
        logger.debug(f"Node with id {node.id} correctly updated")
        return updated.model_copy()

    async def delete_node(self, node_id: uuid.UUID) -> uuid.UUID:
        with self.lock.write():
            if self._nodes.pop(node_id, None) is None:
                logger.error(f"Node {node_id} does not exist")
                raise DoesNotExist()
        return node_id

    def _replace(self, node: Node) -> Node:
        # Caller must hold the write guard.
        old = self._nodes.get(node.id)
        if old is None:
            logger.error(f"Node {node.id} does not exist")
            raise DoesNotExist()
        updated = node.model_copy(update={"created_at": old.created_at, "updated_at": utcnow()})
        self._nodes[node.id] = updated
        return updated

    def apply_status(self, node_id: uuid.UUID, status: NodeStatus) -> Node:
        """Set a node's status; the caller must hold `lock.write()`.

        Raises DoesNotExist, leaving the node untouched, if the node is gone.
        """
        node = self._nodes.get(node_id)
        if node is None:
            logger.error(f"Node {node_id} does not exist")
            raise DoesNotExist()
        return self._replace(node.model_copy(update={"status": status}))


class MemoryOperationRepository(OperationRepository):
    """Operations stored next to the node repository they update.

    Both writes run under the node guard without yielding to the event loop,
    so no other task can observe one without the other.
    """

    def __init__(self, node_repository: MemoryNodeRepository):
        self._node_repository = node_repository
        self._operations: Dict[uuid.UUID, Operation] = {}

    async def create_operation(self, operation: Operation) -> Operation:
        nodes = self._node_repository
        with nodes.lock.write():
            if operation.id in self._operations:
                logger.error(f"Operation with id {operation.id} already exists")
                raise AlreadyExists()
            nodes.apply_status(operation.node_id, operation.operation_type.target_status)
            created = operation.model_copy(update={"created_at": utcnow(), "updated_at": None})
            self._operations[created.id] = created
        return created.model_copy()

    async def get_operations(self, node_id: Optional[uuid.UUID] = None) -> List[Operation]:
        with self._node_repository.lock.read():
            return [
                op.model_copy() for op in self._operations.values()
                if node_id is None or op.node_id == node_id
            ]
