"""Relational repositories on top of the async SQLAlchemy engine.

Repositories hold only the session factory; each call opens its own session
and transaction, so one instance can be shared by every request.
"""
from sqlalchemy import delete, insert, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from typing import List, Optional
import logging
import uuid

from nodefleet import models
from nodefleet.models.types import utcnow
from nodefleet.repositories.base import (
    AlreadyExists,
    ClusterRepository,
    DoesNotExist,
    GenericRepositoryError,
    InvalidId,
    NodeRepository,
    OperationRepository,
)
from nodefleet.schemas import Cluster, Node, NodeFilter, Operation

logger = logging.getLogger(__name__)


class SqlRepository:
    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory


class SqlClusterRepository(SqlRepository, ClusterRepository):
    async def get_clusters(self) -> List[Cluster]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(models.Cluster))
                return [Cluster.model_validate(c) for c in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Error listing clusters: {e}")
            raise GenericRepositoryError(e) from e

    async def get_cluster(self, cluster_id: uuid.UUID) -> Cluster:
        stmt = select(models.Cluster).where(models.Cluster.id == cluster_id)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return Cluster.model_validate(result.scalar_one())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching cluster {cluster_id}: {e}")
            raise InvalidId() from e

    async def create_cluster(self, cluster: Cluster) -> Cluster:
        stmt = (
            insert(models.Cluster)
            .values(id=cluster.id, name=cluster.name)
            .returning(models.Cluster)
        )
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(stmt)
                return Cluster.model_validate(result.scalar_one())
        except SQLAlchemyError as e:
            logger.error(f"Error creating cluster {cluster.id}: {e}")
            raise AlreadyExists() from e

    async def update_cluster(self, cluster: Cluster) -> Cluster:
        stmt = (
            update(models.Cluster)
            .where(models.Cluster.id == cluster.id)
            .values(name=cluster.name, updated_at=utcnow())
            .returning(models.Cluster)
        )
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(stmt)
                record = result.scalar_one_or_none()
                if record is None:
                    raise DoesNotExist()
                return Cluster.model_validate(record)
        except SQLAlchemyError as e:
            logger.error(f"Error updating cluster {cluster.id}: {e}")
            raise DoesNotExist() from e
        except DoesNotExist:
            logger.error(f"Cluster {cluster.id} does not exist")
            raise

    async def delete_cluster(self, cluster_id: uuid.UUID) -> uuid.UUID:
        stmt = (
            delete(models.Cluster)
            .where(models.Cluster.id == cluster_id)
            .returning(models.Cluster.id)
        )
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(stmt)
                deleted = result.scalar_one_or_none()
                if deleted is None:
                    raise DoesNotExist()
                return deleted
        except SQLAlchemyError as e:
            logger.error(f"Error deleting cluster {cluster_id}: {e}")
            raise DoesNotExist() from e
        except DoesNotExist:
            logger.error(f"Cluster {cluster_id} does not exist")
            raise


class SqlNodeRepository(SqlRepository, NodeRepository):
    async def get_nodes(self, node_filter: Optional[NodeFilter] = None) -> List[Node]:
        stmt = select(models.Node)
        if node_filter is not None:
            pattern = f"%{node_filter.name}%"
            stmt = (
                stmt.join(models.Cluster, models.Node.cluster_id == models.Cluster.id)
                .where(or_(models.Node.name.like(pattern), models.Cluster.name.like(pattern)))
            )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [Node.model_validate(n) for n in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Error listing nodes: {e}")
            raise GenericRepositoryError(e) from e

    async def get_node(self, node_id: uuid.UUID) -> Node:
        stmt = select(models.Node).where(models.Node.id == node_id)
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return Node.model_validate(result.scalar_one())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching node {node_id}: {e}")
            raise InvalidId() from e

    async def create_node(self, node: Node) -> Node:
        stmt = (
            insert(models.Node)
            .values(id=node.id, name=node.name, status=node.status, cluster_id=node.cluster_id)
            .returning(models.Node)
        )
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(stmt)
                return Node.model_validate(result.scalar_one())
        except SQLAlchemyError as e:
            logger.error(f"Error creating node {node.id}: {e}")
            raise AlreadyExists() from e

    async def update_node(self, node: Node) -> Node:
        stmt = (
            update(models.Node)
            .where(models.Node.id == node.id)
            .values(
                name=node.name,
                status=node.status,
                cluster_id=node.cluster_id,
                updated_at=utcnow(),
            )
            .returning(models.Node)
        )
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(stmt)
                record = result.scalar_one_or_none()
                if record is None:
                    raise DoesNotExist()
                return Node.model_validate(record)
        except SQLAlchemyError as e:
            logger.error(f"Error updating node {node.id}: {e}")
            raise DoesNotExist() from e
        except DoesNotExist:
            logger.error(f"Node {node.id} does not exist")
            raise

    async def delete_node(self, node_id: uuid.UUID) -> uuid.UUID:
        stmt = (
            delete(models.Node)
            .where(models.Node.id == node_id)
            .returning(models.Node.id)
        )
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(stmt)
                deleted = result.scalar_one_or_none()
                if deleted is None:
                    raise DoesNotExist()
                return deleted
        except SQLAlchemyError as e:
            logger.error(f"Error deleting node {node_id}: {e}")
            raise DoesNotExist() from e
        except DoesNotExist:
            logger.error(f"Node {node_id} does not exist")
            raise


class SqlOperationRepository(SqlRepository, OperationRepository):
    async def create_operation(self, operation: Operation) -> Operation:
        """Insert the operation and update its node inside a single transaction."""
        insert_stmt = (
            insert(models.Operation)
            .values(
                id=operation.id,
                operation_type=operation.operation_type,
                node_id=operation.node_id,
            )
            .returning(models.Operation)
        )
        update_stmt = (
            update(models.Node)
            .where(models.Node.id == operation.node_id)
            .values(status=operation.operation_type.target_status, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )

        try:
            async with self._session_factory() as session, session.begin():
                try:
                    result = await session.execute(insert_stmt)
                    created = Operation.model_validate(result.scalar_one())
                except SQLAlchemyError as e:
                    logger.error(f"Error creating operation {operation.id}: {e}")
                    raise AlreadyExists() from e

                try:
                    result = await session.execute(update_stmt)
                except SQLAlchemyError as e:
                    logger.error(f"Error updating node while creating operation: {e}")
                    raise DoesNotExist() from e
                if result.rowcount == 0:
                    logger.error(
                        f"Node {operation.node_id} vanished while creating operation {operation.id}"
                    )
                    raise DoesNotExist()
        except SQLAlchemyError as e:
            # Connection or commit failure.
            logger.error(f"Error committing operation {operation.id}: {e}")
            raise GenericRepositoryError(e) from e

        logger.debug(f"Operation {created.id} ({created.operation_type.value}) recorded for node {created.node_id}")
        return created
