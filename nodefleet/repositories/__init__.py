"""Storage contracts and their implementations."""
from nodefleet.repositories.base import (
    AlreadyExists,
    ClusterRepository,
    DoesNotExist,
    GenericRepositoryError,
    InvalidId,
    LockError,
    NodeRepository,
    OperationRepository,
    RepositoryError,
)

__all__ = [
    "AlreadyExists",
    "ClusterRepository",
    "DoesNotExist",
    "GenericRepositoryError",
    "InvalidId",
    "LockError",
    "NodeRepository",
    "OperationRepository",
    "RepositoryError",
]
