"""Database models."""
from nodefleet.models.cluster import Cluster
from nodefleet.models.node import Node
from nodefleet.models.operation import Operation

__all__ = ["Cluster", "Node", "Operation"]
