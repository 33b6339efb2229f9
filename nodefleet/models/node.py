"""Node model."""
from sqlalchemy import Column, Enum, ForeignKey, Text
from sqlalchemy.sql import func

from nodefleet.database import Base
from nodefleet.models.types import GUID, UTCDateTime
from nodefleet.schemas import NodeStatus


class Node(Base):
    """Managed compute unit; `status` is moved by the operation core."""

    __tablename__ = "nodes"

    id = Column(GUID, primary_key=True)
    name = Column(Text, nullable=False)
    status = Column(
        Enum(NodeStatus, name="node_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    cluster_id = Column(GUID, ForeignKey("clusters.id"), nullable=False)
    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, nullable=True)
