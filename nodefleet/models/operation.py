"""Operation model."""
from sqlalchemy import Column, Enum
from sqlalchemy.sql import func

from nodefleet.database import Base
from nodefleet.models.types import GUID, UTCDateTime
from nodefleet.schemas import OperationType


class Operation(Base):
    """Append-only log of power commands issued against nodes."""

    __tablename__ = "operations"

    id = Column(GUID, primary_key=True)
    operation_type = Column(
        Enum(OperationType, name="operation_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    # No foreign key: the log outlives deleted nodes.
    node_id = Column(GUID, nullable=False, index=True)
    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, nullable=True)
