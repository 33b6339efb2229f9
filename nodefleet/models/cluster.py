"""Cluster model."""
from sqlalchemy import Column, Text
from sqlalchemy.sql import func

from nodefleet.database import Base
from nodefleet.models.types import GUID, UTCDateTime


class Cluster(Base):
    """Named grouping of nodes."""

    __tablename__ = "clusters"

    id = Column(GUID, primary_key=True)
    name = Column(Text, nullable=False)
    created_at = Column(UTCDateTime, server_default=func.now())
    updated_at = Column(UTCDateTime, nullable=True)
