"""Domain records shared by the repositories, the operation service and the API."""
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime
import enum
import uuid


class NodeStatus(str, enum.Enum):
    """Observable power state of a node."""

    POWER_ON = "poweron"
    POWER_OFF = "poweroff"
    REBOOTING = "rebooting"


class OperationType(str, enum.Enum):
    """Power-lifecycle command that can be issued against a node."""

    POWER_ON = "poweron"
    POWER_OFF = "poweroff"
    REBOOT = "reboot"

    @property
    def target_status(self) -> NodeStatus:
        """Status a node ends up in once this operation is recorded."""
        return _TARGET_STATUS[self]


_TARGET_STATUS = {
    OperationType.POWER_ON: NodeStatus.POWER_ON,
    OperationType.POWER_OFF: NodeStatus.POWER_OFF,
    OperationType.REBOOT: NodeStatus.REBOOTING,
}


class Cluster(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Node(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    cluster_id: uuid.UUID
    status: NodeStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class Operation(BaseModel):
    """A recorded power command. Never updated once persisted."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    node_id: uuid.UUID
    operation_type: OperationType
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def new(cls, node_id: uuid.UUID, operation_type: OperationType) -> "Operation":
        """Build an unsaved operation; storage assigns the timestamps."""
        return cls(id=uuid.uuid4(), node_id=node_id, operation_type=operation_type)


class NodeFilter(BaseModel):
    name: str


class NodePatch(BaseModel):
    id: uuid.UUID
    status: NodeStatus
