"""Shared fixtures: settings, in-memory and SQLite-backed repositories, test clients."""
import uuid

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from nodefleet.config import Settings
from nodefleet.database import create_engine, create_session_factory, init_db
from nodefleet.main import create_app
from nodefleet.repositories.memory import (
    MemoryClusterRepository,
    MemoryNodeRepository,
    MemoryOperationRepository,
)
from nodefleet.repositories.sql import SqlClusterRepository, SqlNodeRepository, SqlOperationRepository
from nodefleet.schemas import Cluster, Node, NodeStatus

TOKEN = "test-token"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


def make_cluster(name: str = "alpha") -> Cluster:
    return Cluster(id=uuid.uuid4(), name=name)


def make_node(cluster_id: uuid.UUID, name: str = "box", status: NodeStatus = NodeStatus.POWER_OFF) -> Node:
    return Node(id=uuid.uuid4(), name=name, cluster_id=cluster_id, status=status)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        DATABASE_URL="sqlite+aiosqlite://",
        API_TOKEN=TOKEN,
        REBOOT_SIMULATION_DELAY=None,
    )


@pytest.fixture
def memory_repositories():
    clusters = MemoryClusterRepository()
    nodes = MemoryNodeRepository(clusters)
    operations = MemoryOperationRepository(nodes)
    return clusters, nodes, operations


@pytest.fixture
def client(settings, memory_repositories):
    """Test client over in-memory repositories."""
    app = create_app(settings, *memory_repositories)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sql_client(settings):
    """Test client over an in-memory SQLite database created at startup."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def session_factory():
    engine = create_engine("sqlite+aiosqlite://")
    await init_db(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def sql_repositories(session_factory):
    return (
        SqlClusterRepository(session_factory),
        SqlNodeRepository(session_factory),
        SqlOperationRepository(session_factory),
    )
