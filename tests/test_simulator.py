"""Tests for the reboot simulator."""
import asyncio

import pytest

from conftest import make_cluster, make_node
from nodefleet.schemas import NodeStatus
from nodefleet.simulator import RebootSimulator


async def rebooting_node(memory_repositories):
    clusters, nodes, _ = memory_repositories
    cluster = await clusters.create_cluster(make_cluster())
    return await nodes.create_node(make_node(cluster.id, status=NodeStatus.REBOOTING))


@pytest.mark.asyncio
async def test_rebooted_node_powers_on(memory_repositories):
    _, nodes, _ = memory_repositories
    node = await rebooting_node(memory_repositories)
    simulator = RebootSimulator(nodes, delay=0)
    simulator.start()

    result = await simulator.schedule(node.id)

    assert result.status is NodeStatus.POWER_ON
    assert (await nodes.get_node(node.id)).status is NodeStatus.POWER_ON
    await simulator.stop()


@pytest.mark.asyncio
async def test_leaves_node_changed_in_between(memory_repositories):
    _, nodes, _ = memory_repositories
    node = await rebooting_node(memory_repositories)
    simulator = RebootSimulator(nodes, delay=0.05)
    simulator.start()

    task = simulator.schedule(node.id)
    node.status = NodeStatus.POWER_OFF
    await nodes.update_node(node)
    await task

    assert (await nodes.get_node(node.id)).status is NodeStatus.POWER_OFF
    await simulator.stop()


@pytest.mark.asyncio
async def test_stop_cancels_pending(memory_repositories):
    _, nodes, _ = memory_repositories
    node = await rebooting_node(memory_repositories)
    simulator = RebootSimulator(nodes, delay=60)
    simulator.start()

    task = simulator.schedule(node.id)
    assert simulator.pending == 1
    await simulator.stop()

    assert task.cancelled()
    assert simulator.pending == 0
    assert not simulator.running
    assert (await nodes.get_node(node.id)).status is NodeStatus.REBOOTING


@pytest.mark.asyncio
async def test_not_running_schedules_nothing(memory_repositories):
    _, nodes, _ = memory_repositories
    node = await rebooting_node(memory_repositories)
    simulator = RebootSimulator(nodes, delay=0)

    assert simulator.schedule(node.id) is None
    await asyncio.sleep(0)
    assert (await nodes.get_node(node.id)).status is NodeStatus.REBOOTING
