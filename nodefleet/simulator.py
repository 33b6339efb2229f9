"""Fake device behaviour: rebooted nodes come back up after a delay.

Nothing here records operations. The simulator is owned by the application,
started and stopped with it, and cancels whatever is still pending on stop.
"""
from typing import Optional, Set
import asyncio
import logging
import uuid

from nodefleet.repositories.base import NodeRepository, RepositoryError
from nodefleet.schemas import Node, NodeStatus

logger = logging.getLogger(__name__)


class RebootSimulator:
    """Moves a node from Rebooting back to PowerOn `delay` seconds after a reboot."""

    def __init__(self, node_repository: NodeRepository, delay: float = 5.0):
        self.node_repository = node_repository
        self.delay = delay
        self._tasks: Set[asyncio.Task] = set()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def start(self):
        self._running = True
        logger.info(f"Reboot simulator started (delay {self.delay}s)")

    async def stop(self):
        """Stop accepting work and cancel every pending power-on."""
        self._running = False
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        logger.info(f"Reboot simulator stopped, {len(tasks)} pending power-on(s) cancelled")

    def schedule(self, node_id: uuid.UUID) -> Optional[asyncio.Task]:
        if not self._running:
            logger.warning(f"Reboot simulator is not running, node {node_id} stays rebooting")
            return None
        task = asyncio.create_task(self._power_on_later(node_id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _power_on_later(self, node_id: uuid.UUID) -> Optional[Node]:
        await asyncio.sleep(self.delay)
        try:
            node = await self.node_repository.get_node(node_id)
            if node.status != NodeStatus.REBOOTING:
                # Someone issued another operation meanwhile; leave it alone.
                logger.debug(f"Node {node_id} is {node.status.value}, skipping simulated power-on")
                return node
            node.status = NodeStatus.POWER_ON
            node = await self.node_repository.update_node(node)
        except RepositoryError as e:
            logger.error(f"Error powering on node {node_id} after rebooting: {e!r}")
            return None
        logger.info(f"Node {node_id} finished rebooting")
        return node
