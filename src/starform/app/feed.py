"""
Record Feed

Fans store events out to every connected page so that lists opened in other
sessions pick up records they did not create themselves.
"""

import asyncio
import logging
from typing import Any, AsyncIterator, Dict, Set

from ..store.bus import EventBus

logger = logging.getLogger(__name__)


class RecordFeed:
    """Subscribes to the store's bus and gives each listener its own queue."""

    def __init__(self, bus: EventBus, max_backlog: int = 16):
        self.bus = bus
        self.max_backlog = max_backlog
        self._queues: Set[asyncio.Queue] = set()
        bus.subscribe(self._on_event)

    async def _on_event(self, event: Dict[str, Any]) -> None:
        for queue in list(self._queues):
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(f"Record feed listener is {self.max_backlog} events behind, dropping {event.get('event')}")

    async def listen(self) -> AsyncIterator[Dict[str, Any]]:
        """Yield store events until the consumer stops iterating."""
        queue: asyncio.Queue = asyncio.Queue(self.max_backlog)
        self._queues.add(queue)
        try:
            while True:
                yield await queue.get()
        finally:
            self._queues.discard(queue)

    @property
    def listener_count(self) -> int:
        return len(self._queues)

    def close(self) -> None:
        self.bus.unsubscribe(self._on_event)
        self._queues.clear()
