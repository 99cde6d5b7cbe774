"""
Event Bus

Publishes store events (record created, records loaded) to subscribers such
as the record feed that keeps open pages' lists current.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, Awaitable, List, Dict, Any

logger = logging.getLogger(__name__)

EventHandler = Callable[[Dict[str, Any]], Awaitable[None]]


class EventBus(ABC):
    """Abstract base class for event buses."""

    @abstractmethod
    async def publish(self, event: Dict[str, Any]) -> None:
        """Publish an event to all subscribers."""
        pass

    @abstractmethod
    def subscribe(self, handler: EventHandler) -> None:
        """Subscribe a handler to receive events."""
        pass

    @abstractmethod
    def unsubscribe(self, handler: EventHandler) -> None:
        """Stop delivering events to a handler."""
        pass


class InProcessBus(EventBus):
    """
    Simple in-process event bus for single-instance applications.

    A failing handler is logged and never prevents delivery to the others,
    nor does it fail the publisher.
    """

    def __init__(self):
        self._subscribers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        self._subscribers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._subscribers:
            self._subscribers.remove(handler)

    async def publish(self, event: Dict[str, Any]) -> None:
        if not self._subscribers:
            return

        handlers = list(self._subscribers)
        await asyncio.gather(*(self._deliver(handler, event) for handler in handlers))

    async def _deliver(self, handler: EventHandler, event: Dict[str, Any]) -> None:
        # calling the handler is inside the try: sync handlers fail on the await
        try:
            await handler(event)
        except Exception:
            logger.exception(
                f"Event handler {getattr(handler, '__name__', handler)!r} failed on {event.get('event')}"
            )

    def clear_subscribers(self) -> None:
        self._subscribers.clear()

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
