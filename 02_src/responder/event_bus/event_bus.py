"""EventBus implementation for background pub/sub dispatch."""

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Awaitable, Callable, Protocol

from ..logging_config import get_logger
from ..models import BusMessage, Topic

logger = get_logger(__name__)


TopicHandler = Callable[[BusMessage], Awaitable[None]]


class IEventBus(Protocol):
    """In-memory pub/sub for exchanging BusMessages."""

    def subscribe(self, topic: Topic, handler: TopicHandler) -> None:
        """Subscribe a handler to a topic."""
        ...

    async def publish(self, message: BusMessage) -> None:
        """Publish BusMessage: awaits all subscriber callbacks."""
        ...

    def dispatch(self, message: BusMessage) -> asyncio.Task:
        """Publish in a detached task and return immediately."""
        ...

    async def drain(self) -> None:
        """Wait for every detached publish to finish."""
        ...


def new_bus_message(topic: Topic, payload: dict, source: str) -> BusMessage:
    return BusMessage(
        id=str(uuid.uuid4()),
        topic=topic,
        payload=payload,
        source=source,
        timestamp=datetime.now(timezone.utc),
    )


class EventBus:
    """In-memory pub/sub event bus.

    Handler failures are logged and counted in ``failures``; they never
    propagate to the publisher.
    """

    def __init__(self):
        self._subscribers: dict[Topic, list[TopicHandler]] = {topic: [] for topic in Topic}
        self._pending: set[asyncio.Task] = set()
        self.dispatched = 0
        self.failures = 0

    def subscribe(self, topic: Topic, handler: TopicHandler) -> None:
        """Subscribe a handler to a topic."""
        self._subscribers[topic].append(handler)

    async def publish(self, message: BusMessage) -> None:
        """Publish BusMessage: calls subscriber callbacks concurrently."""
        if not message.id:
            message.id = str(uuid.uuid4())

        handlers = self._subscribers.get(message.topic, [])
        if not handlers:
            logger.debug("No subscribers for topic %s", message.topic.value)
            return

        results = await asyncio.gather(
            *[handler(message) for handler in handlers],
            return_exceptions=True,
        )

        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                self.failures += 1
                logger.error(
                    "Error in %s handler %s: %s",
                    message.topic.value,
                    getattr(handler, "__qualname__", handler),
                    result,
                    exc_info=result,
                )

    def dispatch(self, message: BusMessage) -> asyncio.Task:
        """Publish in a detached task so the caller is not blocked."""
        task = asyncio.create_task(self.publish(message))
        self.dispatched += 1
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for detached publishes, including ones scheduled while waiting."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
