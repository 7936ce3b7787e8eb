"""Prefetch queues for latency hiding.

Content for the next round is produced in a background task while the
current round is played, then parked in a small per-fingerprint queue
until ``consume`` drains it.
"""

import asyncio
import logging
from collections import deque
from typing import Coroutine, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PrefetchQueue(Generic[T]):
    """Bounded FIFO with push/shift semantics.

    Args:
        capacity: Maximum number of queued items.
    """

    def __init__(self, capacity: int = 1) -> None:
        if capacity < 1:
            raise ValueError("Prefetch queue capacity must be at least 1")
        self.capacity = capacity
        self._items: deque[T] = deque()

    def push(self, item: T) -> bool:
        """Append an item. Returns False if the queue is full."""
        if self.is_full():
            return False
        self._items.append(item)
        return True

    def shift(self) -> T | None:
        """Remove and return the oldest item, or None when empty."""
        if not self._items:
            return None
        return self._items.popleft()

    def is_empty(self) -> bool:
        return not self._items

    def is_full(self) -> bool:
        return len(self._items) >= self.capacity

    def __len__(self) -> int:
        return len(self._items)


class PrefetchManager(Generic[T]):
    """Per-fingerprint queues plus the background tasks that fill them.

    Queues are created lazily. At most one fill task runs per
    fingerprint; tasks stay referenced until they finish.

    Args:
        capacity: Capacity of each queue.
    """

    def __init__(self, capacity: int = 1) -> None:
        self._capacity = capacity
        self._queues: dict[str, PrefetchQueue[T]] = {}
        self._tasks: dict[str, asyncio.Task[None]] = {}

    @property
    def capacity(self) -> int:
        return self._capacity

    def queue_for(self, fingerprint: str) -> PrefetchQueue[T]:
        """Get the queue for a fingerprint, creating it if needed."""
        queue = self._queues.get(fingerprint)
        if queue is None:
            queue = PrefetchQueue(self._capacity)
            self._queues[fingerprint] = queue
        return queue

    def is_full(self, fingerprint: str) -> bool:
        queue = self._queues.get(fingerprint)
        return queue is not None and queue.is_full()

    def push(self, fingerprint: str, item: T) -> bool:
        """Queue an item. Returns False if the queue was already full."""
        pushed = self.queue_for(fingerprint).push(item)
        if pushed:
            logger.info(f"Prefetched item queued for {fingerprint}")
        else:
            logger.debug(f"Prefetch queue full for {fingerprint}, dropping item")
        return pushed

    def shift(self, fingerprint: str) -> T | None:
        """Take the oldest queued item for a fingerprint, if any."""
        queue = self._queues.get(fingerprint)
        if queue is None:
            return None
        return queue.shift()

    def in_flight(self, fingerprint: str) -> asyncio.Task[None] | None:
        """The running fill task for a fingerprint, if any."""
        task = self._tasks.get(fingerprint)
        if task is not None and task.done():
            return None
        return task

    def spawn(self, fingerprint: str, coro: Coroutine[None, None, None]) -> asyncio.Task[None]:
        """Run a fill coroutine as a tracked background task."""
        task = asyncio.create_task(coro, name=f"prefetch:{fingerprint}")
        self._tasks[fingerprint] = task
        task.add_done_callback(lambda t: self._forget(fingerprint, t))
        logger.debug(f"Prefetch started for {fingerprint}")
        return task

    def pending(self) -> list[asyncio.Task[None]]:
        return [t for t in self._tasks.values() if not t.done()]

    async def wait_idle(self) -> None:
        """Wait until every running fill task has finished."""
        while pending := self.pending():
            await asyncio.gather(*pending, return_exceptions=True)

    def _forget(self, fingerprint: str, task: asyncio.Task[None]) -> None:
        if self._tasks.get(fingerprint) is task:
            del self._tasks[fingerprint]
