"""
Subscription - One live output channel of a lobby stream.

Each subscriber owns a small bounded queue. The tick pushes into it
without waiting; the connection handler drains it at its own pace.
"""

import asyncio
import uuid
from typing import AsyncIterator, Optional

from racelobby.errors import ConnectionFailure


class Subscription:
    """Bounded, non-blocking message sink for one subscriber.

    When the reader falls behind and the queue is full, the oldest
    message is dropped. Snapshots are full states, so only the newest
    ones matter.
    """

    def __init__(self, lobby_id: str, maxsize: int = 16):
        """Initialize an open subscription.

        Args:
            lobby_id: Lobby being watched
            maxsize: Messages buffered before the oldest is dropped
        """
        self.handle = uuid.uuid4().hex
        self.lobby_id = lobby_id

        self._queue: asyncio.Queue[Optional[str]] = asyncio.Queue(maxsize=max(1, maxsize))
        self._closed: bool = False

        self.delivered: int = 0
        self.dropped: int = 0

    @property
    def closed(self) -> bool:
        """Check if the subscriber has gone away."""
        return self._closed

    @property
    def pending(self) -> int:
        """Messages waiting to be written."""
        return self._queue.qsize()

    def push(self, message: str) -> None:
        """Queue a message without blocking.

        Args:
            message: Encoded event

        Raises:
            ConnectionFailure: If the subscription is closed
        """
        if self._closed:
            raise ConnectionFailure(f"Subscription {self.handle} is closed")
        self._make_room()
        self._queue.put_nowait(message)
        self.delivered += 1

    def close(self) -> None:
        """Close the subscription and wake the reader."""
        if self._closed:
            return
        self._closed = True
        self._make_room()
        self._queue.put_nowait(None)

    def get_nowait(self) -> Optional[str]:
        """Pop the next queued message, None if empty or closed."""
        try:
            return self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None

    async def messages(self) -> AsyncIterator[str]:
        """Yield messages until the subscription is closed."""
        while True:
            message = await self._queue.get()
            if message is None:
                return
            yield message

    def _make_room(self) -> None:
        if self._queue.full():
            self._queue.get_nowait()
            self.dropped += 1
