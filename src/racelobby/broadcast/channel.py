"""
Broadcast channel - Fan-out of lobby snapshots to live subscribers.

Provides:
- Subscribe with an immediate snapshot
- Unsubscribe on close or write failure
- Per-tick broadcast of one encoded snapshot to every subscriber
"""

import logging
import time
from typing import Callable

from racelobby.errors import ConnectionFailure
from racelobby.session.lobby import Lobby
from racelobby.broadcast.snapshot import encode_event, serialize_lobby
from racelobby.broadcast.subscription import Subscription

logger = logging.getLogger(__name__)


class BroadcastChannel:
    """Pushes lobby state to subscribers.

    Fan-out walks a copy of the subscription map, so subscribers can be
    removed while a broadcast is in flight. A subscriber that fails is
    dropped and delivery to the others carries on.

    Usage:
        channel = BroadcastChannel()
        subscription = channel.subscribe(lobby)
        channel.broadcast(lobby)
        channel.unsubscribe(lobby, subscription.handle)
    """

    def __init__(self, queue_size: int = 16, clock: Callable[[], float] = time.monotonic):
        """Initialize channel.

        Args:
            queue_size: Buffered messages per subscriber
            clock: Monotonic clock used to record lobby activity
        """
        self.queue_size = queue_size
        self._clock = clock

    def subscribe(self, lobby: Lobby, subscription: Subscription | None = None) -> Subscription:
        """Register a subscriber and push it the current state.

        Args:
            lobby: Lobby to watch
            subscription: Existing sink to register (a new one if None)

        Returns:
            The registered subscription
        """
        if subscription is None:
            subscription = Subscription(lobby.lobby_id, self.queue_size)

        with lobby.lock:
            lobby.subscriptions[subscription.handle] = subscription
            lobby.touch(self._clock())
            message = encode_event(serialize_lobby(lobby))

        try:
            subscription.push(message)
        except ConnectionFailure:
            self.unsubscribe(lobby, subscription.handle)
            raise

        logger.debug(
            f"Subscriber {subscription.handle} joined lobby {lobby.lobby_id} "
            f"({lobby.subscriber_count} watching)"
        )
        return subscription

    def unsubscribe(self, lobby: Lobby, handle: str) -> bool:
        """Remove a subscriber. Safe to call more than once.

        Args:
            lobby: Lobby being watched
            handle: Subscription handle

        Returns:
            True if the subscriber was registered
        """
        with lobby.lock:
            subscription = lobby.subscriptions.pop(handle, None)
            if subscription is not None:
                lobby.touch(self._clock())
        if subscription is None:
            return False

        subscription.close()
        logger.debug(
            f"Subscriber {handle} left lobby {lobby.lobby_id} after "
            f"{subscription.delivered} messages ({subscription.dropped} dropped)"
        )
        return True

    def broadcast(self, lobby: Lobby) -> int:
        """Push the lobby's current state to every subscriber.

        Args:
            lobby: Lobby to publish

        Returns:
            Number of subscribers the snapshot was queued for
        """
        with lobby.lock:
            subscribers = list(lobby.subscriptions.items())
            if not subscribers:
                return 0
            message = encode_event(serialize_lobby(lobby))

        delivered = 0
        for handle, subscription in subscribers:
            try:
                subscription.push(message)
            except ConnectionFailure:
                logger.debug(f"Dropping failed subscriber {handle} from lobby {lobby.lobby_id}")
                self.unsubscribe(lobby, handle)
                continue
            delivered += 1
        return delivered
