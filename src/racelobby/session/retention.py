"""
Retention - When an idle lobby may be dropped from the registry.
"""

from dataclasses import dataclass

from racelobby.session.lobby import Lobby


@dataclass
class RetentionPolicy:
    """Idle-timeout retention.

    A lobby expires once nobody is watching it and nothing has joined,
    submitted input or subscribed for ``idle_timeout_s`` seconds. A
    timeout of zero or less keeps lobbies forever.
    """
    idle_timeout_s: float = 1800.0

    @property
    def enabled(self) -> bool:
        return self.idle_timeout_s > 0

    def is_expired(self, lobby: Lobby, now: float) -> bool:
        """Check whether a lobby may be reaped.

        Args:
            lobby: Lobby to check
            now: Current monotonic time

        Returns:
            True if the lobby is idle past the timeout
        """
        if not self.enabled or lobby.subscriber_count > 0:
            return False
        return now - lobby.last_activity > self.idle_timeout_s
