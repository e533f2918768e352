"""
Errors - Exception taxonomy shared by the registry, broadcast and server layers.

Defines:
- NotFound: lobby or player absent (HTTP 404)
- InvalidInput: malformed request payload (HTTP 400)
- ConnectionFailure: a subscriber's channel broke (handled by the broadcast channel)
"""


class RaceLobbyError(Exception):
    """Base class for all racelobby errors."""

    status_code: int = 500
    message: str = "Internal error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class NotFound(RaceLobbyError):
    """A requested lobby or player does not exist."""

    status_code = 404
    message = "Not found"


class LobbyNotFound(NotFound):
    """No lobby is registered under the given id."""

    message = "Lobby not found"

    def __init__(self, lobby_id: str | None = None):
        super().__init__()
        self.lobby_id = lobby_id


class PlayerNotFound(NotFound):
    """The player id does not name a human car in the lobby."""

    message = "Player not found"

    def __init__(self, player_id: str | None = None):
        super().__init__()
        self.player_id = player_id


class InvalidInput(RaceLobbyError):
    """Request payload could not be parsed."""

    status_code = 400
    message = "Invalid JSON"


class ConnectionFailure(RaceLobbyError):
    """A subscriber's output channel is closed or broken."""

    message = "Subscriber connection failed"
