"""Exception types raised while resolving credentials and calling the API."""


class LeaderboardError(Exception):
    """Base class for every leaderboard failure."""


class ConfigError(LeaderboardError):
    """The API credential could not be resolved from its source."""


class TransportError(LeaderboardError):
    """The request never got a response (connection refused, DNS, timeout)."""


class HTTPError(LeaderboardError):
    """The API answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str = ""):
        self.status_code = status_code
        super().__init__(message or f"HTTP error! status: {status_code}")


class ResponseParseError(LeaderboardError):
    """The API answered 2xx but the body was not valid JSON."""
