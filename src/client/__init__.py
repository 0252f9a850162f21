"""Affiliate API client package — credentials, HTTP access, and error types."""

from .credentials import read_env_file, resolve_credential
from .errors import (
    ConfigError,
    HTTPError,
    LeaderboardError,
    ResponseParseError,
    TransportError,
)
from .luxdrop import AffiliateClient

__all__ = [
    "AffiliateClient",
    "ConfigError",
    "HTTPError",
    "LeaderboardError",
    "ResponseParseError",
    "TransportError",
    "read_env_file",
    "resolve_credential",
]
