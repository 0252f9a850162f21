"""Session package — explicit leaderboard state and the controller driving it."""

from .controller import LeaderboardController
from .state import (
    ERROR_DISMISS_SECONDS,
    DataLoaded,
    DismissError,
    LoadFailed,
    LoadStarted,
    SessionState,
    SessionStatus,
    SetSortField,
    Tick,
    ToggleSortOrder,
    describe_failure,
    transition,
)

__all__ = [
    "ERROR_DISMISS_SECONDS",
    "DataLoaded",
    "DismissError",
    "LeaderboardController",
    "LoadFailed",
    "LoadStarted",
    "SessionState",
    "SessionStatus",
    "SetSortField",
    "Tick",
    "ToggleSortOrder",
    "describe_failure",
    "transition",
]
