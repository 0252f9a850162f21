"""Session state and its transition function.

A session moves through four statuses::

    IDLE --LoadStarted--> LOADING --DataLoaded--> SUCCESS
                                  --LoadFailed--> FAILED --DismissError / Tick--> IDLE

Sort commands are accepted in every status and re-sort whatever records
are currently held.  :func:`transition` is pure: it never touches the
network, the clock, or the output.
"""

from dataclasses import dataclass, field, replace
from enum import Enum

from src.client.errors import LeaderboardError, TransportError
from src.processor.transform import sort_records
from src.schema.models import AffiliateRecord, QueryConfig, SortState

ERROR_DISMISS_SECONDS = 5.0

TRANSPORT_FAILURE_MESSAGE = (
    "Network Error: The affiliate API could not be reached. Check the "
    "connection, or ask the API administrator to whitelist this host "
    "(cross-origin requests must be allowed for browser-hosted pages)."
)


class SessionStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionState:
    """Everything the controller knows about the current session."""
    status: SessionStatus = SessionStatus.IDLE
    records: tuple[AffiliateRecord, ...] = ()
    sort: SortState = field(default_factory=SortState)
    error_message: str | None = None
    error_expires_at: float | None = None

    @property
    def loading(self) -> bool:
        return self.status is SessionStatus.LOADING


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LoadStarted:
    pass


@dataclass(frozen=True)
class DataLoaded:
    records: tuple[AffiliateRecord, ...]


@dataclass(frozen=True)
class LoadFailed:
    message: str
    at: float


@dataclass(frozen=True)
class SetSortField:
    field: str


@dataclass(frozen=True)
class ToggleSortOrder:
    pass


@dataclass(frozen=True)
class DismissError:
    pass


@dataclass(frozen=True)
class Tick:
    now: float


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------

def _resorted(state: SessionState, sort: SortState) -> SessionState:
    return replace(state, sort=sort,
                   records=tuple(sort_records(list(state.records), sort)))


def _cleared(state: SessionState) -> SessionState:
    status = SessionStatus.IDLE if state.status is SessionStatus.FAILED else state.status
    return replace(state, status=status, error_message=None,
                   error_expires_at=None)


def transition(state: SessionState, command) -> SessionState:
    """Return the state that follows *state* after *command*."""
    if isinstance(command, LoadStarted):
        return replace(state, status=SessionStatus.LOADING,
                       error_message=None, error_expires_at=None)

    if isinstance(command, DataLoaded):
        records = tuple(sort_records(list(command.records), state.sort))
        return replace(state, status=SessionStatus.SUCCESS, records=records)

    if isinstance(command, LoadFailed):
        return replace(state, status=SessionStatus.FAILED,
                       error_message=command.message,
                       error_expires_at=command.at + ERROR_DISMISS_SECONDS)

    if isinstance(command, SetSortField):
        return _resorted(state, replace(state.sort, field=command.field))

    if isinstance(command, ToggleSortOrder):
        return _resorted(state, replace(state.sort,
                                        order=state.sort.order.toggled()))

    if isinstance(command, DismissError):
        if state.error_message is None:
            return state
        return _cleared(state)

    if isinstance(command, Tick):
        if (state.error_expires_at is not None
                and command.now >= state.error_expires_at):
            return _cleared(state)
        return state

    raise TypeError(f"Unknown command: {command!r}")


# ---------------------------------------------------------------------------
# User-facing failure messages
# ---------------------------------------------------------------------------

def describe_failure(error: LeaderboardError, config: QueryConfig) -> str:
    """Message shown in the error banner for a failed load."""
    if isinstance(error, TransportError):
        return TRANSPORT_FAILURE_MESSAGE
    return f"Failed to load {config.affiliate_code}'s affiliate data. Please try again."
