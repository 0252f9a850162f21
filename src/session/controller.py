"""Leaderboard controller — owns one session and drives the pipeline.

Sequences fetch → unwrap → normalize → sort → render, feeding every event
through :func:`src.session.state.transition` and handing the resulting
view to a render callback whenever the state changes.

Usage::

    from src.session.controller import LeaderboardController

    controller = LeaderboardController(config, renderer=on_render)
    controller.load()
    controller.toggle_sort_order()
"""

import logging
import time
from typing import Any, Callable

from src.client.errors import LeaderboardError
from src.client.luxdrop import AffiliateClient
from src.generator.view import build_view
from src.processor.ingestion import ingest_response
from src.schema.models import LeaderboardView, QueryConfig, SortState

from .state import (
    DataLoaded,
    DismissError,
    LoadFailed,
    LoadStarted,
    SessionState,
    SetSortField,
    Tick,
    ToggleSortOrder,
    describe_failure,
    transition,
)

logger = logging.getLogger(__name__)

RenderCallback = Callable[[LeaderboardView, SessionState], Any]


class LeaderboardController:
    """Single owner of a leaderboard session.

    Parameters
    ----------
    config : QueryConfig
        Query and resolved credential; fixed for the session.
    client : AffiliateClient, optional
        Built from *config* when omitted.
    renderer : callable, optional
        Called as ``renderer(view, state)`` after every state change.
    sort : SortState, optional
        Initial ordering (default: total wagered, descending).
    clock : callable
        Returns the current time in seconds; drives error auto-dismiss.
    """

    def __init__(self, config: QueryConfig,
                 client: AffiliateClient | None = None,
                 renderer: RenderCallback | None = None,
                 sort: SortState | None = None,
                 clock: Callable[[], float] = time.monotonic) -> None:
        self.config = config
        self.client = client or AffiliateClient(
            config.credential,
            base_url=config.api_url,
            timeout=config.timeout_seconds,
        )
        self.renderer = renderer
        self.clock = clock
        self._state = SessionState(sort=sort or SortState())

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def records(self):
        return list(self._state.records)

    def view(self) -> LeaderboardView:
        """View-model for the current state."""
        return build_view(
            self.records,
            self._state.sort,
            config=self.config,
            loading=self._state.loading,
            error_message=self._state.error_message,
        )

    def dispatch(self, command) -> SessionState:
        """Apply *command*, re-rendering if the state changed."""
        previous = self._state
        self._state = transition(previous, command)
        if self._state != previous and self.renderer is not None:
            self.renderer(self.view(), self._state)
        return self._state

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> SessionState:
        """Fetch, normalize and display the configured affiliates.

        Failures end in the FAILED status with a user-facing message;
        nothing is raised.
        """
        self.dispatch(LoadStarted())
        try:
            body = self.client.fetch_affiliates(
                self.config.codes, self.config.date_start, self.config.date_end,
            )
        except LeaderboardError as exc:
            logger.error("Error loading affiliate data: %s", exc)
            return self.dispatch(LoadFailed(describe_failure(exc, self.config),
                                            self.clock()))
        return self.dispatch(DataLoaded(tuple(ingest_response(body))))

    def load_body(self, body) -> SessionState:
        """Display an already-decoded response body (no network)."""
        self.dispatch(LoadStarted())
        return self.dispatch(DataLoaded(tuple(ingest_response(body))))

    # ------------------------------------------------------------------
    # User interaction
    # ------------------------------------------------------------------

    def set_sort_field(self, field: str) -> SessionState:
        return self.dispatch(SetSortField(field))

    def toggle_sort_order(self) -> SessionState:
        return self.dispatch(ToggleSortOrder())

    def dismiss_error(self) -> SessionState:
        return self.dispatch(DismissError())

    def tick(self) -> SessionState:
        """Expire the error banner once its display time has passed."""
        return self.dispatch(Tick(self.clock()))
