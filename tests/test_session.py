"""Tests for session state transitions and the leaderboard controller."""

from unittest.mock import MagicMock

import pytest

from src.client.errors import HTTPError, ResponseParseError, TransportError
from src.schema.models import AffiliateRecord, QueryConfig, SortOrder, SortState
from src.session.controller import LeaderboardController
from src.session.state import (
    ERROR_DISMISS_SECONDS,
    TRANSPORT_FAILURE_MESSAGE,
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


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _rec(code, wagered):
    return AffiliateRecord(code=code, total_wagered=wagered)


@pytest.fixture
def records():
    return (_rec("b", 10), _rec("a", 5), _rec("c", 20))


@pytest.fixture
def loaded(records):
    return transition(SessionState(), DataLoaded(records))


class FakeClock:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client():
    return MagicMock()


@pytest.fixture
def renders():
    return []


@pytest.fixture
def controller(client, clock, renders):
    return LeaderboardController(
        QueryConfig(credential="key"),
        client=client,
        renderer=lambda view, state: renders.append((view, state)),
        clock=clock,
    )


# ---------------------------------------------------------------------------
# transition
# ---------------------------------------------------------------------------

class TestTransition:
    def test_initial_state(self):
        state = SessionState()
        assert state.status is SessionStatus.IDLE
        assert state.records == ()
        assert state.sort == SortState()

    def test_load_started(self):
        failed = SessionState(status=SessionStatus.FAILED,
                              error_message="x", error_expires_at=5.0)
        state = transition(failed, LoadStarted())
        assert state.status is SessionStatus.LOADING
        assert state.loading
        assert state.error_message is None

    def test_data_loaded_sorts(self, loaded):
        assert loaded.status is SessionStatus.SUCCESS
        assert [r.code for r in loaded.records] == ["c", "b", "a"]

    def test_data_loaded_replaces_records(self, loaded):
        state = transition(loaded, DataLoaded((_rec("z", 1),)))
        assert [r.code for r in state.records] == ["z"]

    def test_data_loaded_keeps_sort(self, records):
        state = SessionState(sort=SortState("code", SortOrder.ASC))
        state = transition(state, DataLoaded(records))
        assert state.sort == SortState("code", SortOrder.ASC)
        assert [r.code for r in state.records] == ["a", "b", "c"]

    def test_set_sort_field(self, loaded):
        state = transition(loaded, SetSortField("code"))
        assert state.sort.field == "code"
        assert state.sort.order is SortOrder.DESC
        assert [r.code for r in state.records] == ["c", "b", "a"]

    def test_toggle_order(self, loaded):
        state = transition(loaded, ToggleSortOrder())
        assert state.sort.order is SortOrder.ASC
        assert [r.code for r in state.records] == ["a", "b", "c"]
        state = transition(state, ToggleSortOrder())
        assert state.sort.order is SortOrder.DESC

    def test_sort_while_loading(self, loaded):
        state = transition(loaded, LoadStarted())
        state = transition(state, ToggleSortOrder())
        assert state.status is SessionStatus.LOADING
        assert [r.code for r in state.records] == ["a", "b", "c"]

    def test_load_failed(self, loaded):
        state = transition(loaded, LoadFailed("nope", at=10.0))
        assert state.status is SessionStatus.FAILED
        assert state.error_message == "nope"
        assert state.error_expires_at == 10.0 + ERROR_DISMISS_SECONDS
        assert state.records == loaded.records

    def test_dismiss_error(self):
        failed = transition(SessionState(), LoadFailed("nope", at=0.0))
        state = transition(failed, DismissError())
        assert state.status is SessionStatus.IDLE
        assert state.error_message is None
        assert state.error_expires_at is None

    def test_dismiss_without_error_is_noop(self, loaded):
        assert transition(loaded, DismissError()) is loaded

    def test_tick_before_expiry(self):
        failed = transition(SessionState(), LoadFailed("nope", at=0.0))
        assert transition(failed, Tick(ERROR_DISMISS_SECONDS - 0.1)) is failed

    def test_tick_at_expiry(self):
        failed = transition(SessionState(), LoadFailed("nope", at=0.0))
        state = transition(failed, Tick(ERROR_DISMISS_SECONDS))
        assert state.status is SessionStatus.IDLE
        assert state.error_message is None

    def test_tick_without_error(self, loaded):
        assert transition(loaded, Tick(1e9)) is loaded

    def test_unknown_command(self):
        with pytest.raises(TypeError):
            transition(SessionState(), object())


class TestDescribeFailure:
    def test_transport(self):
        msg = describe_failure(TransportError("down"), QueryConfig())
        assert msg == TRANSPORT_FAILURE_MESSAGE
        assert "whitelist" in msg

    @pytest.mark.parametrize("error", [HTTPError(500),
                                       ResponseParseError("bad json")])
    def test_generic(self, error):
        msg = describe_failure(error, QueryConfig(affiliate_code="Colby"))
        assert msg == "Failed to load Colby's affiliate data. Please try again."


# ---------------------------------------------------------------------------
# LeaderboardController
# ---------------------------------------------------------------------------

class TestControllerLoad:
    def test_success(self, controller, client, renders):
        client.fetch_affiliates.return_value = {"affiliates": [
            {"code": "a", "total_wagered": "$5"},
            {"code": "b", "totalWagered": 50},
        ]}
        state = controller.load()

        client.fetch_affiliates.assert_called_once_with(
            ["Colby"], "2025-10-01", "2025-10-31")
        assert state.status is SessionStatus.SUCCESS
        assert [r.code for r in controller.records] == ["b", "a"]

        first_view, _ = renders[0]
        assert first_view.loading is True
        last_view, _ = renders[-1]
        assert last_view.loading is False
        assert [row.code for row in last_view.rows] == ["b", "a"]
        assert last_view.rows[0].tier.value == "gold"

    def test_unusable_body_renders_empty_state(self, controller, client, renders):
        client.fetch_affiliates.return_value = None
        state = controller.load()
        assert state.status is SessionStatus.SUCCESS
        view, _ = renders[-1]
        assert view.is_empty
        assert view.empty_state is not None

    def test_transport_failure(self, controller, client):
        client.fetch_affiliates.side_effect = TransportError("refused")
        state = controller.load()
        assert state.status is SessionStatus.FAILED
        assert state.error_message == TRANSPORT_FAILURE_MESSAGE

    def test_http_500_then_auto_dismiss(self, controller, client, clock, renders):
        client.fetch_affiliates.side_effect = HTTPError(500)
        state = controller.load()

        assert state.status is SessionStatus.FAILED
        assert state.error_message == (
            "Failed to load Colby's affiliate data. Please try again.")
        view, _ = renders[-1]
        assert view.loading is False
        assert view.error_message == state.error_message

        clock.now += ERROR_DISMISS_SECONDS - 1
        assert controller.tick().status is SessionStatus.FAILED

        clock.now += 1
        state = controller.tick()
        assert state.status is SessionStatus.IDLE
        assert state.error_message is None
        assert renders[-1][0].error_message is None

    def test_manual_dismiss(self, controller, client):
        client.fetch_affiliates.side_effect = HTTPError(404)
        controller.load()
        assert controller.dismiss_error().status is SessionStatus.IDLE

    def test_no_automatic_retry(self, controller, client, clock):
        client.fetch_affiliates.side_effect = HTTPError(500)
        controller.load()
        clock.now += 60
        controller.tick()
        assert client.fetch_affiliates.call_count == 1

    def test_multiple_codes(self, client, clock):
        ctl = LeaderboardController(QueryConfig(affiliate_code="A,B"),
                                    client=client, clock=clock)
        client.fetch_affiliates.return_value = []
        ctl.load()
        assert client.fetch_affiliates.call_args.args[0] == ["A", "B"]

    def test_load_body(self, controller, client):
        state = controller.load_body([{"code": "x", "total_wagered": 1}])
        assert state.status is SessionStatus.SUCCESS
        client.fetch_affiliates.assert_not_called()

    def test_default_client_from_config(self):
        ctl = LeaderboardController(QueryConfig(credential="secret",
                                                api_url="http://x/y",
                                                timeout_seconds=3))
        assert ctl.client.headers["x-api-key"] == "secret"
        assert ctl.client.base_url == "http://x/y"
        assert ctl.client.timeout == 3


class TestControllerSorting:
    def test_toggle_rerenders(self, controller, renders):
        controller.load_body([{"code": "a", "total_wagered": 1},
                              {"code": "b", "total_wagered": 2}])
        count = len(renders)
        controller.toggle_sort_order()
        assert len(renders) == count + 1
        view, _ = renders[-1]
        assert view.sort.order is SortOrder.ASC
        assert [row.code for row in view.rows] == ["a", "b"]

    def test_set_field(self, controller):
        controller.load_body([{"code": "B", "total_wagered": 1},
                              {"code": "a", "total_wagered": 2}])
        controller.set_sort_field("code")
        assert [r.code for r in controller.records] == ["B", "a"]

    def test_sort_on_empty_data(self, controller, renders):
        controller.toggle_sort_order()
        assert controller.state.sort.order is SortOrder.ASC
        assert renders[-1][0].is_empty

    def test_sort_persists_across_loads(self, controller, client):
        controller.toggle_sort_order()
        client.fetch_affiliates.return_value = [{"code": "a", "total_wagered": 9},
                                                {"code": "b", "total_wagered": 1}]
        controller.load()
        assert [r.code for r in controller.records] == ["b", "a"]

    def test_noop_does_not_render(self, controller, renders):
        controller.dismiss_error()
        controller.tick()
        assert renders == []

    def test_initial_sort(self, client):
        ctl = LeaderboardController(QueryConfig(), client=client,
                                    sort=SortState("code", SortOrder.ASC))
        assert ctl.state.sort.field == "code"
