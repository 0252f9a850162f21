"""Leaderboard view-model builder.

Turns an already-sorted list of ``AffiliateRecord`` objects into a
``LeaderboardView``: ranked rows with every display string precomputed,
or an empty-state block when there is nothing to rank.  The output
adapters (HTML, PPTX) only ever read the view.
"""

import calendar
import datetime

from src.schema.design_system import (
    display_text,
    format_currency,
    format_date,
    format_grouped,
    tier_for_rank,
)
from src.schema.models import (
    AffiliateRecord,
    EmptyState,
    LeaderboardRow,
    LeaderboardView,
    QueryConfig,
    SortState,
)

EMPTY_TITLE = "No Data Found"
EMPTY_REASONS = [
    "No activity in the specified date range",
    "API connection issues",
    "Host not whitelisted by the API",
]


def describe_period(start: str, end: str) -> str:
    """Human label for a date range.

    A range covering exactly one calendar month reads "October 2025";
    anything else reads "2025-10-01 to 2025-11-15".
    """
    try:
        s = datetime.date.fromisoformat(start)
        e = datetime.date.fromisoformat(end)
    except (TypeError, ValueError):
        if start and end:
            return f"{start} to {end}"
        return start or end or "the selected period"

    last_day = calendar.monthrange(s.year, s.month)[1]
    if (s.day == 1 and e.year == s.year and e.month == s.month
            and e.day == last_day):
        return f"{calendar.month_name[s.month]} {s.year}"
    return f"{s.isoformat()} to {e.isoformat()}"


def build_empty_state(config: QueryConfig | None = None) -> EmptyState:
    """Empty-state copy naming the requested code and period when known."""
    if config is None:
        message = "No affiliate data found."
    else:
        period = describe_period(config.date_start, config.date_end)
        message = (f"No data found for {config.affiliate_code}'s "
                   f"affiliate code in {period}.")
    return EmptyState(title=EMPTY_TITLE, message=display_text(message),
                      reasons=list(EMPTY_REASONS))


def build_row(record: AffiliateRecord, rank: int) -> LeaderboardRow:
    """Display row for *record* at 1-based *rank*."""
    return LeaderboardRow(
        rank=rank,
        tier=tier_for_rank(rank),
        code=display_text(record.code),
        last_active=format_date(record.last_active),
        total_wagered=format_currency(record.total_wagered),
        total_earnings=format_currency(record.total_earnings),
        users_registered=format_grouped(record.users_registered),
    )


def build_view(records: list[AffiliateRecord], sort: SortState,
               config: QueryConfig | None = None, loading: bool = False,
               error_message: str | None = None) -> LeaderboardView:
    """Build the view for *records*, which must already be sorted."""
    rows = [build_row(record, rank)
            for rank, record in enumerate(records, start=1)]
    return LeaderboardView(
        rows=rows,
        sort=sort,
        empty_state=None if rows else build_empty_state(config),
        loading=loading,
        error_message=(display_text(error_message)
                       if error_message is not None else None),
    )
