"""HTML builder engine — renders a LeaderboardView as a host document.

Produces the leaderboard container (ranked ``leaderboard-item`` rows or the
``empty-state`` block) and, around it, a standalone page carrying the
named regions the leaderboard interacts with:

    #sort-by        sort-field selector
    #sort-order     order toggle with a direction icon
    #loading        loading indicator
    #error-message  error banner (#error-text + dismiss button)
    #leaderboard    container, fully replaced on every render

Markup is built with ``lxml.html.builder`` so values are always escaped.

Usage::

    from src.generator.html_builder import HTMLBuilder

    html = HTMLBuilder().build(view)
"""

from pathlib import Path

from lxml import etree, html
from lxml.html import builder as E

from src.schema.models import (
    DesignSystem,
    LeaderboardRow,
    LeaderboardView,
    SortOrder,
)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SORT_FIELD_LABELS = {
    "total_wagered": "Total Wagered",
    "total_earnings": "Total Earnings",
    "users_registered": "Users Registered",
    "conversion_rate": "Conversion Rate",
    "code": "Affiliate Code",
    "last_active": "Last Active",
}

_ORDER_ICONS = {
    SortOrder.ASC: "fas fa-sort-amount-up",
    SortOrder.DESC: "fas fa-sort-amount-down",
}

_HIDDEN = "display: none"
_SHOWN = "display: flex"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def order_icon_class(order: SortOrder) -> str:
    """Icon class for the sort-order toggle."""
    return _ORDER_ICONS[order]


def _metric(value: str, label: str):
    return E.DIV(
        E.CLASS("metric"),
        E.DIV(E.CLASS("metric-value"), value),
        E.DIV(E.CLASS("metric-label"), label),
    )


def _stylesheet(design: DesignSystem) -> str:
    return (
        f"body {{ font-family: '{design.primary_font}', sans-serif; "
        f"background: {design.background}; color: {design.text}; }}\n"
        f".leaderboard-item {{ display: flex; align-items: center; gap: 1rem; "
        f"background: {design.surface}; margin: .5rem 0; padding: 1rem; }}\n"
        f".rank.gold {{ color: {design.gold}; }}\n"
        f".rank.silver {{ color: {design.silver}; }}\n"
        f".rank.bronze {{ color: {design.bronze}; }}\n"
        f".affiliate-meta, .metric-label {{ color: {design.muted_text}; }}\n"
        f".metric-value {{ color: {design.accent}; }}\n"
        f"#error-message {{ background: {design.error}; }}\n"
    )


# ---------------------------------------------------------------------------
# Region builders
# ---------------------------------------------------------------------------

def build_row_element(row: LeaderboardRow, hidden: bool = False):
    """One ``leaderboard-item`` element."""
    rank_class = f"rank {row.tier.value}".strip()
    item = E.DIV(
        E.CLASS("leaderboard-item"),
        E.DIV(E.CLASS(rank_class), str(row.rank)),
        E.DIV(
            E.CLASS("affiliate-info"),
            E.DIV(E.CLASS("affiliate-code"), row.code),
            E.DIV(E.CLASS("affiliate-meta"), f"Last active: {row.last_active}"),
        ),
        _metric(row.total_wagered, "Total Wagered"),
        _metric(row.total_earnings, "Total Earnings"),
        _metric(row.users_registered, "Users"),
    )
    if hidden:
        item.set("style", _HIDDEN)
    return item


def build_empty_state_element(view: LeaderboardView, hidden: bool = False):
    """The ``empty-state`` block."""
    empty = view.empty_state
    block = E.DIV(
        E.CLASS("empty-state"),
        E.I(E.CLASS("fas fa-chart-bar")),
        E.H3(empty.title),
        E.P(empty.message),
    )
    if empty.reasons:
        block.append(E.P("This could be due to:"))
        block.append(E.UL(*[E.LI(reason) for reason in empty.reasons]))
    if hidden:
        block.set("style", _HIDDEN)
    return block


def build_leaderboard_element(view: LeaderboardView):
    """The ``#leaderboard`` container with its full content.

    While loading, existing content is kept in place but hidden.
    """
    container = E.DIV(id="leaderboard")
    if view.is_empty:
        if view.empty_state is not None:
            container.append(build_empty_state_element(view, view.loading))
        return container
    for row in view.rows:
        container.append(build_row_element(row, view.loading))
    return container


def build_controls_element(view: LeaderboardView):
    """Sort selector and order toggle."""
    select = E.SELECT(id="sort-by")
    for value, label in SORT_FIELD_LABELS.items():
        option = E.OPTION(label, value=value)
        if value == view.sort.field:
            option.set("selected", "selected")
        select.append(option)
    return E.DIV(
        E.CLASS("controls"),
        select,
        E.BUTTON(E.I(E.CLASS(order_icon_class(view.sort.order))),
                 id="sort-order", type="button"),
    )


def build_status_elements(view: LeaderboardView):
    """Loading indicator and error banner."""
    loading = E.DIV(E.CLASS("loading"), E.P("Loading..."), id="loading",
                    style=_SHOWN if view.loading else _HIDDEN)
    error = E.DIV(
        E.SPAN(view.error_message or "", id="error-text"),
        E.BUTTON("×", id="error-dismiss", type="button"),
        id="error-message",
        style=_SHOWN if view.error_message else _HIDDEN,
    )
    return loading, error


# ---------------------------------------------------------------------------
# HTMLBuilder
# ---------------------------------------------------------------------------

class HTMLBuilder:
    """Renders a LeaderboardView to HTML.

    Parameters
    ----------
    design : DesignSystem, optional
        Colors and fonts for the page stylesheet.
    title : str
        Page ``<title>`` and heading.
    """

    def __init__(self, design: DesignSystem | None = None,
                 title: str = "Wager Leaderboard") -> None:
        self.design = design or DesignSystem()
        self.title = title

    def build_fragment(self, view: LeaderboardView) -> str:
        """Only the ``#leaderboard`` container, as an HTML string."""
        return html.tostring(build_leaderboard_element(view),
                             encoding="unicode")

    def build(self, view: LeaderboardView) -> str:
        """A complete standalone HTML document."""
        loading, error = build_status_elements(view)
        page = E.HTML(
            E.HEAD(
                E.META(charset="utf-8"),
                E.TITLE(self.title),
                E.STYLE(_stylesheet(self.design)),
            ),
            E.BODY(
                E.H1(self.title),
                build_controls_element(view),
                loading,
                error,
                build_leaderboard_element(view),
            ),
        )
        return "<!DOCTYPE html>\n" + etree.tostring(
            page, method="html", encoding="unicode", pretty_print=True)

    def build_to_file(self, view: LeaderboardView, path: str | Path) -> None:
        """Render the page and write it to a file path."""
        Path(path).write_text(self.build(view), encoding="utf-8")


# ---------------------------------------------------------------------------
# Convenience function
# ---------------------------------------------------------------------------

def build_html(view: LeaderboardView) -> str:
    """One-shot convenience: render a full page with the default design."""
    return HTMLBuilder().build(view)
