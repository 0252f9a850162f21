"""Leaderboard generator package — view-model and output adapters.

Consumes sorted AffiliateRecords to produce display output.

Modules:
    view: LeaderboardView construction (ranks, tiers, formatted values)
    html_builder: HTML page / leaderboard container
    pptx_builder: One-slide PPTX deck
    charts: Total-wagered column chart
    export: CSV export
"""

from .charts import add_wagered_chart
from .export import export_csv, records_to_frame
from .html_builder import HTMLBuilder, build_html
from .pptx_builder import PPTXBuilder, build_presentation
from .view import build_empty_state, build_row, build_view, describe_period

__all__ = [
    "HTMLBuilder",
    "PPTXBuilder",
    "add_wagered_chart",
    "build_empty_state",
    "build_html",
    "build_presentation",
    "build_row",
    "build_view",
    "describe_period",
    "export_csv",
    "records_to_frame",
]
