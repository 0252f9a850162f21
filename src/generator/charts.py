"""Chart generation module — renders chart shapes on leaderboard slides.

Converts sorted affiliate records into a python-pptx clustered column chart
of total wagered per affiliate, colored with the design system.

Usage:
    from src.generator.charts import add_wagered_chart

    added = add_wagered_chart(slide, records, design, (7.0, 1.3, 5.8, 5.6))
"""

from __future__ import annotations

import math
from typing import Any

from pptx.chart.data import CategoryChartData
from pptx.dml.color import RGBColor
from pptx.enum.chart import XL_CHART_TYPE
from pptx.util import Inches, Pt

from src.schema.design_system import display_text
from src.schema.models import AffiliateRecord, DesignSystem


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _hex_to_rgb(hex_color: str) -> RGBColor:
    """Convert a hex color string (#RRGGBB) to an RGBColor."""
    hex_color = hex_color.lstrip("#")
    return RGBColor(
        int(hex_color[0:2], 16),
        int(hex_color[2:4], 16),
        int(hex_color[4:6], 16),
    )


def _safe_value(value: Any) -> float:
    """Coerce a value to a safe float for chart data.  None/NaN/inf → 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0.0
        if math.isnan(number) or math.isinf(number):
            return 0.0
        return number
    return 0.0


# ---------------------------------------------------------------------------
# Chart data builders
# ---------------------------------------------------------------------------

def build_wagered_chart_data(
    records: list[AffiliateRecord],
    limit: int | None = None,
) -> CategoryChartData | None:
    """One category per affiliate, one "Total Wagered" series.

    Returns None when there is nothing to chart.
    """
    if limit is not None:
        records = records[:limit]
    if not records:
        return None

    chart_data = CategoryChartData()
    chart_data.categories = [display_text(r.code) for r in records]
    chart_data.add_series(
        "Total Wagered",
        tuple(_safe_value(r.total_wagered) for r in records),
    )
    return chart_data


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def add_wagered_chart(
    slide,
    records: list[AffiliateRecord],
    design: DesignSystem,
    position: tuple[float, float, float, float],
    limit: int | None = None,
) -> bool:
    """Add a total-wagered column chart to *slide*.

    *position* is ``(left, top, width, height)`` in inches.  Returns True
    if a chart was added.
    """
    chart_data = build_wagered_chart_data(records, limit)
    if chart_data is None:
        return False

    left, top, width, height = position
    chart_frame = slide.shapes.add_chart(
        XL_CHART_TYPE.COLUMN_CLUSTERED,
        Inches(left), Inches(top), Inches(width), Inches(height),
        chart_data,
    )
    chart = chart_frame.chart
    chart.has_legend = False
    chart.font.size = Pt(design.caption_size_pt)
    chart.font.name = design.primary_font

    series = chart.plots[0].series[0]
    series.format.fill.solid()
    series.format.fill.fore_color.rgb = _hex_to_rgb(design.accent)
    return True
